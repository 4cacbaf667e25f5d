from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from taskflow.core.database import get_db

router = APIRouter()

@router.get("/z")
def healthz():
    # process is up, storage not checked
    return {"status": "ok"}

@router.get("/db")
def health_db(db: Session = Depends(get_db)):
    # storage errors bubble up and are rendered as 500 "unavailable"
    db.execute(text("SELECT 1"))
    return {"status": "ok", "database": "up"}
