from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from taskflow.core.database import get_db
from taskflow.core.deps import require_session
from taskflow.schemas.session import SessionIdentity
from taskflow.schemas.task import TaskCreate, TaskResponse, TaskStats, TaskUpdate
from taskflow.schemas.user import MessageResponse
from taskflow.services import task_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=List[TaskResponse])
def list_tasks(
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
    priority: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    completed: Optional[bool] = Query(None),
):
    return task_service.list_tasks(
        db, identity.user_id, priority=priority, category=category, completed=completed
    )


@router.get("/stats", response_model=TaskStats)
def stats(
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    return task_service.task_stats(db, identity.user_id)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: str,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    return task_service.get_task(db, identity.user_id, task_id)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    return task_service.create_task(
        db,
        identity.user_id,
        title=task_data.title,
        description=task_data.description,
        priority=task_data.priority,
        category=task_data.category,
        due_date=task_data.due_date,
    )


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    task_data: Optional[TaskUpdate] = Body(None),
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    # no body at all is an empty update
    changes = task_data.model_dump(exclude_unset=True) if task_data is not None else {}
    return task_service.update_task(db, identity.user_id, task_id, changes)


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: str,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    task_service.delete_task(db, identity.user_id, task_id)
    return {"message": "Task deleted successfully"}
