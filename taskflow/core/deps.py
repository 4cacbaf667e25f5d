"""Request dependencies shared by the routers, including the auth gate."""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from taskflow.core.config import Settings
from taskflow.core.database import get_db
from taskflow.core.errors import Unauthenticated
from taskflow.schemas.session import SessionIdentity
from taskflow.services.session_service import validate_session


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_token(request: Request) -> Optional[str]:
    return request.cookies.get(request.app.state.settings.SESSION_COOKIE_NAME)


def require_session(
    request: Request,
    db: Session = Depends(get_db),
) -> SessionIdentity:
    """Resolve the caller or stop the request with 401.

    Must guard every task route and /api/auth/me.
    """
    identity = validate_session(db, get_session_token(request))
    if identity is None:
        raise Unauthenticated("Not authenticated")
    return identity
