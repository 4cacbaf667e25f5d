import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from taskflow.core.config import Settings
from taskflow.core.database import get_db
from taskflow.core.deps import get_session_token, get_settings, require_session
from taskflow.core.errors import NotFound
from taskflow.schemas.session import SessionIdentity
from taskflow.schemas.user import AuthResponse, LoginRequest, MessageResponse, UserCreate, UserResponse
from taskflow.services import session_service, user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def set_session_cookie(response: Response, settings: Settings, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_HOURS * 3600,
        path="/",
        domain=settings.SESSION_COOKIE_DOMAIN,
        secure=settings.SESSION_COOKIE_SECURE,
        httponly=True,
        samesite=settings.SESSION_COOKIE_SAMESITE,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        domain=settings.SESSION_COOKIE_DOMAIN,
        secure=settings.SESSION_COOKIE_SECURE,
        httponly=True,
        samesite=settings.SESSION_COOKIE_SAMESITE,
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Create an account. Does not log the user in."""
    user = user_service.create_user(
        db,
        user_data.username,
        user_data.email,
        user_data.password,
        rounds=settings.BCRYPT_ROUNDS,
        min_password_length=settings.MIN_PASSWORD_LENGTH,
    )
    return {"message": "User created successfully", "user": UserResponse.model_validate(user)}


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = user_service.authenticate(db, credentials.email, credentials.password, rounds=settings.BCRYPT_ROUNDS)

    token = session_service.create_session(db, user.id, user.username, ttl_hours=settings.SESSION_TTL_HOURS)
    set_session_cookie(response, settings, token)

    logger.info("User %s logged in", user.id)
    return {"message": "Login successful", "user": UserResponse.model_validate(user)}


@router.post("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    # no gate: logging out without a live session still clears the cookie
    session_service.destroy_session(db, get_session_token(request))
    clear_session_cookie(response, settings)
    return {"message": "Logout successful"}


@router.get("/me", response_model=UserResponse)
def me(
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    user = user_service.find_by_id(db, identity.user_id)
    if user is None:
        raise NotFound("User not found")
    return user
