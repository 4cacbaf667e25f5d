"""Session manager: opaque cookie tokens mapped to server-side rows."""

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from taskflow.core.database import utcnow
from taskflow.core.security import hash_session_token, new_session_token
from taskflow.models.session import UserSession
from taskflow.schemas.session import SessionIdentity

logger = logging.getLogger(__name__)

# token_urlsafe(32) yields 43 chars; anything far longer is garbage
MAX_TOKEN_LENGTH = 256


def create_session(db: Session, user_id: str, username: str, ttl_hours: int = 24) -> str:
    token = new_session_token()
    now = utcnow()
    db.add(UserSession(
        token_hash=hash_session_token(token),
        user_id=user_id,
        username=username,
        created_at=now,
        expires_at=now + timedelta(hours=ttl_hours),
    ))
    db.commit()
    return token


def validate_session(db: Session, token: Optional[str]) -> Optional[SessionIdentity]:
    if not token or len(token) > MAX_TOKEN_LENGTH:
        return None

    row = db.query(UserSession).filter(UserSession.token_hash == hash_session_token(token)).first()
    if row is None:
        return None

    if row.expires_at <= utcnow():
        db.delete(row)
        db.commit()
        return None

    return SessionIdentity.model_validate(row)


def destroy_session(db: Session, token: Optional[str]) -> None:
    if not token or len(token) > MAX_TOKEN_LENGTH:
        return
    db.query(UserSession).filter(
        UserSession.token_hash == hash_session_token(token)
    ).delete(synchronize_session=False)
    db.commit()


def purge_expired(db: Session) -> int:
    removed = db.query(UserSession).filter(
        UserSession.expires_at <= utcnow()
    ).delete(synchronize_session=False)
    db.commit()
    if removed:
        logger.info("Purged %d expired sessions", removed)
    return removed
