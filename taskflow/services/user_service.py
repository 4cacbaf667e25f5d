"""Credential store: user records and password checks."""

import logging
from functools import lru_cache
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskflow.core.errors import ConflictError, Unauthenticated, ValidationError
from taskflow.core.security import BCRYPT_MAX_BYTES, check_password, hash_password
from taskflow.models.user import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
EMAIL_TAKEN = "Email already registered"


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> str:
    # checked against unknown emails so both login failures cost one bcrypt run
    return hash_password("taskflow-dummy-password", rounds=rounds)


def find_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def find_by_id(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def verify_password(user: User, password: str) -> bool:
    return check_password(password, user.password_hash)


def create_user(
    db: Session,
    username: Optional[str],
    email: Optional[str],
    password: Optional[str],
    rounds: int = 10,
    min_password_length: int = 6,
) -> User:
    username = (username or "").strip()
    email = (email or "").strip()
    if not username or not email or not password:
        raise ValidationError("All fields are required")
    if len(password) < min_password_length:
        raise ValidationError(f"Password must be at least {min_password_length} characters")
    if len(password.encode()) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")

    if find_by_email(db, email) is not None:
        raise ConflictError(EMAIL_TAKEN)

    user = User(username=username, email=email, password_hash=hash_password(password, rounds=rounds))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race against another signup; the unique index decides
        db.rollback()
        raise ConflictError(EMAIL_TAKEN)
    db.refresh(user)

    logger.info("Created user %s", user.id)
    return user


def authenticate(db: Session, email: Optional[str], password: Optional[str], rounds: int = 10) -> User:
    """Return the user owning these credentials.

    Unknown email and wrong password fail identically.
    """
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = find_by_email(db, email.strip())
    if user is None:
        check_password(password, _dummy_hash(rounds))
        logger.info("Login failed: unknown email")
        raise Unauthenticated(INVALID_CREDENTIALS)

    if not verify_password(user, password):
        logger.info("Login failed for user %s", user.id)
        raise Unauthenticated(INVALID_CREDENTIALS)

    return user
