"""Server-side login sessions"""

from sqlalchemy import Column, String, DateTime
from taskflow.core.database import Base, utcnow


class UserSession(Base):
    __tablename__ = "sessions"

    token_hash = Column(String(64), primary_key=True)
    user_id = Column(String(36), nullable=False, index=True)
    username = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
