"""Task model"""

import uuid

from sqlalchemy import Column, String, DateTime, Date, Boolean
from taskflow.core.database import Base, utcnow

PRIORITIES = ("low", "medium", "high")


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # owner id, immutable; plain column because users are never deleted
    user_id = Column(String(36), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    priority = Column(String, nullable=False, default="medium")
    category = Column(String, nullable=False, default="general")
    due_date = Column(Date, nullable=True)
    completed = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, nullable=False)
