"""Pydantic schemas for task request/response validation."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

Priority = Literal["low", "medium", "high"]


class CamelModel(BaseModel):
    """JSON keys are camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    category: Optional[str] = None
    due_date: Optional[date] = None

    @field_validator("due_date", mode="before")
    @classmethod
    def blank_date_is_none(cls, value):
        # date inputs left empty are posted as ""
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TaskUpdate(TaskCreate):
    """Schema for updating an existing task.

    Unknown keys (id, userId, createdAt, ...) are ignored by pydantic, so
    they can never reach the model.
    """

    completed: Optional[bool] = None


class TaskResponse(CamelModel):
    id: str
    user_id: str
    title: str
    description: str
    priority: str
    category: str
    due_date: Optional[date]
    completed: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class TaskStats(CamelModel):
    total: int
    completed: int
    pending: int
    high_priority_pending: int
    overdue: int
