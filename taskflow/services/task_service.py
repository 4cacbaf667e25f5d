"""Task service

Every query here is scoped by owner. A task id on its own never selects a
row: lookups, updates and deletes all filter on id and user_id together.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Query, Session

from taskflow.core.database import utcnow
from taskflow.core.errors import NotFound, ValidationError
from taskflow.models.task import PRIORITIES, Task
from taskflow.schemas.task import TaskStats

TASK_NOT_FOUND = "Task not found"

MUTABLE_FIELDS = ("title", "description", "priority", "category", "due_date", "completed")


def _owned(db: Session, user_id: str, task_id: str) -> Query:
    return db.query(Task).filter(Task.id == task_id, Task.user_id == user_id)


def _check_priority(priority: str) -> str:
    if priority not in PRIORITIES:
        raise ValidationError("Priority must be one of: " + ", ".join(PRIORITIES))
    return priority


def list_tasks(
    db: Session,
    user_id: str,
    priority: Optional[str] = None,
    category: Optional[str] = None,
    completed: Optional[bool] = None,
) -> List[Task]:
    query = db.query(Task).filter(Task.user_id == user_id)

    if priority is not None:
        query = query.filter(Task.priority == _check_priority(priority))
    if category is not None:
        query = query.filter(Task.category == category)
    if completed is not None:
        query = query.filter(Task.completed.is_(completed))

    return query.order_by(Task.created_at.desc()).all()


def get_task(db: Session, user_id: str, task_id: str) -> Task:
    task = _owned(db, user_id, task_id).first()
    if task is None:
        raise NotFound(TASK_NOT_FOUND)
    return task


def create_task(
    db: Session,
    user_id: str,
    title: Optional[str],
    description: Optional[str] = None,
    priority: Optional[str] = None,
    category: Optional[str] = None,
    due_date: Optional[date] = None,
) -> Task:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Title is required")

    now = utcnow()
    task = Task(
        user_id=user_id,
        title=title,
        description=(description or "").strip(),
        priority=_check_priority(priority) if priority is not None else "medium",
        category=(category or "").strip() or "general",
        due_date=due_date,
        completed=False,
        created_at=now,
        updated_at=now,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def _clean_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    values = {}
    for field, value in changes.items():
        if field not in MUTABLE_FIELDS:
            continue

        if field == "title":
            value = (value or "").strip()
            if not value:
                raise ValidationError("Title is required")
        elif field == "description":
            value = (value or "").strip()
        elif field == "category":
            value = (value or "").strip() or "general"
        elif field in ("priority", "completed"):
            # null means "leave as is" for non-nullable columns
            if value is None:
                continue
            if field == "priority":
                _check_priority(value)
            else:
                value = bool(value)

        values[field] = value
    return values


def update_task(db: Session, user_id: str, task_id: str, changes: Dict[str, Any]) -> Task:
    values = _clean_changes(changes)
    values["updated_at"] = utcnow()

    matched = _owned(db, user_id, task_id).update(values, synchronize_session=False)
    if not matched:
        db.rollback()
        raise NotFound(TASK_NOT_FOUND)
    db.commit()

    return get_task(db, user_id, task_id)


def delete_task(db: Session, user_id: str, task_id: str) -> None:
    deleted = _owned(db, user_id, task_id).delete(synchronize_session=False)
    if not deleted:
        db.rollback()
        raise NotFound(TASK_NOT_FOUND)
    db.commit()


def task_stats(db: Session, user_id: str) -> TaskStats:
    base = db.query(Task).filter(Task.user_id == user_id)
    pending = base.filter(Task.completed.is_(False))
    today = utcnow().date()

    total = base.count()
    completed = base.filter(Task.completed.is_(True)).count()
    return TaskStats(
        total=total,
        completed=completed,
        pending=total - completed,
        high_priority_pending=pending.filter(Task.priority == "high").count(),
        overdue=pending.filter(Task.due_date.is_not(None), Task.due_date < today).count(),
    )
