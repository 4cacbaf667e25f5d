from taskflow.models.user import User
from taskflow.models.task import Task
from taskflow.models.session import UserSession

__all__ = ["User", "Task", "UserSession"]
