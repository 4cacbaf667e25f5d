"""Error kinds raised by the services.

Each kind maps to exactly one HTTP status, chosen in ``taskflow.main``.
Messages are safe to show to clients.
"""

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNAUTHENTICATED = "unauthenticated"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"


class TaskflowError(Exception):
    kind = ErrorKind.INTERNAL
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskflowError):
    kind = ErrorKind.VALIDATION
    default_message = "Invalid request"


class ConflictError(TaskflowError):
    kind = ErrorKind.CONFLICT
    default_message = "Already exists"


class Unauthenticated(TaskflowError):
    kind = ErrorKind.UNAUTHENTICATED
    default_message = "Not authenticated"


class NotFound(TaskflowError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Not found"


class Unavailable(TaskflowError):
    # retryable: the storage backend could not be reached in time
    kind = ErrorKind.UNAVAILABLE
    default_message = "Service temporarily unavailable"


class InternalError(TaskflowError):
    kind = ErrorKind.INTERNAL
