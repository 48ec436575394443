"""
Error handling utilities for the Task Manager
Classifies database, transport and authentication failures into a single taxonomy
and produces user-facing messages for them
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, TypeVar

from pydantic import ValidationError
from sqlalchemy.exc import InterfaceError, NoResultFound, OperationalError, SQLAlchemyError

from .logging import log_error

T = TypeVar("T")


class ErrorType(str, Enum):
    """Standard error types used throughout the application"""
    AUTHENTICATION = "AUTHENTICATION"
    AUTHORIZATION = "AUTHORIZATION"
    VALIDATION = "VALIDATION"
    NETWORK = "NETWORK"
    DATABASE = "DATABASE"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN = "UNKNOWN"


ERROR_MESSAGES: Dict[ErrorType, str] = {
    ErrorType.AUTHENTICATION: "Please sign in to continue",
    ErrorType.AUTHORIZATION: "You don't have permission to perform this action",
    ErrorType.VALIDATION: "Please check your input and try again",
    ErrorType.NETWORK: "Connection error. Please check your internet connection",
    ErrorType.DATABASE: "Something went wrong. Please try again later",
    ErrorType.NOT_FOUND: "The requested item could not be found",
    ErrorType.UNKNOWN: "An unexpected error occurred. Please try again",
}

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
INSUFFICIENT_PRIVILEGE = "42501"


@dataclass
class AppError:
    """Structured error value returned by the data access layer"""
    type: ErrorType
    message: str
    code: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    original_error: Optional[BaseException] = field(default=None, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"error": self.type.value, "message": self.message}
        if self.code:
            data["code"] = self.code
        if self.details:
            data["details"] = self.details
        return data


class RecordNotFoundException(Exception):
    """Raised when a row is absent or owned by another user"""
    def __init__(self, entity: str, record_id: Any):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} with ID {record_id} not found")


class TaskNotFoundException(RecordNotFoundException):
    """Raised when a task is not found"""
    def __init__(self, task_id: Any):
        super().__init__("Task", task_id)


class CategoryNotFoundException(RecordNotFoundException):
    """Raised when a category is not found"""
    def __init__(self, category_id: Any):
        super().__init__("Category", category_id)


class PermissionDeniedException(Exception):
    """Raised when a row policy rejects an operation"""
    pass


class AuthenticationException(Exception):
    """Raised when there is no session, or the session token is invalid"""
    pass


def _extract_code(error: BaseException) -> Optional[str]:
    """Return the SQLSTATE carried by a driver error, if any."""
    for candidate in (error, getattr(error, "orig", None)):
        if candidate is None:
            continue
        code = getattr(candidate, "pgcode", None) or getattr(candidate, "sqlstate", None)
        if code:
            return str(code)
    return None


def _code_from_message(message: str) -> Optional[str]:
    """SQLite carries no SQLSTATE; recover one from its constraint messages."""
    lowered = message.lower()
    if "unique constraint failed" in lowered or "duplicate key" in lowered:
        return UNIQUE_VIOLATION
    if "foreign key constraint failed" in lowered or "violates foreign key" in lowered:
        return FOREIGN_KEY_VIOLATION
    if "permission denied" in lowered or "insufficient privilege" in lowered:
        return INSUFFICIENT_PRIVILEGE
    return None


def make_error(error_type: ErrorType, message: Optional[str] = None, **details: Any) -> AppError:
    """Build an AppError without an underlying exception (local rule failures)."""
    return AppError(type=error_type, message=message or ERROR_MESSAGES[error_type], details=details)


def handle_database_error(error: Optional[BaseException], context: Optional[str] = None) -> AppError:
    """
    Convert a failure into an AppError.

    Args:
        error: The exception raised by the database, driver, or auth layer
        context: Description of the operation, kept in the error details

    Returns:
        Structured AppError
    """
    if error is None:
        return make_error(ErrorType.UNKNOWN)

    if isinstance(error, (RecordNotFoundException, NoResultFound)):
        return AppError(
            type=ErrorType.NOT_FOUND,
            message=ERROR_MESSAGES[ErrorType.NOT_FOUND],
            original_error=error,
        )

    if isinstance(error, PermissionDeniedException):
        return AppError(
            type=ErrorType.AUTHORIZATION,
            message=ERROR_MESSAGES[ErrorType.AUTHORIZATION],
            code=INSUFFICIENT_PRIVILEGE,
            original_error=error,
        )

    if isinstance(error, AuthenticationException):
        return AppError(
            type=ErrorType.AUTHENTICATION,
            message=str(error) or ERROR_MESSAGES[ErrorType.AUTHENTICATION],
            original_error=error,
        )

    if isinstance(error, ValidationError):
        messages = [e.get("msg", "") for e in error.errors()]
        return AppError(
            type=ErrorType.VALIDATION,
            message=messages[0] if messages else ERROR_MESSAGES[ErrorType.VALIDATION],
            original_error=error,
        )

    message = str(error)
    code = _extract_code(error) or _code_from_message(message)

    if code == UNIQUE_VIOLATION:
        return AppError(type=ErrorType.VALIDATION, message="This item already exists",
                        code=code, original_error=error)
    if code == FOREIGN_KEY_VIOLATION:
        return AppError(type=ErrorType.VALIDATION,
                        message="Cannot delete item that is being used elsewhere",
                        code=code, original_error=error)
    if code == INSUFFICIENT_PRIVILEGE:
        return AppError(type=ErrorType.AUTHORIZATION, message=ERROR_MESSAGES[ErrorType.AUTHORIZATION],
                        code=code, original_error=error)

    lowered = message.lower()
    if (
        isinstance(error, (OperationalError, InterfaceError, ConnectionError, TimeoutError))
        or "fetch" in lowered
        or "network" in lowered
    ):
        return AppError(type=ErrorType.NETWORK, message=ERROR_MESSAGES[ErrorType.NETWORK],
                        code=code, original_error=error)

    if isinstance(error, SQLAlchemyError):
        return AppError(type=ErrorType.DATABASE, message=ERROR_MESSAGES[ErrorType.DATABASE],
                        code=code, details={"context": context}, original_error=error)

    if "auth" in lowered or "token" in lowered:
        return AppError(type=ErrorType.AUTHENTICATION, message=ERROR_MESSAGES[ErrorType.AUTHENTICATION],
                        original_error=error)

    return AppError(type=ErrorType.UNKNOWN, message=ERROR_MESSAGES[ErrorType.UNKNOWN],
                    details={"context": context}, original_error=error)


def format_error_message(error: AppError) -> str:
    """User-friendly message for an AppError."""
    return error.message or ERROR_MESSAGES.get(error.type) or ERROR_MESSAGES[ErrorType.UNKNOWN]


async def safe_execute(
    operation: Callable[[], Awaitable[T]],
    context: str,
) -> Tuple[Optional[T], Optional[AppError]]:
    """Await an operation and turn any exception into an (None, AppError) pair."""
    try:
        return await operation(), None
    except Exception as e:
        error = handle_database_error(e, context)
        log_error(e, context)
        return None, error


def validate_required_fields(data: Dict[str, Any], required_fields: List[str]) -> Optional[AppError]:
    """Return a VALIDATION error naming every missing or blank required field."""
    missing = [
        name for name in required_fields
        if data.get(name) is None
        or (isinstance(data.get(name), str) and not data[name].strip())
    ]
    if missing:
        return make_error(
            ErrorType.VALIDATION,
            f"Please fill in all required fields: {', '.join(missing)}",
            missing_fields=missing,
        )
    return None
