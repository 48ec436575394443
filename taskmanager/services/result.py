"""
Result type for the data access layer
Every service call returns data or an AppError, never both
"""
import logging
from dataclasses import dataclass
from typing import Generic, Iterator, Optional, TypeVar, Union

from sqlalchemy.exc import InterfaceError, OperationalError

from ..utils.errors import AppError, ErrorType, handle_database_error
from ..utils.logging import log_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

# The database could not be reached; these propagate to the caller
TRANSPORT_ERRORS = (OperationalError, InterfaceError)


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """
    Outcome of a data access call.

    Unpacks as a ``(data, error)`` pair::

        task, error = TaskService.get_task_by_id(db, task_id, user_id)
    """
    data: Optional[T] = None
    error: Optional[AppError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __iter__(self) -> Iterator[Union[Optional[T], Optional[AppError]]]:
        yield self.data
        yield self.error

    @classmethod
    def success(cls, data: Optional[T] = None) -> "ServiceResult[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, error: AppError) -> "ServiceResult[T]":
        return cls(error=error)


def failure_result(db, error: Exception, context: str, user_id=None) -> ServiceResult:
    """
    Roll back the session and convert an expected failure into a ServiceResult.

    Unclassified failures are logged as errors; expected ones (not found,
    constraint violations, policy denials) only at info level.
    """
    db.rollback()
    app_error = handle_database_error(error, context)
    if app_error.type in (ErrorType.DATABASE, ErrorType.UNKNOWN):
        log_error(error, context, user_id)
    else:
        logger.info("%s failed: %s (%s)", context, app_error.type.value, error)
    return ServiceResult.failure(app_error)
