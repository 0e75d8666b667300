"""Engine error types and their classification into API responses."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum

from pydantic import BaseModel

from kidstreak.core.config import constants
from kidstreak.core.db_client import DatabaseError, RecordNotFoundError


logger = logging.getLogger(__name__)


class EngineError(Exception):
    """Base class for errors surfaced by the daily cycle and streak engine."""


class PersistenceUnavailableError(EngineError):
    """A store read or write failed; the operation was aborted without a partial commit."""


class NotFoundError(EngineError):
    """A referenced kid or task does not exist."""


class ClockUnavailableError(EngineError):
    """The current calendar day could not be determined."""


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_NOT_FOUND = "ERR_NOT_FOUND"
    ERR_PERSISTENCE_UNAVAILABLE = "ERR_PERSISTENCE_UNAVAILABLE"
    ERR_CLOCK_UNAVAILABLE = "ERR_CLOCK_UNAVAILABLE"
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


def classify_error_with_response(exception: Exception) -> ErrorResponse:
    """Classify an error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised during execution

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    if isinstance(exception, NotFoundError):
        return ErrorResponse(
            code=ErrorCode.ERR_NOT_FOUND,
            message=str(exception) or "Record not found.",
            suggestion="Reload the task list and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, PersistenceUnavailableError):
        return ErrorResponse(
            code=ErrorCode.ERR_PERSISTENCE_UNAVAILABLE,
            message="Storage is currently unavailable.",
            suggestion="No changes were saved. Please try again in a moment.",
            severity=ErrorSeverity.HIGH,
        )

    if isinstance(exception, ClockUnavailableError):
        return ErrorResponse(
            code=ErrorCode.ERR_CLOCK_UNAVAILABLE,
            message="The current date could not be determined.",
            suggestion="Please try again later.",
            severity=ErrorSeverity.CRITICAL,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, contact support.",
        severity=ErrorSeverity.MEDIUM,
    )


def status_code_for(exception: Exception) -> int:
    """Map an engine error to the HTTP status the API returns for it."""
    if isinstance(exception, NotFoundError):
        return constants.HTTP_NOT_FOUND
    if isinstance(exception, PersistenceUnavailableError | ClockUnavailableError):
        return constants.HTTP_SERVICE_UNAVAILABLE
    return 500


@contextmanager
def translate_db_errors(operation: str) -> Iterator[None]:
    """Re-raise database client failures as engine errors."""
    try:
        yield
    except RecordNotFoundError as e:
        raise NotFoundError(str(e).strip("'\"")) from e
    except DatabaseError as e:
        logger.error("persistence_unavailable", extra={"operation": operation, "error": str(e)})
        msg = f"{operation} failed: {e}"
        raise PersistenceUnavailableError(msg) from e
