"""
Custom exception classes for SmartSplit.
Provides specific exceptions for the failure modes of balance and settlement computation.
"""

from typing import Optional, Dict, Any


class SmartSplitException(Exception):
    """Base exception class for all SmartSplit errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/API responses."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details
        }


# =============================================================================
# VALIDATION ERRORS
# =============================================================================

class ValidationError(SmartSplitException):
    """Base class for input validation errors."""
    pass


class InvalidMemberError(ValidationError):
    """Raised when a member name is blank or duplicated within a group."""
    pass


class InvalidExpenseError(ValidationError):
    """Raised when an expense has a non-positive amount or an unusable split."""
    pass


class InvalidReferenceError(InvalidExpenseError):
    """Raised when an expense names a member outside the group."""
    pass


class EmptyMemberSetError(ValidationError):
    """Raised when expenses are supplied for a group with no members."""
    pass


class InvalidBalanceError(ValidationError):
    """Raised when a balance mapping holds non-numeric or non-finite values."""
    pass


class InvalidToleranceError(ValidationError):
    """Raised when a settlement tolerance is not a finite positive number."""
    pass


# =============================================================================
# SETTLEMENT ERRORS
# =============================================================================

class SettlementError(SmartSplitException):
    """Base class for settlement computation errors."""
    pass


class InternalConsistencyError(SettlementError):
    """Raised when balances do not sum to zero."""
    pass


# =============================================================================
# EXCEPTION UTILITIES
# =============================================================================

def handle_exception(
    exception: Exception,
    context: Optional[str] = None,
    reraise: bool = True
) -> Optional[Dict[str, Any]]:
    """
    Handle and log exceptions in a standardized way.

    Args:
        exception: The exception to handle
        context: Additional context about where the error occurred
        reraise: Whether to re-raise the exception after handling

    Returns:
        Dictionary representation of the error if not re-raising
    """
    from .logger import get_logger

    logger = get_logger(__name__)

    if not isinstance(exception, SmartSplitException):
        handled_exception = SmartSplitException(
            message=str(exception),
            error_code=exception.__class__.__name__,
            details={"original_type": type(exception).__name__}
        )
    else:
        handled_exception = exception

    if context:
        handled_exception.details["context"] = context

    error_dict = handled_exception.to_dict()
    logger.error(f"Exception handled: {error_dict}")

    if reraise:
        if handled_exception is exception:
            raise handled_exception
        raise handled_exception from exception
    return error_dict


def create_error_response(
    exception: SmartSplitException,
    include_details: Optional[bool] = None
) -> Dict[str, Any]:
    """
    Create a standardized error response for callers that expose the engine over an API.

    Args:
        exception: The exception to convert
        include_details: Whether to include error details (auto-detected from environment)

    Returns:
        Dictionary suitable for API error response
    """
    from .config import settings

    if include_details is None:
        include_details = settings.is_development

    response = {
        "success": False,
        "error": {
            "type": exception.__class__.__name__,
            "message": exception.message,
            "code": exception.error_code
        }
    }

    if include_details and exception.details:
        response["error"]["details"] = exception.details

    return response
