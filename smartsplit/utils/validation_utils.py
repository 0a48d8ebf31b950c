"""
Data validation utilities for SmartSplit.
Provides validation functions for member names and amounts.
"""

import math
from typing import Any, Iterable, List

from ..core.logger import get_logger
from ..core.exceptions import (
    ValidationError,
    InvalidMemberError,
    InvalidExpenseError,
    InvalidToleranceError,
)

logger = get_logger(__name__)


# =============================================================================
# BASIC DATA VALIDATION
# =============================================================================

def validate_required_field(value: Any, field_name: str) -> Any:
    """
    Validate that a required field has a value.

    Args:
        value: Value to check
        field_name: Name of the field for error messages

    Returns:
        The value if valid

    Raises:
        ValidationError: If field is empty or None
    """
    if value is None:
        raise ValidationError(
            f"{field_name} is required",
            error_code="REQUIRED_FIELD_MISSING",
            details={"field_name": field_name}
        )

    if isinstance(value, str) and not value.strip():
        raise ValidationError(
            f"{field_name} cannot be empty",
            error_code="REQUIRED_FIELD_EMPTY",
            details={"field_name": field_name}
        )

    return value


def is_finite_number(value: Any) -> bool:
    """Check for an int or float that is neither NaN nor infinite. Booleans are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


# =============================================================================
# DOMAIN VALIDATION
# =============================================================================

def validate_member_name(name: Any) -> str:
    """
    Validate a single member name.

    Names are compared by exact string match, so they are returned unchanged
    rather than stripped.

    Raises:
        InvalidMemberError: If the name is not a non-blank string
    """
    if not isinstance(name, str):
        raise InvalidMemberError(
            "Member name must be a string",
            error_code="INVALID_MEMBER_TYPE",
            details={"actual_type": type(name).__name__}
        )

    if not name.strip():
        raise InvalidMemberError(
            "Member name cannot be empty",
            error_code="EMPTY_MEMBER_NAME",
        )

    return name


def validate_member_list(members: Iterable[Any]) -> List[str]:
    """
    Validate a group's member list, preserving its order.

    Raises:
        InvalidMemberError: On a blank or duplicate name
    """
    seen = set()
    result = []
    for name in members:
        validate_member_name(name)
        if name in seen:
            raise InvalidMemberError(
                f"Duplicate member '{name}'",
                error_code="DUPLICATE_MEMBER",
                details={"member": name}
            )
        seen.add(name)
        result.append(name)
    return result


def validate_amount(amount: Any, field_name: str = "amount") -> float:
    """
    Validate an expense amount.

    Returns:
        The amount as a float

    Raises:
        InvalidExpenseError: If the amount is not a finite positive number
    """
    if not is_finite_number(amount):
        raise InvalidExpenseError(
            f"{field_name} must be a finite number",
            error_code="INVALID_AMOUNT",
            details={"field_name": field_name, "value": repr(amount)}
        )

    if amount <= 0:
        raise InvalidExpenseError(
            f"{field_name} must be positive",
            error_code="NON_POSITIVE_AMOUNT",
            details={"field_name": field_name, "value": amount}
        )

    return float(amount)


def validate_tolerance(tolerance: Any) -> float:
    """
    Validate a settlement tolerance.

    A zero or negative band never lets a fully matched member drop out of the
    creditor/debtor lists, so it is rejected.

    Raises:
        InvalidToleranceError: If the tolerance is not a finite positive number
    """
    if not is_finite_number(tolerance) or tolerance <= 0:
        raise InvalidToleranceError(
            "Settlement tolerance must be a finite positive number",
            error_code="INVALID_TOLERANCE",
            details={"value": repr(tolerance)}
        )
    return float(tolerance)
