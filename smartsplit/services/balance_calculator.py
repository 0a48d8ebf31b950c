"""Balance aggregation: reduces a group's members and expenses to signed net balances."""

from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from ..core.config import settings
from ..core.logger import get_logger, log_function_call
from ..core.exceptions import (
    InvalidExpenseError,
    InvalidReferenceError,
    EmptyMemberSetError,
)
from ..models import Expense
from ..utils.validation_utils import validate_member_list, validate_amount
from .settlement_planner import check_conservation

logger = get_logger(__name__)

ExpenseLike = Union[Expense, Mapping[str, Any]]


def coerce_expense(expense: ExpenseLike, position: int = 0) -> Expense:
    """
    Accept an Expense or a plain mapping and return an Expense.

    Raises:
        InvalidExpenseError: If the payload does not have the Expense shape
    """
    if isinstance(expense, Expense):
        return expense

    try:
        return Expense.model_validate(expense)
    except PydanticValidationError as e:
        raise InvalidExpenseError(
            f"Malformed expense at position {position}",
            error_code="MALFORMED_EXPENSE",
            details={"position": position, "errors": e.errors(include_url=False)}
        ) from e


def validate_expense(expense: Expense, members: Iterable[str], position: int = 0) -> Expense:
    """
    Check one expense against the group's rules.

    Raises:
        InvalidExpenseError: Non-positive amount, or empty/duplicated split
        InvalidReferenceError: Payer or split member not in ``members``
    """
    member_set = members if isinstance(members, (set, frozenset)) else set(members)

    try:
        validate_amount(expense.amount)
    except InvalidExpenseError as e:
        e.details["position"] = position
        raise

    if not expense.split_among:
        raise InvalidExpenseError(
            f"Expense at position {position} is not split among anyone",
            error_code="EMPTY_SPLIT",
            details={"position": position}
        )

    if len(set(expense.split_among)) != len(expense.split_among):
        raise InvalidExpenseError(
            f"Expense at position {position} lists a member more than once",
            error_code="DUPLICATE_SPLIT_MEMBER",
            details={"position": position, "split_among": list(expense.split_among)}
        )

    unknown = [m for m in [expense.paid_by, *expense.split_among] if m not in member_set]
    if unknown:
        raise InvalidReferenceError(
            f"Expense at position {position} references unknown member(s): {', '.join(unknown)}",
            error_code="UNKNOWN_MEMBER",
            details={"position": position, "unknown_members": unknown}
        )

    return expense


def _prepare(members: Iterable[str], expenses: Iterable[ExpenseLike]) -> Tuple[List[str], List[Expense]]:
    """Validate the whole snapshot up front so nothing is aggregated from a bad batch."""
    member_list = validate_member_list(members)
    expense_list = [coerce_expense(e, i) for i, e in enumerate(expenses)]

    if expense_list and not member_list:
        raise EmptyMemberSetError(
            "Cannot compute balances for expenses without members",
            error_code="EMPTY_MEMBER_SET",
            details={"expense_count": len(expense_list)}
        )

    member_set = set(member_list)
    for i, expense in enumerate(expense_list):
        validate_expense(expense, member_set, i)

    return member_list, expense_list


@log_function_call
def compute_balances(
    members: Iterable[str],
    expenses: Iterable[ExpenseLike]
) -> Dict[str, float]:
    """
    Compute each member's net balance.

    Positive means the member is owed money, negative means they owe money.
    The payer is credited with the full amount and every member of the split
    is debited an equal share. Shares are not rounded.

    Args:
        members: Group members in display order
        expenses: Expenses as Expense models or mappings

    Returns:
        dict: member -> balance, keyed in member order

    Raises:
        InvalidMemberError: Blank or duplicate member names
        InvalidExpenseError: Malformed expense (nothing is aggregated)
        EmptyMemberSetError: Expenses given with no members
        InternalConsistencyError: Balances do not sum to zero
    """
    member_list, expense_list = _prepare(members, expenses)

    balances: Dict[str, float] = {member: 0.0 for member in member_list}

    for expense in expense_list:
        balances[expense.paid_by] += expense.amount

        share = expense.amount / len(expense.split_among)
        for member in expense.split_among:
            balances[member] -= share

    volume = sum((e.amount for e in expense_list), 0.0)
    check_conservation(balances, settings.conservation_tolerance * max(1.0, volume))

    logger.debug(f"Computed balances for {len(member_list)} members from {len(expense_list)} expenses")
    return balances


def member_totals(
    members: Iterable[str],
    expenses: Iterable[ExpenseLike]
) -> Dict[str, Tuple[float, float]]:
    """
    Total paid and total owed per member.

    Returns:
        dict: member -> (paid, owed)
    """
    member_list, expense_list = _prepare(members, expenses)

    paid = {member: 0.0 for member in member_list}
    owed = {member: 0.0 for member in member_list}

    for expense in expense_list:
        paid[expense.paid_by] += expense.amount
        share = expense.amount / len(expense.split_among)
        for member in expense.split_among:
            owed[member] += share

    return {member: (paid[member], owed[member]) for member in member_list}


def total_expenses(expenses: Iterable[ExpenseLike]) -> float:
    """Sum of all expense amounts."""
    return sum(
        (coerce_expense(e, i).amount for i, e in enumerate(expenses)),
        0.0
    )


def fair_share(members: Iterable[str], expenses: Iterable[ExpenseLike]) -> float:
    """Total spend divided evenly across the whole group, or 0 with no members."""
    member_count = len(list(members))
    if member_count == 0:
        return 0.0
    return total_expenses(expenses) / member_count
