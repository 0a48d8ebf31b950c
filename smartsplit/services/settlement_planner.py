"""
Settlement planning: turns net balances into a short list of payments.

Creditors and debtors are each sorted largest-first and matched with two
pointers. Every step fully settles at least one side, so ``n`` non-settled
members need at most ``n - 1`` payments.
"""

import hashlib
import json
import math
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..core.config import settings
from ..core.logger import get_logger, log_function_call
from ..core.exceptions import InvalidBalanceError, InternalConsistencyError
from ..models import Transaction
from ..utils.validation_utils import is_finite_number, validate_tolerance

logger = get_logger(__name__)


def validate_balances(balances: Mapping[str, float]) -> None:
    """
    Raises:
        InvalidBalanceError: If any balance is not a finite number
    """
    for member, balance in balances.items():
        if not is_finite_number(balance):
            raise InvalidBalanceError(
                f"Balance for '{member}' is not a finite number",
                error_code="INVALID_BALANCE",
                details={"member": member, "value": repr(balance)}
            )


def check_conservation(balances: Mapping[str, float], limit: float) -> float:
    """
    Verify that balances sum to zero within ``limit``.

    Returns:
        The residual sum

    Raises:
        InternalConsistencyError: If the residual exceeds ``limit``
    """
    residual = math.fsum(balances.values())
    if abs(residual) > limit:
        logger.error(f"Balances do not net to zero: residual={residual!r}, limit={limit!r}")
        raise InternalConsistencyError(
            "Balances do not sum to zero",
            error_code="CONSERVATION_VIOLATED",
            details={"residual": residual, "limit": limit, "member_count": len(balances)}
        )
    return residual


def resolve_tolerance(tolerance: Optional[float] = None) -> float:
    """Return ``tolerance`` or the configured default, rejecting non-positive values."""
    if tolerance is None:
        return settings.settlement_tolerance
    return validate_tolerance(tolerance)


def partition_balances(
    balances: Mapping[str, float],
    tolerance: Optional[float] = None
) -> Tuple[List[List], List[List]]:
    """
    Split balances into creditors and debtors, each sorted largest-first.

    Members within ``tolerance`` of zero are left out. Amounts are positive in
    both lists. Ties keep the iteration order of ``balances``.

    Returns:
        (creditors, debtors) as lists of ``[member, amount]`` pairs
    """
    eps = resolve_tolerance(tolerance)

    creditors = []
    debtors = []
    for member, balance in balances.items():
        if balance > eps:
            creditors.append([member, balance])
        elif balance < -eps:
            debtors.append([member, -balance])

    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)
    return creditors, debtors


def balance_snapshot_id(balances: Mapping[str, float]) -> str:
    """Short digest identifying a balance snapshot, in iteration order."""
    payload = json.dumps([[member, repr(float(balance))] for member, balance in balances.items()])
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]


@log_function_call
def minimize_transactions(
    balances: Mapping[str, float],
    tolerance: Optional[float] = None
) -> List[Transaction]:
    """
    Produce payments that bring every balance to zero.

    Args:
        balances: member -> net balance (positive is owed money)
        tolerance: Settlement band; defaults to ``settings.settlement_tolerance``

    Returns:
        list: Transactions from debtors to creditors, empty if everyone is settled

    Raises:
        InvalidBalanceError: Non-finite balance
        InvalidToleranceError: Tolerance not a finite positive number
        InternalConsistencyError: Balances do not sum to zero
    """
    eps = resolve_tolerance(tolerance)

    validate_balances(balances)
    magnitude = math.fsum(abs(b) for b in balances.values())
    check_conservation(balances, max(eps, settings.conservation_tolerance * magnitude))

    creditors, debtors = partition_balances(balances, eps)
    snapshot_id = balance_snapshot_id(balances)

    transactions: List[Transaction] = []
    i = 0
    j = 0

    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]

        settle_amount = min(creditor[1], debtor[1])
        transactions.append(Transaction(
            from_member=debtor[0],
            to_member=creditor[0],
            amount=settle_amount,
            index=len(transactions),
            snapshot_id=snapshot_id
        ))

        creditor[1] -= settle_amount
        debtor[1] -= settle_amount

        if creditor[1] < eps:
            i += 1
        if debtor[1] < eps:
            j += 1

    logger.debug(
        f"Planned {len(transactions)} transactions for "
        f"{len(creditors)} creditors and {len(debtors)} debtors"
    )
    return transactions


def replay_transactions(
    transactions: Iterable[Transaction],
    members: Iterable[str] = ()
) -> Dict[str, float]:
    """
    Apply transactions to a zeroed ledger.

    Each payment counts against the payer and toward the payee. The result
    matches the planned balances except for residue under the tolerance left on
    settled members, which may shift onto a member at the end of a list.
    """
    ledger: Dict[str, float] = {member: 0.0 for member in members}
    for t in transactions:
        ledger[t.from_member] = ledger.get(t.from_member, 0.0) - t.amount
        ledger[t.to_member] = ledger.get(t.to_member, 0.0) + t.amount
    return ledger
