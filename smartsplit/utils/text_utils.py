"""
Text formatting utilities for SmartSplit.
All display rounding happens here; the engine itself never rounds.
"""

from typing import Dict, Iterable, List, Optional

from ..core.config import settings
from ..models import Transaction


def format_amount(
    amount: float,
    currency_symbol: Optional[str] = None,
    precision: Optional[int] = None
) -> str:
    """
    Format an amount for display.

    Args:
        amount: Amount to format
        currency_symbol: Prefix symbol (defaults to settings)
        precision: Decimal places (defaults to settings)

    Returns:
        Formatted string, e.g. "$30.00"
    """
    symbol = settings.currency_symbol if currency_symbol is None else currency_symbol
    places = settings.display_precision if precision is None else precision

    # Avoid "-$0.00" for tiny negative residues
    if round(amount, places) == 0:
        amount = 0.0

    if amount < 0:
        return f"-{symbol}{abs(amount):,.{places}f}"
    return f"{symbol}{amount:,.{places}f}"


def format_balance(
    balance: float,
    currency_symbol: Optional[str] = None,
    precision: Optional[int] = None
) -> str:
    """Format a net balance with an explicit sign, e.g. "+$50.00" or "-$50.00"."""
    places = settings.display_precision if precision is None else precision
    text = format_amount(balance, currency_symbol, places)
    if balance > 0 and round(balance, places) != 0:
        return f"+{text}"
    return text


def format_transaction_line(
    transaction: Transaction,
    currency_symbol: Optional[str] = None,
    precision: Optional[int] = None
) -> str:
    """Format a transaction as a bullet, e.g. "• Bob owes Alice $50.00"."""
    amount = format_amount(transaction.amount, currency_symbol, precision)
    return f"• {transaction.from_member} owes {transaction.to_member} {amount}"


def format_transactions(
    transactions: Iterable[Transaction],
    currency_symbol: Optional[str] = None,
    precision: Optional[int] = None
) -> str:
    """Format a list of transactions, one bullet per line."""
    return "\n".join(
        format_transaction_line(t, currency_symbol, precision) for t in transactions
    )


def format_balances(
    balances: Dict[str, float],
    currency_symbol: Optional[str] = None,
    precision: Optional[int] = None
) -> List[str]:
    """Format each member's balance as "  name: +$x.xx"."""
    return [
        f"  {member}: {format_balance(balance, currency_symbol, precision)}"
        for member, balance in balances.items()
    ]
