"""
SmartSplit settlement engine.
Computes member balances for shared-expense groups and the payments that settle them.
"""

from .core.exceptions import (
    SmartSplitException,
    ValidationError,
    InvalidMemberError,
    InvalidExpenseError,
    InvalidReferenceError,
    EmptyMemberSetError,
    InvalidBalanceError,
    InvalidToleranceError,
    SettlementError,
    InternalConsistencyError,
)
from .models import Expense, Transaction, MemberSummary, SettlementReport
from .services.balance_calculator import compute_balances, total_expenses, fair_share
from .services.settlement_planner import minimize_transactions
from .services.settlement_service import SettlementService

__version__ = "1.0.0"

__all__ = [
    "SmartSplitException",
    "ValidationError",
    "InvalidMemberError",
    "InvalidExpenseError",
    "InvalidReferenceError",
    "EmptyMemberSetError",
    "InvalidBalanceError",
    "InvalidToleranceError",
    "SettlementError",
    "InternalConsistencyError",
    "Expense",
    "Transaction",
    "MemberSummary",
    "SettlementReport",
    "compute_balances",
    "total_expenses",
    "fair_share",
    "minimize_transactions",
    "SettlementService",
]
