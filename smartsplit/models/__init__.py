"""
Data models for SmartSplit.
Expense inputs and the derived settlement views are defined here.
"""

from .expense import Expense
from .settlement import Transaction, MemberSummary, SettlementReport

__all__ = [
    "Expense",
    "Transaction",
    "MemberSummary",
    "SettlementReport",
]
