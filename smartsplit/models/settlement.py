"""
Settlement models: derived views over a (members, expenses) snapshot.
None of these are stored; they are rebuilt on every computation.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..core.constants import STATUS_CREDITOR, STATUS_DEBTOR, STATUS_SETTLED


class Transaction(BaseModel):
    """A suggested payment of ``amount`` from ``from_member`` to ``to_member``."""

    from_member: str = Field(..., alias="from", description="Member who pays")
    to_member: str = Field(..., alias="to", description="Member who receives")
    amount: float = Field(..., gt=0, description="Amount to transfer")
    index: int = Field(default=0, ge=0, description="Position in the settlement plan")
    snapshot_id: str = Field(default="", description="Digest of the balances the plan was built from")

    class Config:
        frozen = True
        populate_by_name = True

    @property
    def transaction_id(self) -> str:
        """Stable identity for paid-status bookkeeping."""
        return f"{self.snapshot_id}:{self.index}"

    def __repr__(self):
        return f"<Transaction({self.from_member} -> {self.to_member}: {self.amount})>"


class MemberSummary(BaseModel):
    """Per-member breakdown of what they paid, what they owe, and who settles with them."""

    member: str
    total_paid: float = 0.0
    total_owed: float = 0.0
    net_balance: float = 0.0
    status: str = STATUS_SETTLED
    owes_to: Dict[str, float] = Field(default_factory=dict, description="Creditor -> amount to pay")
    owed_by: Dict[str, float] = Field(default_factory=dict, description="Debtor -> amount to receive")

    class Config:
        frozen = True

    @property
    def is_settled(self) -> bool:
        return self.status == STATUS_SETTLED

    @classmethod
    def status_for(cls, balance: float, tolerance: float) -> str:
        """Classify a balance as creditor, debtor or settled."""
        if balance > tolerance:
            return STATUS_CREDITOR
        if balance < -tolerance:
            return STATUS_DEBTOR
        return STATUS_SETTLED


class SettlementReport(BaseModel):
    """Balances, settlement plan and totals for one group snapshot."""

    group_id: Optional[str] = None
    members: List[str]
    balances: Dict[str, float]
    transactions: List[Transaction]
    total_expenses: float
    fair_share: float
    snapshot_id: str
    member_summaries: List[MemberSummary] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def is_settled(self) -> bool:
        """True when no payments are needed."""
        return not self.transactions

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)

    def summary_for(self, member: str) -> Optional[MemberSummary]:
        for summary in self.member_summaries:
            if summary.member == member:
                return summary
        return None
