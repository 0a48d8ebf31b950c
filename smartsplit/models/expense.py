"""
Expense model: one recorded payment made by a member on behalf of a subset of the group.
"""

from typing import List

from pydantic import BaseModel, Field


class Expense(BaseModel):
    """
    A payment of ``amount`` by ``paid_by`` shared equally by ``split_among``.

    The model only checks shapes and types. Group-level rules (positive amount,
    non-empty split, known members) are enforced by the balance calculator so
    that a whole batch is rejected before any balance is touched.
    """

    amount: float = Field(..., description="Total amount paid")
    paid_by: str = Field(..., alias="paidBy", description="Member who paid")
    split_among: List[str] = Field(
        ..., alias="splitAmong", description="Members sharing the cost equally"
    )

    class Config:
        frozen = True
        populate_by_name = True

    @property
    def share(self) -> float:
        """Amount owed by each member of the split."""
        return self.amount / len(self.split_among)

    def __repr__(self):
        return f"<Expense(amount={self.amount}, paid_by='{self.paid_by}', split_among={self.split_among})>"
