"""Settlement reports and messages built on the balance calculator and planner."""

from typing import Any, Dict, Iterable, List, Optional

from ..core.config import settings
from ..core.logger import get_logger
from ..core.exceptions import (
    InvalidReferenceError,
    SmartSplitException,
    create_error_response,
    handle_exception,
)
from ..models import MemberSummary, SettlementReport, Transaction
from ..utils.text_utils import format_amount, format_balances, format_transactions
from .balance_calculator import (
    ExpenseLike,
    coerce_expense,
    compute_balances,
    fair_share,
    member_totals,
    total_expenses,
    validate_expense,
)
from .settlement_planner import balance_snapshot_id, minimize_transactions, resolve_tolerance

logger = get_logger(__name__)


class SettlementService:
    """Calculates immediate and running balance settlements for a group snapshot."""

    def __init__(
        self,
        tolerance: Optional[float] = None,
        currency_symbol: Optional[str] = None,
        precision: Optional[int] = None
    ):
        """
        Args:
            tolerance: Settlement band (defaults to settings)
            currency_symbol: Display symbol (defaults to settings)
            precision: Display decimal places (defaults to settings)

        Raises:
            InvalidToleranceError: If ``tolerance`` is not a finite positive number
        """
        self.tolerance = resolve_tolerance(tolerance)
        self.currency_symbol = settings.currency_symbol if currency_symbol is None else currency_symbol
        self.precision = settings.display_precision if precision is None else precision

    def _format(self, amount: float) -> str:
        return format_amount(amount, self.currency_symbol, self.precision)

    def build_report(
        self,
        members: Iterable[str],
        expenses: Iterable[ExpenseLike],
        group_id: Optional[str] = None
    ) -> SettlementReport:
        """
        Compute balances, the settlement plan and totals for one snapshot.

        Args:
            members: Group members in display order
            expenses: Expense models or mappings
            group_id: Optional identifier echoed into the report

        Returns:
            SettlementReport
        """
        member_list = list(members)
        expense_list = [coerce_expense(e, i) for i, e in enumerate(expenses)]

        balances = compute_balances(member_list, expense_list)
        transactions = minimize_transactions(balances, self.tolerance)
        totals = member_totals(member_list, expense_list)

        summaries = [
            self._summarize(member, totals[member], balances[member], transactions)
            for member in member_list
        ]

        report = SettlementReport(
            group_id=group_id,
            members=member_list,
            balances=balances,
            transactions=transactions,
            total_expenses=total_expenses(expense_list),
            fair_share=fair_share(member_list, expense_list),
            snapshot_id=balance_snapshot_id(balances),
            member_summaries=summaries,
        )

        logger.info(
            f"Settlement report for group {group_id or '-'}: "
            f"{len(member_list)} members, {len(expense_list)} expenses, "
            f"{len(transactions)} transactions"
        )
        return report

    def build_report_response(
        self,
        members: Iterable[str],
        expenses: Iterable[ExpenseLike],
        group_id: Optional[str] = None,
        include_details: Optional[bool] = None
    ) -> Dict[str, Any]:
        """
        Build a report and wrap it for callers that return plain dicts.

        Engine errors are logged and converted to an error payload instead of
        propagating. Anything else still raises.

        Returns:
            dict: ``{"success": True, "report": {...}}`` or an error response
        """
        try:
            report = self.build_report(members, expenses, group_id)
        except SmartSplitException as e:
            handle_exception(e, context=f"settlement report for group {group_id or '-'}", reraise=False)
            return create_error_response(e, include_details)

        return {"success": True, "report": report.model_dump(by_alias=True)}

    def _summarize(
        self,
        member: str,
        totals: tuple,
        balance: float,
        transactions: List[Transaction]
    ) -> MemberSummary:
        paid, owed = totals
        owes_to: Dict[str, float] = {}
        owed_by: Dict[str, float] = {}

        for t in transactions:
            if t.from_member == member:
                owes_to[t.to_member] = owes_to.get(t.to_member, 0.0) + t.amount
            elif t.to_member == member:
                owed_by[t.from_member] = owed_by.get(t.from_member, 0.0) + t.amount

        return MemberSummary(
            member=member,
            total_paid=paid,
            total_owed=owed,
            net_balance=balance,
            status=MemberSummary.status_for(balance, self.tolerance),
            owes_to=owes_to,
            owed_by=owed_by,
        )

    def get_participant_balance(
        self,
        members: Iterable[str],
        expenses: Iterable[ExpenseLike],
        member: str
    ) -> MemberSummary:
        """
        Get balance summary for a specific participant.

        Raises:
            InvalidReferenceError: If ``member`` is not in the group
        """
        member_list = list(members)
        if member not in member_list:
            raise InvalidReferenceError(
                f"'{member}' is not a member of this group",
                error_code="UNKNOWN_MEMBER",
                details={"unknown_members": [member]}
            )

        report = self.build_report(member_list, expenses)
        return report.summary_for(member)

    def calculate_immediate_settlement(self, expense: ExpenseLike) -> str:
        """
        Calculate who owes whom for a single expense.

        Example:
            paid_by="Alice", amount=90, split_among=["Alice", "Bob", "Carol"]
            Returns: "• Bob owes Alice $30.00\\n• Carol owes Alice $30.00"
        """
        expense = coerce_expense(expense)
        validate_expense(expense, {expense.paid_by, *expense.split_among})

        lines = []
        share = expense.share
        for person in expense.split_among:
            if person == expense.paid_by:
                continue
            if share < self.tolerance:
                continue
            lines.append(f"• {person} owes {expense.paid_by} {self._format(share)}")

        if not lines:
            return f"No settlements needed. {expense.paid_by} paid for themselves only."

        return "\n".join(lines)

    def calculate_running_balance(
        self,
        members: Iterable[str],
        expenses: Iterable[ExpenseLike]
    ) -> str:
        """
        Calculate the minimized settlement across all expenses of a group.

        Returns:
            str: One bullet per payment, or an all-settled message
        """
        expense_list = list(expenses)
        if not expense_list:
            return "No expenses recorded for this group yet."

        balances = compute_balances(members, expense_list)
        transactions = minimize_transactions(balances, self.tolerance)

        if not transactions:
            return "All settled up! No one owes anyone."

        return format_transactions(transactions, self.currency_symbol, self.precision)

    def format_report(self, report: SettlementReport) -> str:
        """Render a report as a multi-line text summary."""
        lines = [
            f"Total expenses: {self._format(report.total_expenses)}",
            f"Members: {len(report.members)}",
            f"Fair share: {self._format(report.fair_share)}",
            "",
            "Net balances:",
        ]
        lines.extend(format_balances(report.balances, self.currency_symbol, self.precision))
        lines.append("")

        if report.is_settled:
            lines.append("All settled up! No one owes anyone.")
        else:
            lines.append("Transfers:")
            lines.append(format_transactions(report.transactions, self.currency_symbol, self.precision))

        return "\n".join(lines)
