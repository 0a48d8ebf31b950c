"""
Tests for balance aggregation and the reporting helpers.
"""

import copy
import math

import pytest

from smartsplit.core.exceptions import (
    InvalidExpenseError,
    InvalidReferenceError,
    InvalidMemberError,
    EmptyMemberSetError,
)
from smartsplit.models import Expense
from smartsplit.services.balance_calculator import (
    compute_balances,
    member_totals,
    total_expenses,
    fair_share,
    coerce_expense,
)


class TestComputeBalances:
    """Test net balance computation."""

    def test_single_shared_expense(self, two_members):
        """Payer is credited in full, each member of the split is debited a share."""
        expenses = [Expense(amount=100, paid_by="A", split_among=["A", "B"])]

        assert compute_balances(two_members, expenses) == {"A": 50.0, "B": -50.0}

    def test_three_way_split(self, three_members):
        expenses = [Expense(amount=300, paid_by="A", split_among=["A", "B", "C"])]

        assert compute_balances(three_members, expenses) == {"A": 200.0, "B": -100.0, "C": -100.0}

    def test_offsetting_expenses_cancel(self, two_members):
        expenses = [
            Expense(amount=100, paid_by="A", split_among=["A", "B"]),
            Expense(amount=100, paid_by="B", split_among=["A", "B"]),
        ]

        assert compute_balances(two_members, expenses) == {"A": 0.0, "B": 0.0}

    def test_cycle_of_debts_nets_to_zero(self):
        """Four one-to-one debts around a cycle leave nobody owing anything."""
        members = ["A", "B", "C", "D"]
        expenses = [
            Expense(amount=10, paid_by="B", split_among=["A"]),
            Expense(amount=10, paid_by="C", split_among=["B"]),
            Expense(amount=10, paid_by="D", split_among=["C"]),
            Expense(amount=10, paid_by="A", split_among=["D"]),
        ]

        balances = compute_balances(members, expenses)

        assert balances == {"A": 0.0, "B": 0.0, "C": 0.0, "D": 0.0}

    def test_payer_outside_split(self, three_members):
        """The payer does not have to share the cost."""
        expenses = [Expense(amount=90, paid_by="A", split_among=["B", "C"])]

        assert compute_balances(three_members, expenses) == {"A": 90.0, "B": -45.0, "C": -45.0}

    def test_members_without_expenses_start_at_zero(self, trip_members):
        expenses = [Expense(amount=10, paid_by="Alice", split_among=["Bob"])]

        balances = compute_balances(trip_members, expenses)

        assert balances["Carol"] == 0.0
        assert balances["Dave"] == 0.0

    def test_keys_follow_member_order(self, trip_members, trip_expenses):
        balances = compute_balances(trip_members, trip_expenses)

        assert list(balances) == trip_members

    def test_no_expenses(self, three_members):
        assert compute_balances(three_members, []) == {"A": 0.0, "B": 0.0, "C": 0.0}

    def test_no_members_no_expenses(self):
        assert compute_balances([], []) == {}

    def test_shares_are_not_rounded(self, three_members):
        expenses = [Expense(amount=100, paid_by="A", split_among=["A", "B", "C"])]

        balances = compute_balances(three_members, expenses)

        assert balances["B"] == pytest.approx(-100 / 3)
        assert balances["B"] != round(balances["B"], 2)

    def test_accepts_mappings(self, two_members):
        """Plain dicts in either naming convention are accepted."""
        expenses = [
            {"amount": 40, "paid_by": "A", "split_among": ["A", "B"]},
            {"amount": 20, "paidBy": "B", "splitAmong": ["A"]},
        ]

        assert compute_balances(two_members, expenses) == {"A": 0.0, "B": 0.0}

    def test_accepts_generators(self):
        members = (m for m in ["A", "B"])
        expenses = (e for e in [Expense(amount=10, paid_by="A", split_among=["B"])])

        assert compute_balances(members, expenses) == {"A": 10.0, "B": -10.0}

    def test_idempotent(self, trip_members, trip_expenses):
        first = compute_balances(trip_members, trip_expenses)
        second = compute_balances(trip_members, trip_expenses)

        assert first == second

    def test_inputs_not_mutated(self, trip_members, trip_expenses):
        members_before = list(trip_members)
        expenses_before = copy.deepcopy(trip_expenses)

        compute_balances(trip_members, trip_expenses)

        assert trip_members == members_before
        assert trip_expenses == expenses_before

    @pytest.mark.parametrize("seed", range(40))
    def test_conservation(self, random_group, seed):
        """Balances always sum to zero."""
        members, expenses = random_group(seed)

        balances = compute_balances(members, expenses)

        assert abs(math.fsum(balances.values())) <= 1e-9 * max(1.0, sum(e.amount for e in expenses))


class TestInvalidInput:
    """Test rejection of malformed snapshots."""

    @pytest.mark.parametrize("amount", [-5, 0, float("nan"), float("inf")])
    def test_bad_amount(self, two_members, amount):
        expenses = [Expense(amount=amount, paid_by="A", split_among=["A", "B"])]

        with pytest.raises(InvalidExpenseError):
            compute_balances(two_members, expenses)

    def test_bad_expense_rejects_whole_batch(self, two_members):
        """A single bad expense anywhere in the batch fails the call."""
        expenses = [
            Expense(amount=100, paid_by="A", split_among=["A", "B"]),
            {"amount": -5, "paid_by": "B", "split_among": ["A"]},
        ]

        with pytest.raises(InvalidExpenseError) as exc_info:
            compute_balances(two_members, expenses)

        assert exc_info.value.details["position"] == 1
        assert exc_info.value.error_code == "NON_POSITIVE_AMOUNT"

    def test_empty_split(self, two_members):
        expenses = [Expense(amount=10, paid_by="A", split_among=[])]

        with pytest.raises(InvalidExpenseError) as exc_info:
            compute_balances(two_members, expenses)

        assert exc_info.value.error_code == "EMPTY_SPLIT"

    def test_duplicate_split_member(self, two_members):
        expenses = [Expense(amount=10, paid_by="A", split_among=["B", "B"])]

        with pytest.raises(InvalidExpenseError) as exc_info:
            compute_balances(two_members, expenses)

        assert exc_info.value.error_code == "DUPLICATE_SPLIT_MEMBER"

    def test_unknown_payer(self, two_members):
        expenses = [Expense(amount=10, paid_by="Z", split_among=["A"])]

        with pytest.raises(InvalidReferenceError) as exc_info:
            compute_balances(two_members, expenses)

        assert exc_info.value.details["unknown_members"] == ["Z"]

    def test_unknown_split_member(self, two_members):
        expenses = [Expense(amount=10, paid_by="A", split_among=["A", "Y"])]

        with pytest.raises(InvalidReferenceError):
            compute_balances(two_members, expenses)

    def test_unknown_member_is_an_invalid_expense(self, two_members):
        expenses = [Expense(amount=10, paid_by="A", split_among=["Y"])]

        with pytest.raises(InvalidExpenseError):
            compute_balances(two_members, expenses)

    def test_member_names_are_exact(self):
        """Names differing only by whitespace or case are different members."""
        expenses = [Expense(amount=10, paid_by="A", split_among=["a"])]

        with pytest.raises(InvalidReferenceError):
            compute_balances(["A", "B"], expenses)

    def test_expenses_without_members(self):
        expenses = [Expense(amount=10, paid_by="A", split_among=["A"])]

        with pytest.raises(EmptyMemberSetError):
            compute_balances([], expenses)

    def test_duplicate_members(self):
        with pytest.raises(InvalidMemberError):
            compute_balances(["A", "B", "A"], [])

    @pytest.mark.parametrize("name", ["", "   ", None, 42])
    def test_blank_or_non_string_member(self, name):
        with pytest.raises(InvalidMemberError):
            compute_balances(["A", name], [])

    def test_malformed_mapping(self, two_members):
        with pytest.raises(InvalidExpenseError) as exc_info:
            compute_balances(two_members, [{"amount": 10, "paid_by": "A"}])

        assert exc_info.value.error_code == "MALFORMED_EXPENSE"


class TestMemberTotals:
    """Test per-member paid/owed totals."""

    def test_totals(self, trip_members, trip_expenses):
        totals = member_totals(trip_members, trip_expenses)

        assert totals["Alice"] == (120.0, 65.0)
        assert totals["Bob"] == (60.0, 60.0)
        assert totals["Carol"] == (45.0, 75.0)
        assert totals["Dave"] == (20.0, 45.0)

    def test_totals_agree_with_balances(self, trip_members, trip_expenses):
        totals = member_totals(trip_members, trip_expenses)
        balances = compute_balances(trip_members, trip_expenses)

        for member, (paid, owed) in totals.items():
            assert paid - owed == pytest.approx(balances[member])


class TestReportingHelpers:
    """Test total and fair share reductions."""

    def test_total_expenses(self, trip_expenses):
        assert total_expenses(trip_expenses) == 245.0

    def test_total_expenses_empty(self):
        assert total_expenses([]) == 0.0

    def test_fair_share(self, trip_members, trip_expenses):
        assert fair_share(trip_members, trip_expenses) == 61.25

    def test_fair_share_without_members(self):
        assert fair_share([], []) == 0.0

    def test_fair_share_accepts_generators(self, trip_members, trip_expenses):
        """Members may be any iterable, as with compute_balances."""
        members = (m for m in trip_members)

        assert fair_share(members, iter(trip_expenses)) == 61.25

    def test_fair_share_with_member_set(self, trip_expenses):
        assert fair_share({"Alice", "Bob", "Carol", "Dave", "Erin"}, trip_expenses) == 49.0

    def test_coerce_expense_passthrough(self):
        expense = Expense(amount=1, paid_by="A", split_among=["A"])

        assert coerce_expense(expense) is expense
