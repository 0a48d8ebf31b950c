"""
Shared fixtures for SmartSplit tests.
"""

import os
import random
from unittest.mock import patch

import pytest

from smartsplit.models import Expense
from smartsplit.services.settlement_service import SettlementService


SETTINGS_ENV_VARS = (
    "APP_NAME", "VERSION", "ENVIRONMENT", "DEBUG", "LOG_LEVEL",
    "SETTLEMENT_TOLERANCE", "CONSERVATION_TOLERANCE",
    "CURRENCY_SYMBOL", "DISPLAY_PRECISION",
)


@pytest.fixture
def clean_env():
    """Environment without any SmartSplit overrides."""
    env = {k: v for k, v in os.environ.items() if k.upper() not in SETTINGS_ENV_VARS}
    with patch.dict(os.environ, env, clear=True):
        yield


@pytest.fixture
def two_members():
    return ["A", "B"]


@pytest.fixture
def three_members():
    return ["A", "B", "C"]


@pytest.fixture
def trip_members():
    return ["Alice", "Bob", "Carol", "Dave"]


@pytest.fixture
def trip_expenses():
    """A small weekend trip with uneven spending."""
    return [
        Expense(amount=120.0, paid_by="Alice", split_among=["Alice", "Bob", "Carol", "Dave"]),
        Expense(amount=60.0, paid_by="Bob", split_among=["Bob", "Carol"]),
        Expense(amount=45.0, paid_by="Carol", split_among=["Alice", "Carol", "Dave"]),
        Expense(amount=20.0, paid_by="Dave", split_among=["Alice"]),
    ]


@pytest.fixture
def service():
    """Settlement service with display settings pinned for stable assertions."""
    return SettlementService(tolerance=0.01, currency_symbol="$", precision=2)


def _random_group(seed: int, whole_shares: bool = False):
    """
    Build a random (members, expenses) snapshot.

    With ``whole_shares`` every expense is a whole multiple of its split size,
    so all balances are exact integers.
    """
    rng = random.Random(seed)
    members = [f"member{i}" for i in range(rng.randint(2, 9))]
    expenses = []
    for _ in range(rng.randint(1, 25)):
        split = rng.sample(members, rng.randint(1, len(members)))
        if whole_shares:
            amount = float(rng.randint(1, 200) * len(split))
        else:
            amount = round(rng.uniform(0.5, 500.0), 2)
        expenses.append(Expense(amount=amount, paid_by=rng.choice(members), split_among=split))
    return members, expenses


@pytest.fixture
def random_group():
    """Factory for seeded random group snapshots."""
    return _random_group
