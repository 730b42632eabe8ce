"""Shared fixtures for the analytics test-suite."""

from __future__ import annotations

import os
import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.settings import AnalyticsSettings, get_settings
from core.models import Transaction


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep host environment overrides out of the cached settings."""

    for name in list(os.environ):
        if name.startswith("FLOWCAST_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(ROOT / "tests")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings() -> AnalyticsSettings:
    return AnalyticsSettings()


@pytest.fixture()
def coffee_transactions() -> list[Transaction]:
    return [
        Transaction(amount=5000, date=date(2025, 1, 1)),
        Transaction(amount=-200, date=date(2025, 1, 2), description="Coffee"),
        Transaction(amount=-200, date=date(2025, 1, 9), description="Coffee"),
        Transaction(amount=-200, date=date(2025, 1, 16), description="Coffee"),
    ]


@pytest.fixture()
def steady_month() -> list[Transaction]:
    """Thirty days of flat spending with a weekly freelance payout."""

    start = date(2025, 3, 1)
    transactions: list[Transaction] = []
    for offset in range(30):
        day = start + timedelta(days=offset)
        transactions.append(
            Transaction(amount=-300, date=day, description="Groceries", category="Groceries")
        )
        if offset % 7 == 0:
            transactions.append(
                Transaction(amount=2100, date=day, description="Freelance payout", type="income")
            )
    return transactions
