"""Shared builders for the test suite."""

from __future__ import annotations

import tempfile
from decimal import Decimal
from pathlib import Path
from typing import Dict

from expense_manager.core.config import Settings
from expense_manager.db.dal import Database
from expense_manager.db.migrate import apply_migrations
from expense_manager.models.user import User
from expense_manager.services.budget_service import BudgetEvaluator
from expense_manager.services.expense_service import ExpenseAggregator
from expense_manager.services.rates.base import RateSource, RateSourceUnavailable
from expense_manager.services.rates.cache_service import RateCache
from expense_manager.services.rates.conversion import CurrencyConverter
from expense_manager.services.rates.providers import StaticRateSource

# 1 USD = N units
TEST_USD_RATES: Dict[str, str] = {
    "USD": "1",
    "EUR": "0.85",
    "GBP": "0.73",
    "JPY": "150",
}


def fixed_rate_source() -> StaticRateSource:
    return StaticRateSource(TEST_USD_RATES)


class FailingRateSource(RateSource):
    def __init__(self) -> None:
        self.calls = 0

    def fetch_rates(self, base_currency: str) -> Dict[str, Decimal]:
        self.calls += 1
        raise RateSourceUnavailable("provider down")


def make_settings(tmpdir: str) -> Settings:
    settings = Settings(
        data_dir=Path(tmpdir),
        db_filename="test.sqlite3",
        exchange_rate_provider="static",
        default_base_currency="INR",
    )
    settings.init_post_load()
    return settings


class ServiceFixture:
    """Fresh database plus the full service stack over a deterministic rate table."""

    def __init__(self, source: RateSource | None = None) -> None:
        self._tmp = tempfile.TemporaryDirectory(prefix="expense_test_")
        db_path = Path(self._tmp.name) / "test.sqlite3"
        apply_migrations(db_path)
        self.db = Database(db_path)
        self.rate_cache = RateCache(source or fixed_rate_source())
        self.converter = CurrencyConverter(self.rate_cache)
        self.expenses = ExpenseAggregator(self.db, self.converter)
        self.budgets = BudgetEvaluator(self.db, self.expenses, default_base_currency="INR")

    def user(self, email: str = "ana@example.com", base_currency: str | None = None) -> User:
        user_id = self.db.create_user(email, full_name=None, base_currency=base_currency)
        return User(**self.db.get_user(user_id))

    def category(self, user: User, name: str) -> int:
        return self.db.create_category(user.id, name, "#aabbcc")

    def close(self) -> None:
        self._tmp.cleanup()
