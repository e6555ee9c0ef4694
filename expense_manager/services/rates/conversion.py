from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol

from expense_manager.models.constants import PIVOT_CURRENCY
from expense_manager.services.money import Number, round2, round6, to_decimal
from .base import RateTable

"""Currency conversion through the USD pivot.

Rules:
    - Same code on both sides (case-insensitive) -> amount returned as-is.
    - Otherwise amount -> USD (rounded to 6 dp) -> target (rounded to 2 dp),
      both ROUND_HALF_UP, using the USD-based table from the rate cache.
    - A code missing from the table leaves that leg unconverted.

Rounding at both legs means A -> B -> A is not guaranteed to give back the
starting amount.
"""


class SupportsRateTable(Protocol):
    def get(self, base_currency: str) -> RateTable: ...


class CurrencyConverter:
    def __init__(self, rate_cache: SupportsRateTable):
        self._rate_cache = rate_cache

    def _usd_rate(self, currency: str) -> Optional[Decimal]:
        return self._rate_cache.get(PIVOT_CURRENCY).rate_for(currency)

    def convert_to_usd(self, amount: Number, from_currency: str) -> Decimal:
        amount = to_decimal(amount)
        if from_currency.strip().upper() == PIVOT_CURRENCY:
            return amount
        rate = self._usd_rate(from_currency)
        if rate is None:
            return amount
        return round6(amount / rate)

    def convert_from_usd(self, amount_usd: Number, to_currency: str) -> Decimal:
        amount_usd = to_decimal(amount_usd)
        if to_currency.strip().upper() == PIVOT_CURRENCY:
            return amount_usd
        rate = self._usd_rate(to_currency)
        if rate is None:
            return amount_usd
        return round2(amount_usd * rate)

    def convert(self, amount: Number, from_currency: str, to_currency: str) -> Decimal:
        amount = to_decimal(amount)
        if from_currency.strip().upper() == to_currency.strip().upper():
            return amount
        amount_usd = self.convert_to_usd(amount, from_currency)
        return self.convert_from_usd(amount_usd, to_currency)
