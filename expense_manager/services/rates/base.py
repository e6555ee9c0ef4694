from __future__ import annotations

"""Rate source abstraction.

A rate source answers one question: for a base currency, how many units of
every other currency does one unit of the base buy. It performs a single
attempt per call and reports any failure as ``RateSourceUnavailable``; the
cache decides what to do about it.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Mapping, Optional


class RateSourceUnavailable(RuntimeError):
    """Raised when a rate source cannot produce a usable table."""


class RateSource(ABC):
    @abstractmethod
    def fetch_rates(self, base_currency: str) -> Dict[str, Decimal]:
        """Return code -> units of code per 1 unit of ``base_currency``."""
        raise NotImplementedError


@dataclass(frozen=True)
class RateTable:
    base_currency: str
    rates: Mapping[str, Decimal]
    is_fallback: bool = False
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def rate_for(self, currency: str) -> Optional[Decimal]:
        return self.rates.get(currency.strip().upper())
