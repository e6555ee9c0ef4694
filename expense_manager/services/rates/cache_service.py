from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional

from expense_manager.models.constants import FALLBACK_CURRENCIES
from .base import RateSource, RateSourceUnavailable, RateTable

"""Rate cache keyed by base currency.

Design:
    - Wraps one injected RateSource; the application owns exactly one cache
      instance (kept on ``app.state``) and tests build their own.
    - Single flight per key: the first caller to miss becomes the leader and
      fetches; concurrent callers for the same key wait on the leader's
      Future and receive the very same outcome (table or exception).
    - RateSourceUnavailable -> static 1:1 fallback table, returned but never
      cached, so the next call retries the source.
    - Real tables live until ``clear()`` unless ``ttl_seconds`` is set.
"""

logger = logging.getLogger("expense_manager.rates")


@dataclass
class _CacheEntry:
    table: RateTable
    fetched_at: float  # time.monotonic()


def fallback_table(base_currency: str) -> RateTable:
    rates = {code: Decimal("1") for code in FALLBACK_CURRENCIES}
    return RateTable(base_currency=base_currency, rates=rates, is_fallback=True)


class RateCache:
    """Memoizes RateSource tables per base currency."""

    def __init__(self, source: RateSource, ttl_seconds: Optional[float] = None):
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive when set")
        self._source = source
        self._ttl = ttl_seconds
        self._lock = threading.Lock()
        self._cache: Dict[str, _CacheEntry] = {}
        self._inflight: Dict[str, Future] = {}

    # Internal --------------------------------------------------
    def _is_entry_valid(self, entry: _CacheEntry) -> bool:
        if self._ttl is None:
            return True
        return time.monotonic() - entry.fetched_at < self._ttl

    def _fetch(self, key: str) -> RateTable:
        try:
            rates = self._source.fetch_rates(key)
        except RateSourceUnavailable as exc:
            logger.warning("rate source unavailable for %s, serving fallback: %s", key, exc)
            return fallback_table(key)
        table = RateTable(
            base_currency=key,
            rates={code.upper(): rate for code, rate in rates.items()},
        )
        with self._lock:
            self._cache[key] = _CacheEntry(table=table, fetched_at=time.monotonic())
        return table

    # Public API -----------------------------------------------
    def get(self, base_currency: str) -> RateTable:
        key = base_currency.strip().upper()
        with self._lock:
            entry = self._cache.get(key)
            if entry is not None and self._is_entry_valid(entry):
                return entry.table
            future = self._inflight.get(key)
            leader = future is None
            if leader:
                future = Future()
                self._inflight[key] = future

        if not leader:
            return future.result()

        try:
            table = self._fetch(key)
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(table)
            return table
        finally:
            with self._lock:
                self._inflight.pop(key, None)

    def get_exchange_rates(self, base_currency: str) -> Dict[str, Decimal]:
        return dict(self.get(base_currency).rates)

    def is_cached(self, base_currency: str) -> bool:
        with self._lock:
            return base_currency.strip().upper() in self._cache

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
