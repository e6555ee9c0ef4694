from __future__ import annotations

"""Concrete rate sources and factory.

'external-http' fetches ``{base_url}/{BASE}`` (exchangerate-api v4 shape:
``{"rates": {"EUR": 0.85, ...}}``). 'static' serves a deterministic
USD-based table and rebases it for other base currencies, which keeps
offline runs and tests free of network access.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Mapping, Optional

from expense_manager.core.config import Settings
from expense_manager.services.http_client import get_json, HttpError
from expense_manager.services.money import round6
from .base import RateSource, RateSourceUnavailable

logger = logging.getLogger("expense_manager.rates")

# Units per 1 USD
_STATIC_USD_RATES: Dict[str, Decimal] = {
    "USD": Decimal("1"),
    "EUR": Decimal("0.92"),
    "GBP": Decimal("0.79"),
    "JPY": Decimal("147.50"),
    "CNY": Decimal("7.24"),
    "INR": Decimal("83.10"),
    "AUD": Decimal("1.52"),
    "CAD": Decimal("1.34"),
    "CHF": Decimal("0.88"),
    "SEK": Decimal("10.45"),
    "NZD": Decimal("1.64"),
    "SGD": Decimal("1.35"),
}


class StaticRateSource(RateSource):
    """In-memory table expressed as units per 1 USD."""

    def __init__(self, usd_rates: Optional[Mapping[str, Any]] = None):
        source = usd_rates if usd_rates is not None else _STATIC_USD_RATES
        self._usd_rates = {
            code.strip().upper(): Decimal(str(value)) for code, value in source.items()
        }
        self._usd_rates.setdefault("USD", Decimal("1"))

    def fetch_rates(self, base_currency: str) -> Dict[str, Decimal]:
        base = base_currency.strip().upper()
        if base == "USD":
            return dict(self._usd_rates)
        base_rate = self._usd_rates.get(base)
        if not base_rate:
            raise RateSourceUnavailable(f"No static rates for base {base}")
        rebased = {code: round6(rate / base_rate) for code, rate in self._usd_rates.items()}
        rebased[base] = Decimal("1")
        return rebased


class ExternalHTTPRateSource(RateSource):
    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        fetch_json: Callable[..., Any] = get_json,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._fetch_json = fetch_json

    def fetch_rates(self, base_currency: str) -> Dict[str, Decimal]:
        base = base_currency.strip().upper()
        url = f"{self._base_url}/{base}"
        try:
            payload = self._fetch_json(url, timeout=self._timeout, retries=0)
        except HttpError as exc:
            raise RateSourceUnavailable(str(exc)) from exc
        rates = parse_rates_payload(payload)
        rates.setdefault(base, Decimal("1"))
        logger.info("fetched %d rates for base %s", len(rates), base)
        return rates


def parse_rates_payload(payload: Any) -> Dict[str, Decimal]:
    """Validate a ``{"rates": {code: number}}`` document.

    Any other shape, including non-numeric or non-positive multipliers, is
    reported as ``RateSourceUnavailable``.
    """
    if not isinstance(payload, dict):
        raise RateSourceUnavailable("rate payload is not a JSON object")
    rates = payload.get("rates")
    if not isinstance(rates, dict) or not rates:
        raise RateSourceUnavailable("rate payload missing 'rates' object")
    parsed: Dict[str, Decimal] = {}
    for code, value in rates.items():
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise RateSourceUnavailable(f"non-numeric rate for {code!r}")
        try:
            rate = Decimal(str(value))
        except InvalidOperation as exc:
            raise RateSourceUnavailable(f"non-numeric rate for {code!r}") from exc
        if not rate.is_finite() or rate <= 0:
            raise RateSourceUnavailable(f"invalid rate {value!r} for {code!r}")
        parsed[str(code).strip().upper()] = rate
    return parsed


def _make_static(settings: Settings) -> RateSource:
    return StaticRateSource()


def _make_external_http(settings: Settings) -> RateSource:
    return ExternalHTTPRateSource(
        str(settings.exchange_api_base_url), timeout=settings.http_timeout_seconds
    )


_PROVIDER_REGISTRY: Dict[str, Callable[[Settings], RateSource]] = {
    "static": _make_static,
    "external-http": _make_external_http,
}


def make_rate_source(settings: Settings) -> RateSource:
    factory = _PROVIDER_REGISTRY.get(settings.exchange_rate_provider)
    if not factory:
        raise ValueError(
            f"Unknown rate provider kind '{settings.exchange_rate_provider}'"
        )
    return factory(settings)
