"""Money / rounding helpers.

Centralized so conversion, storage, and budget arithmetic use identical
rounding semantics (always ROUND_HALF_UP, never banker's rounding).
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Union

ZERO = Decimal("0")
CENT = Decimal("0.01")
PIVOT_SCALE = Decimal("0.000001")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a monetary amount")
    return Decimal(str(value))


def round2(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def round6(value: Number) -> Decimal:
    return to_decimal(value).quantize(PIVOT_SCALE, rounding=ROUND_HALF_UP)


def round_int(value: Number) -> int:
    return int(to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def sum_amounts(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def normalize_currency(value: str) -> str:
    normalized = value.strip().upper()
    if len(normalized) != 3 or not normalized.isalpha():
        raise ValueError("Currency must be a 3-letter ISO 4217 code.")
    return normalized
