from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict

from pydantic import BaseModel


class RateTableOut(BaseModel):
    base_currency: str
    rates: Dict[str, Decimal]
    is_fallback: bool
    fetched_at: datetime


class ConversionOut(BaseModel):
    amount: Decimal
    from_currency: str
    to_currency: str
    converted: Decimal
