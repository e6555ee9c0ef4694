from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

from expense_manager.services.money import normalize_currency
from .constants import DEFAULT_EXPENSE_CURRENCY


class Expense(BaseModel):
    """Stored expense.

    ``amount`` is denominated in the owner's base currency as it was when
    the expense was last written; ``original_amount``/``original_currency``
    are the values the user entered.
    """

    id: int
    user_id: int
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    amount: Decimal
    date: date
    description: Optional[str] = None
    recurring: bool = False
    original_amount: Decimal
    original_currency: str


class ExpenseIn(BaseModel):
    amount: Decimal = Field(..., ge=0, max_digits=14, decimal_places=2)
    currency: str = DEFAULT_EXPENSE_CURRENCY
    date: date
    description: Optional[str] = Field(None, max_length=500)
    category_id: Optional[int] = None
    recurring: bool = False

    @field_validator("currency")
    @classmethod
    def valid_currency(cls, v: str) -> str:
        return normalize_currency(v)


class ExpenseSummary(BaseModel):
    total: Decimal
    totals_by_category: Dict[str, Decimal]


class MonthlySummaryItem(BaseModel):
    month: str  # YYYY-MM
    total: Decimal
