from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from expense_manager.services.money import normalize_currency
from .constants import MAX_BUDGET_YEAR, MIN_BUDGET_YEAR


class Budget(BaseModel):
    id: int
    user_id: int
    category_id: Optional[int] = None  # None = all expenses
    category_name: Optional[str] = None
    year: int
    month: int
    limit_amount: Decimal


class BudgetIn(BaseModel):
    category_id: Optional[int] = None
    year: int = Field(..., ge=MIN_BUDGET_YEAR, le=MAX_BUDGET_YEAR)
    month: int = Field(..., ge=1, le=12)
    limit_amount: Decimal = Field(..., ge=0, max_digits=14, decimal_places=2)
    # Only used when the user has no base currency yet
    currency: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def _valid_currency(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return normalize_currency(v)


class BudgetStatus(BaseModel):
    id: int
    year: int
    month: int
    category_id: Optional[int] = None
    category_name: str
    limit_amount: Decimal
    spent: Decimal
    remaining: Decimal
    percent_used: int
