from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from expense_manager.services.money import normalize_currency


class User(BaseModel):
    """Account holder; ``base_currency`` stays None until first chosen."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: Optional[str] = None
    base_currency: Optional[str] = None


class UserCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    full_name: Optional[str] = None
    base_currency: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _email_shape(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v

    @field_validator("base_currency")
    @classmethod
    def _valid_currency(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return normalize_currency(v)


class BaseCurrencyUpdate(BaseModel):
    base_currency: str

    @field_validator("base_currency")
    @classmethod
    def _valid_currency(cls, v: str) -> str:
        return normalize_currency(v)
