from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Category(BaseModel):
    id: int
    user_id: int
    name: str
    color: Optional[str] = None


class CategoryIn(BaseModel):
    name: str = Field(..., max_length=80)
    color: Optional[str] = Field(None, max_length=32)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("name cannot be empty")
        return value.strip()
