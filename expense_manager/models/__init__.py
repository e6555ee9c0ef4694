"""Pydantic domain models for the Expense Manager."""

from .constants import (
    PIVOT_CURRENCY,
    FALLBACK_CURRENCIES,
    UNCATEGORIZED_LABEL,
    ALL_EXPENSES_LABEL,
)  # re-export
from .user import User, UserCreate, BaseCurrencyUpdate
from .category import Category, CategoryIn
from .expense import Expense, ExpenseIn, ExpenseSummary, MonthlySummaryItem
from .budget import Budget, BudgetIn, BudgetStatus
from .rates import RateTableOut, ConversionOut

__all__ = [
    "PIVOT_CURRENCY",
    "FALLBACK_CURRENCIES",
    "UNCATEGORIZED_LABEL",
    "ALL_EXPENSES_LABEL",
    "User",
    "UserCreate",
    "BaseCurrencyUpdate",
    "Category",
    "CategoryIn",
    "Expense",
    "ExpenseIn",
    "ExpenseSummary",
    "MonthlySummaryItem",
    "Budget",
    "BudgetIn",
    "BudgetStatus",
    "RateTableOut",
    "ConversionOut",
]
