"""FastAPI dependencies resolving the per-app services from ``app.state``.

``create_app`` wires one Database, one RateCache, and the services built on
them; routers only ever reach them through these helpers, so tests can swap
any of them on a fresh app.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request

from expense_manager.db.dal import Database
from expense_manager.models.user import User
from expense_manager.services.budget_service import BudgetEvaluator
from expense_manager.services.expense_service import ExpenseAggregator
from expense_manager.services.rates.cache_service import RateCache
from expense_manager.services.rates.conversion import CurrencyConverter


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_rate_cache(request: Request) -> RateCache:
    return request.app.state.rate_cache


def get_converter(request: Request) -> CurrencyConverter:
    return request.app.state.converter


def get_expense_aggregator(request: Request) -> ExpenseAggregator:
    return request.app.state.expenses


def get_budget_evaluator(request: Request) -> BudgetEvaluator:
    return request.app.state.budgets


def get_current_user(
    x_user_id: int | None = Header(None, description="Authenticated user id"),
    db: Database = Depends(get_db),
) -> User:
    # Authentication lives in front of this service; it forwards the user id.
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="missing X-User-Id header")
    row = db.get_user(x_user_id)
    if row is None:
        raise HTTPException(status_code=401, detail="unknown user")
    return User(**row)


__all__ = [
    "get_db",
    "get_rate_cache",
    "get_converter",
    "get_expense_aggregator",
    "get_budget_evaluator",
    "get_current_user",
]
