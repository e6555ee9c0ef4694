"""Budget writes and spend-vs-limit evaluation.

Status arithmetic for one budget:
    spent        = sum of normalized expense amounts in the budget's month
                   (restricted to its category, or all expenses if none)
    remaining    = limit - spent, negative when overspent
    percent_used = 0 when limit <= 0, else round_half_up(spent * 100 / limit)

Several budgets may exist for the same (category, month); each is evaluated
on its own.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from expense_manager.db.dal import Database
from expense_manager.models.budget import Budget, BudgetStatus
from expense_manager.models.constants import ALL_EXPENSES_LABEL
from expense_manager.models.user import User
from expense_manager.services.errors import NotFoundError, UnauthorizedError
from expense_manager.services.expense_service import ExpenseAggregator
from expense_manager.services.money import (
    ZERO,
    Number,
    normalize_currency,
    round_int,
    sum_amounts,
    to_decimal,
)
from expense_manager.services.ownership import resolve_category

logger = logging.getLogger("expense_manager.budgets")


def _row_to_budget(row: dict) -> Budget:
    return Budget(
        id=row["id"],
        user_id=row["user_id"],
        category_id=row.get("category_id"),
        category_name=row.get("category_name"),
        year=row["year"],
        month=row["month"],
        limit_amount=Decimal(row["limit_amount"]),
    )


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def percent_used(spent: Decimal, limit_amount: Decimal) -> int:
    if limit_amount <= ZERO:
        return 0
    return round_int(spent * 100 / limit_amount)


def ensure_base_currency(
    db: Database, user: User, proposed: Optional[str], default: str
) -> str:
    """Give ``user`` a base currency if it has none; return the effective one.

    Uses ``proposed`` when non-blank, else ``default``. A proposed code that
    is not a 3-letter currency code raises ValueError and nothing is saved.
    An existing base currency is never changed here.
    """
    if user.base_currency and user.base_currency.strip():
        return user.base_currency
    chosen = normalize_currency(proposed) if proposed and proposed.strip() else default
    db.set_user_base_currency(user.id, chosen)
    user.base_currency = chosen
    logger.info("base currency of user %s set to %s", user.id, chosen)
    return chosen


class BudgetEvaluator:
    def __init__(
        self,
        db: Database,
        expenses: ExpenseAggregator,
        default_base_currency: str = "INR",
    ):
        self._db = db
        self._expenses = expenses
        self._default_base_currency = default_base_currency

    def ensure_base_currency(self, user: User, proposed: Optional[str]) -> str:
        return ensure_base_currency(
            self._db, user, proposed, self._default_base_currency
        )

    def _get_owned(self, user: User, budget_id: int) -> dict:
        row = self._db.get_budget(budget_id)
        if row is None:
            raise NotFoundError("Budget not found")
        if row["user_id"] != user.id:
            raise UnauthorizedError()
        return row

    # Writes ------------------------------------------------------
    def create(
        self,
        user: User,
        category_id: Optional[int],
        year: int,
        month: int,
        limit_amount: Number,
        proposed_currency: Optional[str] = None,
    ) -> Budget:
        resolve_category(self._db, user, category_id)
        self.ensure_base_currency(user, proposed_currency)
        budget_id = self._db.insert_budget(
            user_id=user.id,
            category_id=category_id,
            year=year,
            month=month,
            limit_amount=to_decimal(limit_amount),
        )
        return self.get(user, budget_id)

    def update(
        self,
        user: User,
        budget_id: int,
        category_id: Optional[int],
        year: int,
        month: int,
        limit_amount: Number,
    ) -> Budget:
        self._get_owned(user, budget_id)
        resolve_category(self._db, user, category_id)
        try:
            self._db.update_budget(
                budget_id,
                category_id=category_id,
                year=year,
                month=month,
                limit_amount=to_decimal(limit_amount),
            )
        except ValueError as exc:
            raise NotFoundError("Budget not found") from exc
        return self.get(user, budget_id)

    def delete(self, budget_id: int) -> bool:
        """Delete by id without an ownership check; callers verify ownership first."""
        return self._db.delete_budget(budget_id)

    # Reads -------------------------------------------------------
    def get(self, user: User, budget_id: int) -> Budget:
        return _row_to_budget(self._get_owned(user, budget_id))

    def evaluate(self, user: User, budget: Budget) -> BudgetStatus:
        start, end = month_bounds(budget.year, budget.month)
        expenses = self._expenses.query(
            user, category_id=budget.category_id, start_date=start, end_date=end
        )
        spent = sum_amounts(e.amount for e in expenses)
        return BudgetStatus(
            id=budget.id,
            year=budget.year,
            month=budget.month,
            category_id=budget.category_id,
            category_name=(
                budget.category_name if budget.category_id is not None else ALL_EXPENSES_LABEL
            ),
            limit_amount=budget.limit_amount,
            spent=spent,
            remaining=budget.limit_amount - spent,
            percent_used=percent_used(spent, budget.limit_amount),
        )

    def status_for(self, user: User, year: int, month: int) -> List[BudgetStatus]:
        rows = self._db.list_budgets_for_period(user.id, year, month)
        return [self.evaluate(user, _row_to_budget(r)) for r in rows]
