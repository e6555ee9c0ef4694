"""Expense recording and aggregation.

Amounts are normalized into the owner's base currency once, at write time,
and stored at 2 dp next to the verbatim input. Changing the base currency
later does not touch stored amounts, so totals spanning such a change mix
currencies; consumers that care must audit ``original_currency`` themselves.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from expense_manager.db.dal import Database
from expense_manager.models.constants import UNCATEGORIZED_LABEL
from expense_manager.models.expense import Expense, ExpenseSummary, MonthlySummaryItem
from expense_manager.models.user import User
from expense_manager.services.errors import (
    BaseCurrencyRequired,
    BudgetRequired,
    NotFoundError,
    UnauthorizedError,
)
from expense_manager.services.money import Number, round2, sum_amounts, to_decimal
from expense_manager.services.ownership import resolve_category
from expense_manager.services.rates.conversion import CurrencyConverter

logger = logging.getLogger("expense_manager.expenses")


def _row_to_expense(row: dict) -> Expense:
    return Expense(
        id=row["id"],
        user_id=row["user_id"],
        category_id=row.get("category_id"),
        category_name=row.get("category_name"),
        amount=Decimal(row["amount"]),
        date=date.fromisoformat(row["date"]),
        description=row.get("description"),
        recurring=bool(row["recurring"]),
        original_amount=Decimal(row["original_amount"]),
        original_currency=row["original_currency"],
    )


def _require_base_currency(user: User) -> str:
    base = user.base_currency
    if base is None or not base.strip():
        raise BaseCurrencyRequired()
    return base


class ExpenseAggregator:
    def __init__(self, db: Database, converter: CurrencyConverter):
        self._db = db
        self._converter = converter

    def _normalize(self, amount: Decimal, currency: str, base_currency: str) -> Decimal:
        return round2(self._converter.convert(amount, currency, base_currency))

    def _get_owned(self, user: User, expense_id: int) -> dict:
        row = self._db.get_expense(expense_id)
        if row is None:
            raise NotFoundError("Expense not found")
        if row["user_id"] != user.id:
            raise UnauthorizedError()
        return row

    # Writes ------------------------------------------------------
    def record(
        self,
        user: User,
        amount: Number,
        currency: str,
        expense_date: date,
        description: Optional[str] = None,
        category_id: Optional[int] = None,
        recurring: bool = False,
    ) -> Expense:
        if self._db.count_budgets(user.id) == 0:
            raise BudgetRequired()
        base = _require_base_currency(user)
        resolve_category(self._db, user, category_id)

        original_amount = to_decimal(amount)
        normalized = self._normalize(original_amount, currency, base)
        expense_id = self._db.insert_expense(
            user_id=user.id,
            category_id=category_id,
            amount=normalized,
            expense_date=expense_date,
            description=description,
            recurring=recurring,
            original_amount=original_amount,
            original_currency=currency,
        )
        logger.info(
            "recorded expense %s for user %s: %s %s -> %s %s",
            expense_id,
            user.id,
            original_amount,
            currency,
            normalized,
            base,
        )
        return self.get(user, expense_id)

    def update(
        self,
        user: User,
        expense_id: int,
        amount: Number,
        currency: str,
        expense_date: date,
        description: Optional[str] = None,
        category_id: Optional[int] = None,
        recurring: bool = False,
    ) -> Expense:
        self._get_owned(user, expense_id)
        base = _require_base_currency(user)
        resolve_category(self._db, user, category_id)

        original_amount = to_decimal(amount)
        normalized = self._normalize(original_amount, currency, base)
        try:
            self._db.update_expense(
                expense_id,
                category_id=category_id,
                amount=normalized,
                expense_date=expense_date,
                description=description,
                recurring=recurring,
                original_amount=original_amount,
                original_currency=currency,
            )
        except ValueError as exc:
            # deleted between the ownership check and the write
            raise NotFoundError("Expense not found") from exc
        return self.get(user, expense_id)

    def delete(self, user: User, expense_id: int) -> None:
        self._get_owned(user, expense_id)
        if not self._db.delete_expense(expense_id):
            raise NotFoundError("Expense not found")

    # Reads -------------------------------------------------------
    def get(self, user: User, expense_id: int) -> Expense:
        return _row_to_expense(self._get_owned(user, expense_id))

    def query(
        self,
        user: User,
        category_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Expense]:
        rows = self._db.list_expenses(
            user.id, category_id=category_id, start_date=start_date, end_date=end_date
        )
        return [_row_to_expense(r) for r in rows]

    def summarize(
        self,
        user: User,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ExpenseSummary:
        expenses = self.query(user, start_date=start_date, end_date=end_date)
        by_category: Dict[str, Decimal] = defaultdict(Decimal)
        for e in expenses:
            by_category[e.category_name or UNCATEGORIZED_LABEL] += e.amount
        return ExpenseSummary(
            total=sum_amounts(e.amount for e in expenses),
            totals_by_category=dict(by_category),
        )

    def monthly_summary(self, user: User, year: int) -> List[MonthlySummaryItem]:
        expenses = self.query(
            user, start_date=date(year, 1, 1), end_date=date(year, 12, 31)
        )
        by_month: Dict[tuple, Decimal] = defaultdict(Decimal)
        for e in expenses:
            by_month[(e.date.year, e.date.month)] += e.amount
        return [
            MonthlySummaryItem(month=f"{y:04d}-{m:02d}", total=total)
            for (y, m), total in sorted(by_month.items())
        ]
