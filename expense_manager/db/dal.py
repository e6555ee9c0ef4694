"""Data Access Layer for users, categories, expenses and budgets.

Responsibilities
----------------
- Provide CRUD helpers scoped by owning user.
- Store monetary values as exact decimal strings; callers receive plain
  dict rows and convert them into domain models.
- Each public method opens one short-lived connection, so a single write
  is one transaction.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from pathlib import Path
import sqlite3
from typing import Any, Dict, Iterator, List, Optional

UTC_NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

_EXPENSE_SELECT = """
    SELECT e.*, c.name AS category_name
    FROM expenses e
    LEFT JOIN categories c ON c.id = e.category_id
"""

_BUDGET_SELECT = """
    SELECT b.*, c.name AS category_name
    FROM budgets b
    LEFT JOIN categories c ON c.id = b.category_id
"""


def _money(value: Decimal) -> str:
    return str(value)


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection committed on success, rolled back on error, always closed."""
        conn = self._connect()
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Users
    def create_user(
        self,
        email: str,
        full_name: Optional[str] = None,
        base_currency: Optional[str] = None,
    ) -> int:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(
                "INSERT INTO users (email, full_name, base_currency) VALUES (?, ?, ?)",
                (email, full_name, base_currency),
            )
            return int(cur.lastrowid)

    def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    def set_user_base_currency(self, user_id: int, base_currency: str) -> None:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                UPDATE users
                SET base_currency = ?, updated_at = ({UTC_NOW_SQL})
                WHERE id = ?
                """,
                (base_currency, user_id),
            )
            if cur.rowcount == 0:
                raise ValueError("User not found")

    # ------------------------------------------------------------------
    # Categories
    def create_category(
        self, user_id: int, name: str, color: Optional[str] = None
    ) -> int:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(
                "INSERT INTO categories (user_id, name, color) VALUES (?, ?, ?)",
                (user_id, name, color),
            )
            return int(cur.lastrowid)

    def get_category(self, category_id: int) -> Optional[Dict[str, Any]]:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute("SELECT * FROM categories WHERE id = ?", (category_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    def list_categories(self, user_id: int) -> List[Dict[str, Any]]:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(
                "SELECT * FROM categories WHERE user_id = ? ORDER BY name, id",
                (user_id,),
            )
            return [dict(r) for r in cur.fetchall()]

    def delete_category(self, category_id: int) -> bool:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            return cur.rowcount > 0

    # ------------------------------------------------------------------
    # Expenses
    def insert_expense(
        self,
        *,
        user_id: int,
        category_id: Optional[int],
        amount: Decimal,
        expense_date: date,
        description: Optional[str],
        recurring: bool,
        original_amount: Decimal,
        original_currency: str,
    ) -> int:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO expenses (
                    user_id, category_id, amount, date, description, recurring,
                    original_amount, original_currency
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    category_id,
                    _money(amount),
                    expense_date.isoformat(),
                    description,
                    1 if recurring else 0,
                    _money(original_amount),
                    original_currency,
                ),
            )
            return int(cur.lastrowid)

    def update_expense(
        self,
        expense_id: int,
        *,
        category_id: Optional[int],
        amount: Decimal,
        expense_date: date,
        description: Optional[str],
        recurring: bool,
        original_amount: Decimal,
        original_currency: str,
    ) -> None:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                UPDATE expenses
                SET category_id = ?, amount = ?, date = ?, description = ?,
                    recurring = ?, original_amount = ?, original_currency = ?,
                    updated_at = ({UTC_NOW_SQL})
                WHERE id = ?
                """,
                (
                    category_id,
                    _money(amount),
                    expense_date.isoformat(),
                    description,
                    1 if recurring else 0,
                    _money(original_amount),
                    original_currency,
                    expense_id,
                ),
            )
            if cur.rowcount == 0:
                raise ValueError("Expense not found")

    def get_expense(self, expense_id: int) -> Optional[Dict[str, Any]]:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(f"{_EXPENSE_SELECT} WHERE e.id = ?", (expense_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    def list_expenses(
        self,
        user_id: int,
        category_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        clauses = ["e.user_id = ?"]
        params: List[Any] = [user_id]
        if category_id is not None:
            clauses.append("e.category_id = ?")
            params.append(category_id)
        if start_date:
            clauses.append("e.date >= ?")
            params.append(start_date.isoformat())
        if end_date:
            clauses.append("e.date <= ?")
            params.append(end_date.isoformat())
        where = " WHERE " + " AND ".join(clauses)
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(f"{_EXPENSE_SELECT}{where} ORDER BY e.date ASC, e.id ASC", params)
            return [dict(r) for r in cur.fetchall()]

    def count_expenses(self, user_id: int) -> int:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM expenses WHERE user_id = ?", (user_id,))
            row = cur.fetchone()
            return int(row[0] if row and row[0] is not None else 0)

    def delete_expense(self, expense_id: int) -> bool:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
            return cur.rowcount > 0

    # ------------------------------------------------------------------
    # Budgets
    def insert_budget(
        self,
        *,
        user_id: int,
        category_id: Optional[int],
        year: int,
        month: int,
        limit_amount: Decimal,
    ) -> int:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO budgets (user_id, category_id, year, month, limit_amount)
                VALUES (?, ?, ?, ?, ?)
                """,
                (user_id, category_id, year, month, _money(limit_amount)),
            )
            return int(cur.lastrowid)

    def update_budget(
        self,
        budget_id: int,
        *,
        category_id: Optional[int],
        year: int,
        month: int,
        limit_amount: Decimal,
    ) -> None:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                UPDATE budgets
                SET category_id = ?, year = ?, month = ?, limit_amount = ?,
                    updated_at = ({UTC_NOW_SQL})
                WHERE id = ?
                """,
                (category_id, year, month, _money(limit_amount), budget_id),
            )
            if cur.rowcount == 0:
                raise ValueError("Budget not found")

    def get_budget(self, budget_id: int) -> Optional[Dict[str, Any]]:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(f"{_BUDGET_SELECT} WHERE b.id = ?", (budget_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    def list_budgets_for_period(
        self, user_id: int, year: int, month: int
    ) -> List[Dict[str, Any]]:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(
                f"{_BUDGET_SELECT} WHERE b.user_id = ? AND b.year = ? AND b.month = ? ORDER BY b.id",
                (user_id, year, month),
            )
            return [dict(r) for r in cur.fetchall()]

    def count_budgets(self, user_id: int) -> int:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM budgets WHERE user_id = ?", (user_id,))
            row = cur.fetchone()
            return int(row[0] if row and row[0] is not None else 0)

    def delete_budget(self, budget_id: int) -> bool:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM budgets WHERE id = ?", (budget_id,))
            return cur.rowcount > 0
