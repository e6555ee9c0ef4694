"""Database schema DDL definitions and initialization utilities.

Tables:
  - users: account holders and their (nullable) base currency
  - categories: per-user expense categories
  - expenses: normalized amount (base currency at write time) plus the
    verbatim original amount/currency
  - budgets: monthly limits, optionally scoped to a category
  - metadata: key/value store (schema version etc.)

Monetary values are stored as TEXT holding exact decimal strings.
"""

from __future__ import annotations
import sqlite3
from typing import Sequence
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

USERS_DDL = f"""
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL UNIQUE,
    full_name TEXT,
    base_currency TEXT, -- NULL until first chosen
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

CATEGORIES_DDL = f"""
CREATE TABLE IF NOT EXISTS categories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    name TEXT NOT NULL,
    color TEXT,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
);
"""

EXPENSES_DDL = f"""
CREATE TABLE IF NOT EXISTS expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    category_id INTEGER,
    amount TEXT NOT NULL, -- base currency of the owner at write time
    date TEXT NOT NULL, -- ISO date (YYYY-MM-DD)
    description TEXT,
    recurring INTEGER NOT NULL DEFAULT 0,
    original_amount TEXT NOT NULL,
    original_currency TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
    FOREIGN KEY (category_id) REFERENCES categories(id) ON DELETE SET NULL
);
"""

BUDGETS_DDL = f"""
CREATE TABLE IF NOT EXISTS budgets (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    category_id INTEGER, -- NULL = all expenses
    year INTEGER NOT NULL CHECK (year BETWEEN 2000 AND 2100),
    month INTEGER NOT NULL CHECK (month BETWEEN 1 AND 12),
    limit_amount TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
    FOREIGN KEY (category_id) REFERENCES categories(id) ON DELETE SET NULL
);
"""

METADATA_DDL = f"""
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

CATEGORIES_USER_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_categories_user ON categories(user_id);"
)
EXPENSES_USER_DATE_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_expenses_user_date ON expenses(user_id, date);"
)
BUDGETS_PERIOD_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_budgets_user_period ON budgets(user_id, year, month);"
)

DDL_ORDER: Sequence[str] = (
    USERS_DDL,
    CATEGORIES_DDL,
    EXPENSES_DDL,
    BUDGETS_DDL,
    METADATA_DDL,
)

INDEX_DDL: Sequence[str] = (
    CATEGORIES_USER_INDEX_DDL,
    EXPENSES_USER_DATE_INDEX_DDL,
    BUDGETS_PERIOD_INDEX_DDL,
)


def init_db(path: Path) -> None:
    """Create all tables idempotently.

    Parameters
    ----------
    path: Path to SQLite database file.
    """
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for ddl in DDL_ORDER:
            cur.execute(ddl)
        for ddl in INDEX_DDL:
            cur.execute(ddl)
        conn.commit()
    finally:
        conn.close()
