"""User lookup and explicit base-currency selection."""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from expense_manager.db.dal import Database
from expense_manager.models.user import User
from expense_manager.services.errors import BusinessError, NotFoundError

logger = logging.getLogger("expense_manager.users")


class EmailTaken(BusinessError):
    code = "EMAIL_TAKEN"
    status_code = 409
    default_message = "A user with this email already exists."


def get_user(db: Database, user_id: int) -> User:
    row = db.get_user(user_id)
    if row is None:
        raise NotFoundError("User not found")
    return User(**row)


def create_user(
    db: Database,
    email: str,
    full_name: Optional[str] = None,
    base_currency: Optional[str] = None,
) -> User:
    try:
        user_id = db.create_user(email, full_name=full_name, base_currency=base_currency)
    except sqlite3.IntegrityError as exc:
        raise EmailTaken() from exc
    return get_user(db, user_id)


def change_base_currency(db: Database, user: User, base_currency: str) -> User:
    """Switch the user's base currency.

    Stored expense amounts stay in the currency they were normalized into.
    """
    previous = user.base_currency
    db.set_user_base_currency(user.id, base_currency)
    user.base_currency = base_currency
    if previous and previous != base_currency and db.count_expenses(user.id):
        logger.warning(
            "user %s changed base currency %s -> %s; existing expenses keep %s amounts",
            user.id,
            previous,
            base_currency,
            previous,
        )
    return user
