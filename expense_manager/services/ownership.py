"""Category lookup shared by expense and budget writes."""

from __future__ import annotations

from typing import Optional

from expense_manager.db.dal import Database
from expense_manager.models.category import Category
from expense_manager.models.user import User
from expense_manager.services.errors import NotFoundError


def resolve_category(
    db: Database, user: User, category_id: Optional[int]
) -> Optional[Category]:
    """Return the user's category for ``category_id`` (None passes through).

    Another user's category is reported as not found rather than forbidden,
    so ids of foreign categories are not disclosed.
    """
    if category_id is None:
        return None
    row = db.get_category(category_id)
    if row is None or row["user_id"] != user.id:
        raise NotFoundError("Category not found")
    return Category(**row)


__all__ = ["resolve_category"]
