from typing import List

from fastapi import APIRouter, Depends

from expense_manager.db.dal import Database
from expense_manager.models.category import Category, CategoryIn
from expense_manager.models.user import User
from expense_manager.routers.deps import get_current_user, get_db
from expense_manager.services.ownership import resolve_category

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=List[Category], summary="List own categories")
def list_categories(
    user: User = Depends(get_current_user), db: Database = Depends(get_db)
):
    return [Category(**r) for r in db.list_categories(user.id)]


@router.post("/", response_model=Category, status_code=201, summary="Create a category")
def create_category(
    payload: CategoryIn,
    user: User = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    category_id = db.create_category(user.id, payload.name, payload.color)
    return resolve_category(db, user, category_id)


@router.delete(
    "/{category_id}",
    status_code=204,
    summary=(
        "Delete a category (its expenses become uncategorized and its budgets"
        " widen to all expenses of their month)"
    ),
)
def delete_category(
    category_id: int,
    user: User = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    resolve_category(db, user, category_id)
    db.delete_category(category_id)
    return None
