from fastapi import APIRouter, Depends

from expense_manager.db.dal import Database
from expense_manager.models.user import BaseCurrencyUpdate, User, UserCreate
from expense_manager.routers.deps import get_current_user, get_db
from expense_manager.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=User, status_code=201, summary="Register a user profile")
def create_user(payload: UserCreate, db: Database = Depends(get_db)):
    return user_service.create_user(
        db, payload.email, full_name=payload.full_name, base_currency=payload.base_currency
    )


@router.get("/me", response_model=User, summary="Current user profile")
def read_me(user: User = Depends(get_current_user)):
    return user


@router.put(
    "/me/base-currency",
    response_model=User,
    summary="Select base currency (existing expenses are not reconverted)",
)
def set_base_currency(
    payload: BaseCurrencyUpdate,
    user: User = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    return user_service.change_base_currency(db, user, payload.base_currency)
