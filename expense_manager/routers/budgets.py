from typing import List

from fastapi import APIRouter, Depends, Query

from expense_manager.models.budget import BudgetIn, BudgetStatus
from expense_manager.models.constants import MAX_BUDGET_YEAR, MIN_BUDGET_YEAR
from expense_manager.models.user import User
from expense_manager.routers.deps import get_budget_evaluator, get_current_user
from expense_manager.services.budget_service import BudgetEvaluator

router = APIRouter(prefix="/budgets", tags=["budgets"])


@router.get(
    "/", response_model=List[BudgetStatus], summary="Budget statuses for a month"
)
def list_budgets(
    year: int = Query(..., ge=MIN_BUDGET_YEAR, le=MAX_BUDGET_YEAR),
    month: int = Query(..., ge=1, le=12),
    user: User = Depends(get_current_user),
    svc: BudgetEvaluator = Depends(get_budget_evaluator),
):
    return svc.status_for(user, year, month)


@router.post(
    "/", response_model=BudgetStatus, status_code=201, summary="Create a budget"
)
def create_budget(
    payload: BudgetIn,
    user: User = Depends(get_current_user),
    svc: BudgetEvaluator = Depends(get_budget_evaluator),
):
    budget = svc.create(
        user,
        payload.category_id,
        payload.year,
        payload.month,
        payload.limit_amount,
        proposed_currency=payload.currency,
    )
    return svc.evaluate(user, budget)


@router.put("/{budget_id}", response_model=BudgetStatus, summary="Replace a budget")
def update_budget(
    budget_id: int,
    payload: BudgetIn,
    user: User = Depends(get_current_user),
    svc: BudgetEvaluator = Depends(get_budget_evaluator),
):
    budget = svc.update(
        user,
        budget_id,
        payload.category_id,
        payload.year,
        payload.month,
        payload.limit_amount,
    )
    return svc.evaluate(user, budget)


@router.delete("/{budget_id}", status_code=204, summary="Delete a budget")
def delete_budget(
    budget_id: int,
    user: User = Depends(get_current_user),
    svc: BudgetEvaluator = Depends(get_budget_evaluator),
):
    svc.get(user, budget_id)  # raises NotFound / Unauthorized
    svc.delete(budget_id)
    return None
