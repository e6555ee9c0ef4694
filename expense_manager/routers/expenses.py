from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from expense_manager.models.expense import (
    Expense,
    ExpenseIn,
    ExpenseSummary,
    MonthlySummaryItem,
)
from expense_manager.models.user import User
from expense_manager.routers.deps import get_current_user, get_expense_aggregator
from expense_manager.services.expense_service import ExpenseAggregator

router = APIRouter(prefix="/expenses", tags=["expenses"])


def _check_range(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=400, detail="start_date cannot be after end_date"
        )


# Routes -----------------------------------------------------------
@router.post(
    "/", response_model=Expense, status_code=201, summary="Record an expense"
)
def create_expense(
    payload: ExpenseIn,
    user: User = Depends(get_current_user),
    svc: ExpenseAggregator = Depends(get_expense_aggregator),
):
    return svc.record(
        user,
        payload.amount,
        payload.currency,
        payload.date,
        description=payload.description,
        category_id=payload.category_id,
        recurring=payload.recurring,
    )


@router.get(
    "/", response_model=List[Expense], summary="List expenses with optional filters"
)
def list_expenses_endpoint(
    category_id: Optional[int] = Query(None, description="Filter by category id"),
    start_date: Optional[date] = Query(
        None, description="Filter: start date inclusive"
    ),
    end_date: Optional[date] = Query(None, description="Filter: end date inclusive"),
    user: User = Depends(get_current_user),
    svc: ExpenseAggregator = Depends(get_expense_aggregator),
):
    _check_range(start_date, end_date)
    return svc.query(
        user, category_id=category_id, start_date=start_date, end_date=end_date
    )


@router.get(
    "/summary",
    response_model=ExpenseSummary,
    summary="Total and per-category totals in base currency",
)
def summary_endpoint(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    user: User = Depends(get_current_user),
    svc: ExpenseAggregator = Depends(get_expense_aggregator),
):
    _check_range(start_date, end_date)
    return svc.summarize(user, start_date=start_date, end_date=end_date)


@router.get(
    "/summary/monthly",
    response_model=List[MonthlySummaryItem],
    summary="Per-month totals for a calendar year (months without expenses omitted)",
)
def monthly_summary_endpoint(
    year: int = Query(..., ge=1, le=9999),
    user: User = Depends(get_current_user),
    svc: ExpenseAggregator = Depends(get_expense_aggregator),
):
    return svc.monthly_summary(user, year)


@router.get("/{expense_id}", response_model=Expense, summary="Fetch one expense")
def get_expense(
    expense_id: int,
    user: User = Depends(get_current_user),
    svc: ExpenseAggregator = Depends(get_expense_aggregator),
):
    return svc.get(user, expense_id)


@router.put("/{expense_id}", response_model=Expense, summary="Replace an expense")
def update_expense(
    expense_id: int,
    payload: ExpenseIn,
    user: User = Depends(get_current_user),
    svc: ExpenseAggregator = Depends(get_expense_aggregator),
):
    return svc.update(
        user,
        expense_id,
        payload.amount,
        payload.currency,
        payload.date,
        description=payload.description,
        category_id=payload.category_id,
        recurring=payload.recurring,
    )


@router.delete("/{expense_id}", status_code=204, summary="Delete an expense")
def delete_expense(
    expense_id: int,
    user: User = Depends(get_current_user),
    svc: ExpenseAggregator = Depends(get_expense_aggregator),
):
    svc.delete(user, expense_id)
    return None
