from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from expense_manager.models.rates import ConversionOut, RateTableOut
from expense_manager.routers.deps import get_converter, get_rate_cache
from expense_manager.services.money import normalize_currency
from expense_manager.services.rates.cache_service import RateCache
from expense_manager.services.rates.conversion import CurrencyConverter

"""Rates router: inspect cached tables, convert ad hoc, drop the cache.

    - GET /rates/convert          -> convert an amount through the USD pivot
    - GET /rates/{base}           -> table for a base (fallback flagged)
    - DELETE /rates/cache         -> forget all fetched tables
"""

router = APIRouter(prefix="/rates", tags=["rates"])


def _currency(value: str) -> str:
    try:
        return normalize_currency(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/convert", response_model=ConversionOut, summary="Convert an amount")
def convert(
    amount: Decimal = Query(..., ge=0),
    from_currency: str = Query(..., alias="from"),
    to_currency: str = Query(..., alias="to"),
    converter: CurrencyConverter = Depends(get_converter),
):
    src, dst = _currency(from_currency), _currency(to_currency)
    return ConversionOut(
        amount=amount,
        from_currency=src,
        to_currency=dst,
        converted=converter.convert(amount, src, dst),
    )


@router.delete("/cache", summary="Clear cached rate tables")
def clear_cache(cache: RateCache = Depends(get_rate_cache)):
    cache.clear()
    return {"status": "cleared"}


@router.get("/{base}", response_model=RateTableOut, summary="Rate table for a base currency")
def rate_table(
    base: str = Path(..., description="Base currency code", examples=["USD"]),
    cache: RateCache = Depends(get_rate_cache),
):
    table = cache.get(_currency(base))
    return RateTableOut(
        base_currency=table.base_currency,
        rates=dict(table.rates),
        is_fallback=table.is_fallback,
        fetched_at=table.fetched_at,
    )
