"""Reports router — month statistics, chart aggregations, and the combined view."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import CategoryCountSchema, CombinedSchema, PriceBucketSchema, StatisticsSchema
from ..services.reporter import (
    get_category_breakdown,
    get_combined,
    get_price_ranges,
    get_statistics,
    parse_month,
)

router = APIRouter(prefix="/api", tags=["reports"])

_MONTH = Query(default=None, description="Calendar month 1-12; anything else matches nothing")


@router.get("/statistics", response_model=Optional[StatisticsSchema], summary="Sale totals for a month")
def statistics(month: Optional[str] = _MONTH, db: Session = Depends(get_db)):
    return get_statistics(db, parse_month(month))


@router.get("/bar-chart", response_model=list[PriceBucketSchema], summary="Price-range histogram for a month")
def bar_chart(month: Optional[str] = _MONTH, db: Session = Depends(get_db)):
    return get_price_ranges(db, parse_month(month))


@router.get("/pie-chart", response_model=list[CategoryCountSchema], summary="Item count per category for a month")
def pie_chart(month: Optional[str] = _MONTH, db: Session = Depends(get_db)):
    return get_category_breakdown(db, parse_month(month))


@router.get("/combined", response_model=CombinedSchema, summary="Transactions, statistics and both charts in one call")
def combined(month: Optional[str] = _MONTH, db: Session = Depends(get_db)):
    return get_combined(db, parse_month(month))
