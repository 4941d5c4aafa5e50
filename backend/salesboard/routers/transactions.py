from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import TransactionSchema
from ..services.reporter import list_transactions as _list_transactions, parse_month

router = APIRouter(prefix="/api", tags=["transactions"])

# Keeps the offset well inside a 64-bit integer.
MAX_PAGE = 1_000_000
MAX_PER_PAGE = 1_000


@router.get("/transactions", response_model=list[TransactionSchema], summary="List a month's transactions")
def list_transactions(
    month: Optional[str] = Query(default=None, description="Calendar month 1-12; anything else matches nothing"),
    page: int = Query(default=1, ge=1, le=MAX_PAGE),
    per_page: int = Query(default=10, ge=1, le=MAX_PER_PAGE, alias="perPage"),
    db: Session = Depends(get_db),
):
    return _list_transactions(db, parse_month(month), page=page, per_page=per_page)
