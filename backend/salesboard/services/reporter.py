"""Reporting service: month-scoped listing, statistics, and chart aggregations."""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import case, extract, false, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import QueryError
from ..models import Transaction
from ..schemas import (
    CategoryCountSchema,
    CombinedSchema,
    PriceBucketSchema,
    StatisticsSchema,
    TransactionSchema,
)

# ── Constants ─────────────────────────────────────────────────────────────────

PRICE_BOUNDARIES = [0, 100, 200, 300, 400, 500, 600, 700, 800, 900, 1000]
OVERFLOW_LABEL = "901-above"

_RADIX_PREFIXES = ("0x", "0o", "0b")


# ── Month predicate ───────────────────────────────────────────────────────────


def parse_month(raw: Optional[str]) -> Optional[int]:
    """Query-string month → 1..12, or None when it is missing, not a whole number, or out of range.

    Hex, octal and binary literals (``"0x3"``) are read the way a browser's
    ``Number()`` reads them.
    """
    if raw is None:
        return None
    text = raw.strip()
    if not text or "_" in text:
        return None
    if text[:2].lower() in _RADIX_PREFIXES:
        try:
            value = float(int(text, 0))
        except (ValueError, OverflowError):
            return None
    else:
        try:
            value = float(text)
        except ValueError:
            return None
    if not value.is_integer() or not 1 <= value <= 12:
        return None
    return int(value)


def month_filter(month: Optional[int]):
    """The one predicate every read operation filters on.

    Matches rows whose UTC sale month equals ``month``; ``None`` matches nothing.
    """
    if month is None:
        return false()
    return extract("month", Transaction.date_of_sale) == month


@contextmanager
def _query_errors(message: str) -> Iterator[None]:
    try:
        yield
    except (SQLAlchemyError, OverflowError) as exc:
        # OverflowError: a bound integer the driver cannot represent.
        raise QueryError(message) from exc


# ── Shared ─────────────────────────────────────────────────────────────────────


def _tx_to_schema(t: Transaction) -> TransactionSchema:
    return TransactionSchema(
        id=t.id,
        title=t.title,
        description=t.description,
        price=t.price,
        category=t.category,
        date_of_sale=t.date_of_sale,
        sold=t.sold,
    )


def _select_transactions(
    db: Session, month: Optional[int], page: int = 1, per_page: Optional[int] = 10
) -> list[TransactionSchema]:
    query = db.query(Transaction).filter(month_filter(month)).order_by(Transaction.id)
    if per_page is not None:
        query = query.offset((page - 1) * per_page).limit(per_page)
    return [_tx_to_schema(t) for t in query.all()]


def _select_statistics(db: Session, month: Optional[int]) -> Optional[StatisticsSchema]:
    sold = Transaction.sold.is_(True)
    count, total_amount, total_sold, total_not_sold = (
        db.query(
            func.count(Transaction.id),
            func.sum(Transaction.price),
            func.sum(case((sold, 1), else_=0)),
            func.sum(case((sold, 0), else_=1)),
        )
        .filter(month_filter(month))
        .one()
    )
    # No matching rows means no group at all, not a zero group.
    if not count:
        return None
    return StatisticsSchema(
        total_amount=total_amount or 0,
        total_sold=total_sold or 0,
        total_not_sold=total_not_sold or 0,
    )


def _bucket_expression():
    whens = [
        ((Transaction.price >= lo) & (Transaction.price < hi), idx)
        for idx, (lo, hi) in enumerate(zip(PRICE_BOUNDARIES, PRICE_BOUNDARIES[1:]))
    ]
    # Null, negative and >= last boundary all fall through to the overflow index.
    return case(*whens, else_=len(whens))


def _bucket_label(idx: int):
    return PRICE_BOUNDARIES[idx] if idx < len(PRICE_BOUNDARIES) - 1 else OVERFLOW_LABEL


def _select_price_ranges(db: Session, month: Optional[int]) -> list[PriceBucketSchema]:
    bucket = _bucket_expression().label("bucket")
    rows = (
        db.query(bucket, func.count(Transaction.id))
        .filter(month_filter(month))
        .group_by(bucket)
        .order_by(bucket)
        .all()
    )
    return [PriceBucketSchema(label=_bucket_label(idx), count=n) for idx, n in rows]


def _select_categories(db: Session, month: Optional[int]) -> list[CategoryCountSchema]:
    rows = (
        db.query(Transaction.category, func.count(Transaction.id))
        .filter(month_filter(month))
        .group_by(Transaction.category)
        .all()
    )
    return [CategoryCountSchema(category=cat, count=n) for cat, n in rows]


# ── Public operations ─────────────────────────────────────────────────────────


def list_transactions(
    db: Session, month: Optional[int], page: int = 1, per_page: Optional[int] = 10
) -> list[TransactionSchema]:
    """One page of the month's transactions in insertion order.

    ``per_page=None`` returns every match.
    """
    with _query_errors("Error fetching transactions"):
        return _select_transactions(db, month, page, per_page)


def get_statistics(db: Session, month: Optional[int]) -> Optional[StatisticsSchema]:
    """Total sale amount plus sold / not-sold counts; None when the month is empty."""
    with _query_errors("Error fetching statistics"):
        return _select_statistics(db, month)


def get_price_ranges(db: Session, month: Optional[int]) -> list[PriceBucketSchema]:
    with _query_errors("Error fetching bar chart data"):
        return _select_price_ranges(db, month)


def get_category_breakdown(db: Session, month: Optional[int]) -> list[CategoryCountSchema]:
    with _query_errors("Error fetching pie chart data"):
        return _select_categories(db, month)


def get_combined(db: Session, month: Optional[int]) -> CombinedSchema:
    """All four shapes for one month in a single response."""
    with _query_errors("Error fetching combined data"):
        return CombinedSchema(
            transactions=_select_transactions(db, month, per_page=None),
            statistics=_select_statistics(db, month),
            price_ranges=_select_price_ranges(db, month),
            categories=_select_categories(db, month),
        )
