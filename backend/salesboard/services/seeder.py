"""Database seeder — bulk load of the third-party transaction feed.

Not idempotent: every call inserts the whole feed again.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import SeedError
from ..models import Transaction
from ..schemas import SeedRecord

logger = logging.getLogger(__name__)

SEED_ERROR_MESSAGE = "Error initializing database"


def fetch_seed_data(
    url: str,
    *,
    transport: Optional[httpx.BaseTransport] = None,
    timeout: float = 30.0,
) -> list[Any]:
    """Download the seed feed; it must be a JSON array."""
    try:
        with httpx.Client(transport=transport, timeout=timeout) as client:
            r = client.get(url)
            r.raise_for_status()
            data = r.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise SeedError(SEED_ERROR_MESSAGE) from exc
    if not isinstance(data, list):
        raise SeedError(SEED_ERROR_MESSAGE)
    return data


def seed_transactions(db: Session, items: list[Any]) -> int:
    """Insert every item as a new row in one commit. Returns the number inserted."""
    try:
        records = [SeedRecord.model_validate(item) for item in items]
    except ValidationError as exc:
        raise SeedError(SEED_ERROR_MESSAGE) from exc

    db.add_all(
        Transaction(
            title=r.title,
            description=r.description,
            price=r.price,
            category=r.category,
            date_of_sale=r.date_of_sale,
            sold=r.sold,
        )
        for r in records
    )
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise SeedError(SEED_ERROR_MESSAGE) from exc
    return len(records)


def initialize(db: Session, url: str, *, transport: Optional[httpx.BaseTransport] = None) -> int:
    items = fetch_seed_data(url, transport=transport)
    inserted = seed_transactions(db, items)
    logger.info("Seeded %d transactions from %s", inserted, url)
    return inserted
