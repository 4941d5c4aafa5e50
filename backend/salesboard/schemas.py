from datetime import datetime, timezone
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─────────────────────────────────────────────────────────────────────────────
# Health
# ─────────────────────────────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    status: str
    version: str


# ─────────────────────────────────────────────────────────────────────────────
# Transactions
# ─────────────────────────────────────────────────────────────────────────────


class SeedRecord(_CamelModel):
    """One item of the seed feed. Unknown keys (``id``, ``image``) are dropped."""

    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    date_of_sale: Optional[datetime] = None
    sold: Optional[bool] = None

    @field_validator("date_of_sale")
    @classmethod
    def _to_naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is None or v.tzinfo is None:
            return v
        return v.astimezone(timezone.utc).replace(tzinfo=None)


class TransactionSchema(_CamelModel):
    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    date_of_sale: Optional[datetime] = None
    sold: Optional[bool] = None

    @field_validator("date_of_sale")
    @classmethod
    def _mark_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        # Stored naive; the store only ever holds UTC.
        if v is None or v.tzinfo is not None:
            return v
        return v.replace(tzinfo=timezone.utc)


# ─────────────────────────────────────────────────────────────────────────────
# Reports
# ─────────────────────────────────────────────────────────────────────────────


class StatisticsSchema(_CamelModel):
    total_amount: float
    total_sold: int
    total_not_sold: int


class PriceBucketSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    label: Union[int, str] = Field(alias="_id")
    count: int


class CategoryCountSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category: Optional[str] = Field(alias="_id")
    count: int


class CombinedSchema(_CamelModel):
    transactions: list[TransactionSchema]
    statistics: Optional[StatisticsSchema] = None
    price_ranges: list[PriceBucketSchema]
    categories: list[CategoryCountSchema]
