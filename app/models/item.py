"""Item model — a tracked inventory line owned by a company."""

import uuid
from datetime import datetime
from enum import StrEnum
from typing import Annotated

from pydantic import StringConstraints
from sqlmodel import Field, SQLModel

from app.models.base import INT_MAX, Label, TimestampMixin, new_uuid

Barcode = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=128)]


class StockStatus(StrEnum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class Item(TimestampMixin, SQLModel, table=True):
    __tablename__ = "items"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    company_id: uuid.UUID = Field(
        foreign_key="companies.id", ondelete="CASCADE", nullable=False, index=True,
    )
    name: str = Field(max_length=255, nullable=False)
    quantity: int = Field(default=0, ge=0)

    # Unique across all companies, not just within one
    barcode: str = Field(max_length=128, unique=True, nullable=False, index=True)

    # NULL means "use the company default"
    low_stock_threshold: int | None = Field(default=None, ge=0)


# ── Pydantic schemas ─────────────────────────────────────────

class ItemCreate(SQLModel):
    name: Label
    barcode: Barcode
    quantity: int = Field(default=0, le=INT_MAX)
    low_stock_threshold: int | None = Field(default=None, ge=0, le=INT_MAX)


class ItemQuantityUpdate(SQLModel):
    # Negative values are accepted and saturate at 0
    quantity: int = Field(le=INT_MAX)


class ItemThresholdUpdate(SQLModel):
    low_stock_threshold: int | None = Field(
        default=None, ge=0, le=INT_MAX, description="null clears the override",
    )


class ItemRead(SQLModel):
    id: uuid.UUID
    name: str
    quantity: int
    barcode: str
    low_stock_threshold: int | None
    effective_threshold: int
    stock_status: StockStatus
    created_at: datetime
    updated_at: datetime
