"""Company model — the tenant, top-level isolation boundary."""

import uuid

from sqlmodel import Field, SQLModel

from app.models.base import INT_MAX, TimestampMixin, new_uuid


class Company(TimestampMixin, SQLModel, table=True):
    __tablename__ = "companies"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    name: str = Field(max_length=255, nullable=False)
    code: str = Field(max_length=20, unique=True, nullable=False, index=True)

    # Plan metadata
    subscription_tier: str = Field(default="trial", max_length=50)
    max_users: int = Field(default=50)

    # Tenant-wide default; items may override it
    low_stock_threshold: int | None = Field(default=5, ge=0)


# ── Pydantic schemas ─────────────────────────────────────────

class CompanyRead(SQLModel):
    id: uuid.UUID
    name: str
    code: str
    subscription_tier: str
    max_users: int
    low_stock_threshold: int | None


class CompanyThresholdUpdate(SQLModel):
    low_stock_threshold: int = Field(ge=0, le=INT_MAX)


class CompanyDelete(SQLModel):
    company_id: uuid.UUID
    confirmation_text: str
