"""User model — belongs to exactly one company."""

import uuid
from datetime import datetime
from enum import StrEnum

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid


class UserRole(StrEnum):
    USER = "user"
    ADMIN = "admin"


class User(TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    company_id: uuid.UUID = Field(
        foreign_key="companies.id", ondelete="CASCADE", nullable=False, index=True,
    )
    # Globally unique, not per company
    email: str = Field(max_length=320, unique=True, nullable=False, index=True)
    password_hash: str = Field(nullable=False)
    name: str = Field(max_length=255, nullable=False)
    role: UserRole = Field(default=UserRole.USER)
    is_active: bool = Field(default=True)
    last_login_at: datetime | None = Field(default=None)


# ── Pydantic schemas ─────────────────────────────────────────

class UserRead(SQLModel):
    """Never includes the password hash."""
    id: uuid.UUID
    company_id: uuid.UUID
    email: str
    name: str
    role: UserRole
    is_active: bool
    last_login_at: datetime | None
    created_at: datetime


class UserPermanentDelete(SQLModel):
    confirmation_text: str
