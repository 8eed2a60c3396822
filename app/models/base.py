"""Shared base fields for all models."""

import uuid
from datetime import datetime, timezone
from typing import Annotated

from pydantic import StringConstraints
from sqlmodel import Field, SQLModel

# Largest value an INTEGER column holds on every supported backend
INT_MAX = 2_147_483_647

# Request text that must still be non-empty once surrounding whitespace is gone
Label = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


class CreatedAtMixin(SQLModel):
    """Creation timestamp only, for append-only rows."""

    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)


class TimestampMixin(SQLModel):
    """Created / updated timestamps for mutable tables."""

    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
