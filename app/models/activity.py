"""Activity model — immutable audit entry for inventory and membership changes."""

import uuid
from datetime import datetime
from enum import StrEnum

from sqlmodel import Field, SQLModel

from app.models.base import CreatedAtMixin, new_uuid


class ActivityType(StrEnum):
    CREATED = "created"
    ADDED = "added"
    REMOVED = "removed"
    DELETED = "deleted"


class Activity(CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "activities"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    company_id: uuid.UUID = Field(
        foreign_key="companies.id", ondelete="CASCADE", nullable=False, index=True,
    )
    # Nulled when the item goes away; the snapshot below keeps history readable
    item_id: uuid.UUID | None = Field(
        default=None, foreign_key="items.id", ondelete="SET NULL", nullable=True, index=True,
    )
    # Reassigned to another user before a user row may be deleted
    user_id: uuid.UUID = Field(
        foreign_key="users.id", ondelete="RESTRICT", nullable=False, index=True,
    )

    type: ActivityType = Field(nullable=False)
    quantity: int = Field(nullable=False)
    old_quantity: int | None = Field(default=None)

    # Denormalized snapshots, stored at write time
    item_name: str = Field(max_length=255, nullable=False)
    user_name: str = Field(max_length=600, nullable=False)

    # Shared label for every row of one batch operation
    session_title: str | None = Field(default=None, max_length=255)


# ── Pydantic schemas ─────────────────────────────────────────

class ActivityRead(SQLModel):
    id: uuid.UUID
    type: ActivityType
    quantity: int
    old_quantity: int | None
    item_name: str
    user_name: str
    session_title: str | None
    item_id: uuid.UUID | None
    user_id: uuid.UUID
    created_at: datetime
