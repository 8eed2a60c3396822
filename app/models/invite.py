"""Invite model — single-use, time-limited account creation token."""

import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel

from app.models.base import CreatedAtMixin, new_uuid
from app.models.user import UserRole


class Invite(CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "invites"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    company_id: uuid.UUID = Field(
        foreign_key="companies.id", ondelete="CASCADE", nullable=False, index=True,
    )
    inviter_id: uuid.UUID = Field(
        foreign_key="users.id", ondelete="CASCADE", nullable=False, index=True,
    )

    # SHA-256 of the raw token; the raw value is shown only once at creation
    token_hash: str = Field(nullable=False, unique=True, index=True)

    role: UserRole = Field(default=UserRole.USER)
    expires_at: datetime = Field(nullable=False)
    used: bool = Field(default=False)


# ── Pydantic schemas ─────────────────────────────────────────

class InviteCreate(SQLModel):
    role: UserRole


class InvitePreview(SQLModel):
    """Public view of a pending invite; never exposes ids or the token."""
    company_name: str
    inviter_name: str
    role: UserRole
    expires_at: datetime


class InviteCreated(InvitePreview):
    """Returned exactly once at creation time — includes the raw token."""
    token: str
    invite_url: str
