"""Activity feed and batch operations — scoped to the caller's company."""

import uuid

from fastapi import APIRouter
from pydantic import BaseModel, Field
from sqlmodel import select

from app.api.deps import Auth, Session
from app.models.activity import Activity, ActivityRead
from app.models.base import INT_MAX, Label
from app.services.batch import apply_batch

router = APIRouter(prefix="/activities", tags=["activities"])

FEED_PAGE_MAX = 100
ITEM_FEED_PAGE_MAX = 50


# ── Schemas ──────────────────────────────────────────────────

class BatchLine(BaseModel):
    item_id: uuid.UUID
    # Removals of any size saturate at 0
    quantity_change: int = Field(le=INT_MAX)


class BatchRequest(BaseModel):
    session_title: Label
    items: list[BatchLine] = Field(min_length=1)


class BatchResponse(BaseModel):
    success: bool = True
    applied: int


# ── Routes ───────────────────────────────────────────────────

@router.get("", response_model=list[ActivityRead])
async def list_activities(
    auth: Auth,
    session: Session,
    limit: int = FEED_PAGE_MAX,
    offset: int = 0,
) -> list[ActivityRead]:
    """Most recent activity first."""
    stmt = (
        select(Activity)
        .where(Activity.company_id == auth.company_id)
        .order_by(Activity.created_at.desc())  # type: ignore[union-attr]
        .limit(max(1, min(limit, FEED_PAGE_MAX)))
        .offset(max(0, offset))
    )
    result = await session.execute(stmt)
    return [ActivityRead.model_validate(a) for a in result.scalars().all()]


@router.get("/items/{item_id}", response_model=list[ActivityRead])
async def list_item_activities(
    item_id: uuid.UUID,
    auth: Auth,
    session: Session,
    limit: int = ITEM_FEED_PAGE_MAX,
) -> list[ActivityRead]:
    """History of one item. A foreign item id just yields an empty feed."""
    stmt = (
        select(Activity)
        .where(Activity.company_id == auth.company_id, Activity.item_id == item_id)
        .order_by(Activity.created_at.desc())  # type: ignore[union-attr]
        .limit(max(1, min(limit, ITEM_FEED_PAGE_MAX)))
    )
    result = await session.execute(stmt)
    return [ActivityRead.model_validate(a) for a in result.scalars().all()]


@router.post("/batch", response_model=BatchResponse)
async def create_batch(body: BatchRequest, auth: Auth, session: Session) -> BatchResponse:
    """Apply several quantity changes atomically under one session title.

    Item state is not echoed back; re-fetch items afterwards.
    """
    applied = await apply_batch(
        session,
        auth,
        body.session_title,
        [(line.item_id, line.quantity_change) for line in body.items],
    )
    return BatchResponse(applied=applied)
