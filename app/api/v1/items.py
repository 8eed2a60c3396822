"""Item CRUD — all queries scoped to the caller's company."""

import uuid

from fastapi import APIRouter, Query, status

from app.api.deps import AdminAuth, Auth, Session
from app.models.item import (
    ItemCreate,
    ItemQuantityUpdate,
    ItemRead,
    ItemThresholdUpdate,
)
from app.services import inventory

router = APIRouter(prefix="/items", tags=["items"])


@router.get("", response_model=list[ItemRead])
async def list_items(auth: Auth, session: Session) -> list[ItemRead]:
    threshold = await inventory.company_threshold(session, auth.company_id)
    items = await inventory.list_items(session, auth.company_id)
    return [inventory.to_read(item, threshold) for item in items]


# Must be declared before /{item_id}
@router.get("/search", response_model=ItemRead)
async def search_by_barcode(
    auth: Auth,
    session: Session,
    barcode: str = Query(min_length=1),
) -> ItemRead:
    """Look up an item by barcode within the caller's company only."""
    item = await inventory.find_by_barcode(session, auth.company_id, barcode)
    threshold = await inventory.company_threshold(session, auth.company_id)
    return inventory.to_read(item, threshold)


@router.post("", response_model=ItemRead, status_code=status.HTTP_201_CREATED)
async def create_item(body: ItemCreate, auth: Auth, session: Session) -> ItemRead:
    item = await inventory.create_item(session, auth, body)
    threshold = await inventory.company_threshold(session, auth.company_id)
    return inventory.to_read(item, threshold)


@router.get("/{item_id}", response_model=ItemRead)
async def get_item(item_id: uuid.UUID, auth: Auth, session: Session) -> ItemRead:
    item = await inventory.get_item(session, auth.company_id, item_id)
    threshold = await inventory.company_threshold(session, auth.company_id)
    return inventory.to_read(item, threshold)


@router.put("/{item_id}", response_model=ItemRead)
async def update_quantity(
    item_id: uuid.UUID,
    body: ItemQuantityUpdate,
    auth: Auth,
    session: Session,
) -> ItemRead:
    """Set the item's quantity. Negative values are stored as 0."""
    item = await inventory.set_quantity(session, auth, item_id, body.quantity)
    threshold = await inventory.company_threshold(session, auth.company_id)
    return inventory.to_read(item, threshold)


@router.put("/{item_id}/threshold", response_model=ItemRead)
async def update_threshold(
    item_id: uuid.UUID,
    body: ItemThresholdUpdate,
    auth: AdminAuth,
    session: Session,
) -> ItemRead:
    item = await inventory.set_threshold(session, auth, item_id, body.low_stock_threshold)
    threshold = await inventory.company_threshold(session, auth.company_id)
    return inventory.to_read(item, threshold)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(item_id: uuid.UUID, auth: Auth, session: Session) -> None:
    await inventory.delete_item(session, auth, item_id)
