"""Tenant-scoped item operations and stock classification."""

import logging
import uuid

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.api.deps import AuthContext
from app.core.config import get_settings
from app.core.database import atomic
from app.core.errors import ConflictError, NotFoundError
from app.models.base import utcnow
from app.models.company import Company
from app.models.item import Item, ItemCreate, ItemRead, StockStatus
from app.services import activity_log

logger = logging.getLogger(__name__)

settings = get_settings()

BARCODE_TAKEN = "Barcode already exists"


# ── Stock classification ──────────────────────────────────────

def effective_threshold(item_threshold: int | None, company_threshold: int | None) -> int:
    """Item override, then company default, then the global default."""
    if item_threshold is not None:
        return item_threshold
    if company_threshold is not None:
        return company_threshold
    return settings.default_low_stock_threshold


def stock_status(quantity: int, threshold: int) -> StockStatus:
    """Out of stock and low stock never overlap: zero is always out of stock."""
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def to_read(item: Item, company_threshold: int | None) -> ItemRead:
    threshold = effective_threshold(item.low_stock_threshold, company_threshold)
    return ItemRead(
        id=item.id,
        name=item.name,
        quantity=item.quantity,
        barcode=item.barcode,
        low_stock_threshold=item.low_stock_threshold,
        effective_threshold=threshold,
        stock_status=stock_status(item.quantity, threshold),
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


async def company_threshold(session: AsyncSession, company_id: uuid.UUID) -> int | None:
    result = await session.execute(
        select(Company.low_stock_threshold).where(Company.id == company_id)
    )
    return result.scalar_one_or_none()


# ── Lookups ───────────────────────────────────────────────────

async def get_item(session: AsyncSession, company_id: uuid.UUID, item_id: uuid.UUID) -> Item:
    """Fetch an item of the given company; another company's item is simply not found."""
    stmt = select(Item).where(Item.id == item_id, Item.company_id == company_id)
    result = await session.execute(stmt)
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFoundError("Item not found")
    return item


async def find_by_barcode(session: AsyncSession, company_id: uuid.UUID, barcode: str) -> Item:
    stmt = select(Item).where(Item.barcode == barcode.strip(), Item.company_id == company_id)
    result = await session.execute(stmt)
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFoundError("Item not found")
    return item


async def list_items(session: AsyncSession, company_id: uuid.UUID) -> list[Item]:
    stmt = (
        select(Item)
        .where(Item.company_id == company_id)
        .order_by(Item.created_at.desc())  # type: ignore[union-attr]
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


# ── Mutations ─────────────────────────────────────────────────

async def create_item(session: AsyncSession, actor: AuthContext, body: ItemCreate) -> Item:
    barcode = body.barcode.strip()

    # Barcodes are unique across companies; the constraint closes the race
    existing = await session.execute(select(Item.id).where(Item.barcode == barcode))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError(BARCODE_TAKEN)

    item = Item(
        company_id=actor.company_id,
        name=body.name.strip(),
        quantity=max(0, body.quantity),
        barcode=barcode,
        low_stock_threshold=body.low_stock_threshold,
    )
    try:
        async with atomic(session):
            session.add(item)
            await session.flush()
            activity_log.record_item_created(session, actor, item)
    except IntegrityError as exc:
        raise ConflictError(BARCODE_TAKEN) from exc

    logger.info("Item %s created in company %s", item.id, actor.company_id)
    return item


async def set_quantity(
    session: AsyncSession,
    actor: AuthContext,
    item_id: uuid.UUID,
    quantity: int,
) -> Item:
    """Set an absolute quantity, saturating at zero, and log the change."""
    async with atomic(session):
        item = await get_item(session, actor.company_id, item_id)
        old_quantity = item.quantity
        item.quantity = max(0, quantity)
        item.updated_at = utcnow()
        session.add(item)
        activity_log.record_quantity_change(
            session, actor, item, old_quantity, item.quantity - old_quantity,
        )
    return item


async def set_threshold(
    session: AsyncSession,
    actor: AuthContext,
    item_id: uuid.UUID,
    threshold: int | None,
) -> Item:
    async with atomic(session):
        item = await get_item(session, actor.company_id, item_id)
        item.low_stock_threshold = threshold
        item.updated_at = utcnow()
        session.add(item)
    logger.info("Item %s threshold set to %s", item.id, threshold)
    return item


async def delete_item(session: AsyncSession, actor: AuthContext, item_id: uuid.UUID) -> None:
    """Write the deletion record, detach old history, then remove the row."""
    async with atomic(session):
        item = await get_item(session, actor.company_id, item_id)
        activity_log.record_item_deleted(session, actor, item)
        await session.flush()
        await activity_log.detach_item(session, actor.company_id, item.id)
        await session.execute(
            delete(Item).where(Item.id == item.id, Item.company_id == actor.company_id)
        )
    logger.info("Item %s deleted from company %s", item_id, actor.company_id)
