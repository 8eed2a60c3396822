"""Batch operations — many quantity deltas applied as one unit under a shared label."""

import logging
import uuid
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import AuthContext
from app.core.database import atomic
from app.core.errors import ValidationError
from app.models.base import INT_MAX, utcnow
from app.services import activity_log
from app.services.inventory import get_item

logger = logging.getLogger(__name__)


async def apply_batch(
    session: AsyncSession,
    actor: AuthContext,
    session_title: str,
    lines: Sequence[tuple[uuid.UUID, int]],
) -> int:
    """Apply ``(item_id, delta)`` pairs in order, all or nothing.

    A missing or foreign item raises NotFoundError and nothing from the
    batch is kept, neither quantities nor activity rows. Returns the number
    of lines applied.
    """
    title = session_title.strip()
    if not title:
        raise ValidationError("Session title is required")
    if not lines:
        raise ValidationError("At least one item is required")

    async with atomic(session):
        for item_id, delta in lines:
            item = await get_item(session, actor.company_id, item_id)
            old_quantity = item.quantity
            if old_quantity + delta > INT_MAX:
                raise ValidationError(f"Quantity of {item.name} would exceed {INT_MAX}")
            item.quantity = max(0, old_quantity + delta)
            item.updated_at = utcnow()
            session.add(item)
            activity_log.record_quantity_change(
                session, actor, item, old_quantity, delta, session_title=title,
            )

    logger.info(
        "Batch '%s' applied %d changes in company %s", title, len(lines), actor.company_id
    )
    return len(lines)
