"""Activity recorder — append-only audit rows for inventory and membership changes.

Every helper only adds rows to the caller's session; committing them together
with the state change they describe is the caller's job.
"""

import uuid

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import AuthContext
from app.models.activity import Activity, ActivityType
from app.models.item import Item


def direction_for(delta: int) -> ActivityType:
    """A non-negative change counts as an addition."""
    return ActivityType.ADDED if delta >= 0 else ActivityType.REMOVED


def record_item_created(session: AsyncSession, actor: AuthContext, item: Item) -> Activity:
    activity = Activity(
        company_id=actor.company_id,
        item_id=item.id,
        user_id=actor.user_id,
        type=ActivityType.CREATED,
        quantity=item.quantity,
        item_name=item.name,
        user_name=actor.user_name,
    )
    session.add(activity)
    return activity


def record_quantity_change(
    session: AsyncSession,
    actor: AuthContext,
    item: Item,
    old_quantity: int,
    delta: int,
    session_title: str | None = None,
) -> Activity:
    """Log a quantity change already applied to ``item``.

    ``delta`` decides the direction; the logged quantity is always the
    change actually applied, so ``old_quantity`` ± ``quantity`` equals the
    item's new quantity.
    """
    activity = Activity(
        company_id=actor.company_id,
        item_id=item.id,
        user_id=actor.user_id,
        type=direction_for(delta),
        quantity=abs(item.quantity - old_quantity),
        old_quantity=old_quantity,
        item_name=item.name,
        user_name=actor.user_name,
        session_title=session_title,
    )
    session.add(activity)
    return activity


def record_item_deleted(session: AsyncSession, actor: AuthContext, item: Item) -> Activity:
    # No item_id: the row outlives the item
    activity = Activity(
        company_id=actor.company_id,
        item_id=None,
        user_id=actor.user_id,
        type=ActivityType.DELETED,
        quantity=item.quantity,
        item_name=item.name,
        user_name=actor.user_name,
    )
    session.add(activity)
    return activity


async def detach_item(session: AsyncSession, company_id: uuid.UUID, item_id: uuid.UUID) -> None:
    """Null the item reference on existing history before the item row goes away."""
    await session.execute(
        update(Activity)
        .where(Activity.company_id == company_id, Activity.item_id == item_id)
        .values(item_id=None)
    )


async def reassign_authorship(
    session: AsyncSession,
    actor: AuthContext,
    deleted_user_id: uuid.UUID,
    deleted_user_name: str,
) -> int:
    """Move a deleted user's history onto the admin removing them.

    Returns the number of activities rewritten.
    """
    result = await session.execute(
        update(Activity)
        .where(
            Activity.company_id == actor.company_id,
            Activity.user_id == deleted_user_id,
        )
        .values(
            user_id=actor.user_id,
            user_name=f"{deleted_user_name} (deleted by {actor.user_name})",
        )
    )
    return result.rowcount
