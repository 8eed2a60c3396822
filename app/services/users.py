"""Membership operations — login, listing, soft and permanent removal."""

import logging
import uuid

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.api.deps import AuthContext
from app.core.database import atomic
from app.core.errors import AuthenticationError, NotFoundError, ValidationError
from app.core.security import verify_password
from app.models.base import utcnow
from app.models.company import Company
from app.models.invite import Invite
from app.models.user import User
from app.services import activity_log

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def deletion_phrase(name: str) -> str:
    """Exact text an admin must type to confirm a destructive call."""
    return f"I am sure I want to delete {name}"


async def authenticate(
    session: AsyncSession, email: str, password: str,
) -> tuple[User, Company]:
    """Check credentials of an active user and stamp the login time."""
    stmt = select(User).where(
        User.email == normalize_email(email),
        User.is_active == True,  # noqa: E712
    )
    result = await session.execute(stmt)
    user = result.scalar_one_or_none()

    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", email)
        raise AuthenticationError(INVALID_CREDENTIALS)

    company = await session.get(Company, user.company_id)
    if company is None:
        raise AuthenticationError(INVALID_CREDENTIALS)

    async with atomic(session):
        user.last_login_at = utcnow()
        session.add(user)

    return user, company


async def list_users(session: AsyncSession, company_id: uuid.UUID) -> list[User]:
    stmt = (
        select(User)
        .where(User.company_id == company_id)
        .order_by(User.created_at.asc())  # type: ignore[union-attr]
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_user(session: AsyncSession, company_id: uuid.UUID, user_id: uuid.UUID) -> User:
    stmt = select(User).where(User.id == user_id, User.company_id == company_id)
    result = await session.execute(stmt)
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")
    return user


def _forbid_self(actor: AuthContext, user_id: uuid.UUID) -> None:
    if user_id == actor.user_id:
        raise ValidationError("Cannot delete your own account")


async def deactivate_user(session: AsyncSession, actor: AuthContext, user_id: uuid.UUID) -> User:
    """Routine removal: the account is disabled, its history is untouched."""
    _forbid_self(actor, user_id)
    async with atomic(session):
        user = await get_user(session, actor.company_id, user_id)
        user.is_active = False
        user.updated_at = utcnow()
        session.add(user)
    logger.info("User %s deactivated by %s", user.id, actor.user_id)
    return user


async def delete_user_permanently(
    session: AsyncSession,
    actor: AuthContext,
    user_id: uuid.UUID,
    confirmation_text: str,
) -> int:
    """Destructive removal gated by a typed confirmation phrase.

    The user's activities are reassigned to the acting admin and their
    pending invites are dropped. Returns the number of reassigned activities.
    """
    _forbid_self(actor, user_id)
    user = await get_user(session, actor.company_id, user_id)
    if confirmation_text != deletion_phrase(user.name):
        raise ValidationError("Confirmation text does not match")

    async with atomic(session):
        moved = await activity_log.reassign_authorship(session, actor, user.id, user.name)
        await session.execute(
            delete(Invite).where(
                Invite.company_id == actor.company_id, Invite.inviter_id == user.id,
            )
        )
        await session.execute(
            delete(User).where(User.id == user.id, User.company_id == actor.company_id)
        )

    logger.info(
        "User %s permanently deleted by %s, %d activities reassigned",
        user_id, actor.user_id, moved,
    )
    return moved
