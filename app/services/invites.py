"""Invite lifecycle — issue, validate and redeem single-use tokens.

An invite is ``issued`` until it is either redeemed (``used`` flips once) or
its expiry passes. Callers of the public operations only ever learn that a
token is "not found or expired", never which of the three reasons applied.
"""

import logging
from datetime import timedelta
from urllib.parse import urlencode

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.api.deps import AuthContext
from app.core.config import get_settings
from app.core.database import atomic
from app.core.errors import ConflictError, NotFoundError
from app.core.security import generate_invite_token, hash_password, hash_token
from app.models.base import utcnow
from app.models.company import Company
from app.models.invite import Invite, InviteCreated, InvitePreview
from app.models.user import User, UserRole
from app.services.users import normalize_email

logger = logging.getLogger(__name__)

settings = get_settings()

INVITE_GONE = "Invitation not found or expired"
EMAIL_TAKEN = "User with this email already exists"


def invite_url(raw_token: str) -> str:
    return f"{settings.invite_base_url}?{urlencode({'token': raw_token})}"


async def issue_invite(
    session: AsyncSession, actor: AuthContext, role: UserRole,
) -> InviteCreated:
    """Create a pending invite into the actor's company."""
    company = await session.get(Company, actor.company_id)
    if company is None:
        raise NotFoundError("Company not found")

    raw_token = generate_invite_token()
    invite = Invite(
        company_id=actor.company_id,
        inviter_id=actor.user_id,
        token_hash=hash_token(raw_token),
        role=role,
        expires_at=utcnow() + timedelta(days=settings.invite_expire_days),
    )
    async with atomic(session):
        session.add(invite)

    logger.info("Invite %s issued by %s for role %s", invite.id, actor.user_id, role)
    return InviteCreated(
        token=raw_token,
        invite_url=invite_url(raw_token),
        company_name=company.name,
        inviter_name=actor.user_name,
        role=invite.role,
        expires_at=invite.expires_at,
    )


async def _find_live_invite(
    session: AsyncSession, raw_token: str,
) -> tuple[Invite, Company, User]:
    """Return a redeemable invite with its company and inviter, or raise the uniform 404."""
    stmt = (
        select(Invite, Company, User)
        .join(Company, Company.id == Invite.company_id)
        .join(User, User.id == Invite.inviter_id)
        .where(
            Invite.token_hash == hash_token(raw_token),
            Invite.used == False,  # noqa: E712
            Invite.expires_at > utcnow(),
        )
    )
    result = await session.execute(stmt)
    row = result.one_or_none()
    if row is None:
        raise NotFoundError(INVITE_GONE)
    return row[0], row[1], row[2]


async def preview_invite(session: AsyncSession, raw_token: str) -> InvitePreview:
    """Public validation: only company name, inviter name, role and expiry are revealed."""
    invite, company, inviter = await _find_live_invite(session, raw_token)
    return InvitePreview(
        company_name=company.name,
        inviter_name=inviter.name,
        role=invite.role,
        expires_at=invite.expires_at,
    )


async def redeem_invite(
    session: AsyncSession,
    raw_token: str,
    name: str,
    email: str,
    password: str,
) -> tuple[User, Company]:
    """Turn a live invite into a new account, exactly once.

    The ``used`` flag is flipped with a conditional UPDATE in the same
    transaction as the user insert, so of two concurrent redemptions at
    most one commits.
    """
    invite, company, _ = await _find_live_invite(session, raw_token)
    invite_id, role = invite.id, invite.role
    email = normalize_email(email)

    existing = await session.execute(select(User.id).where(User.email == email))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError(EMAIL_TAKEN)

    user = User(
        company_id=company.id,
        email=email,
        password_hash=hash_password(password),
        name=name.strip(),
        role=role,
        last_login_at=utcnow(),
    )
    try:
        async with atomic(session):
            session.add(user)
            await session.flush()
            claimed = await session.execute(
                update(Invite)
                .where(
                    Invite.id == invite_id,
                    Invite.used == False,  # noqa: E712
                    Invite.expires_at > utcnow(),
                )
                .values(used=True)
            )
            if claimed.rowcount != 1:
                raise NotFoundError(INVITE_GONE)
    except IntegrityError as exc:
        raise ConflictError(EMAIL_TAKEN) from exc

    logger.info("Invite %s redeemed by user %s", invite_id, user.id)
    return user, company


async def count_invites(session: AsyncSession) -> int:
    result = await session.execute(select(func.count()).select_from(Invite))
    return int(result.scalar_one())
