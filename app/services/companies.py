"""Company lifecycle — registration, default threshold and full purge."""

import logging
import re
import secrets
import uuid

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.api.deps import AuthContext
from app.core.config import get_settings
from app.core.database import atomic
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.security import hash_password
from app.models.activity import Activity
from app.models.base import utcnow
from app.models.company import Company
from app.models.invite import Invite
from app.models.item import Item
from app.models.user import User, UserRole
from app.services.users import deletion_phrase, normalize_email

logger = logging.getLogger(__name__)

settings = get_settings()

CODE_ATTEMPTS = 10


def code_prefix(company_name: str) -> str:
    letters = re.sub(r"[^A-Za-z0-9]", "", company_name)[:3].upper()
    return letters or "CMP"


async def generate_company_code(session: AsyncSession, company_name: str) -> str:
    """Three-letter prefix plus three random digits, e.g. ``ACM042``.

    Falls back to a longer suffix when every attempt collides.
    """
    prefix = code_prefix(company_name)
    for _ in range(CODE_ATTEMPTS):
        code = f"{prefix}{secrets.randbelow(1000):03d}"
        existing = await session.execute(select(Company.id).where(Company.code == code))
        if existing.scalar_one_or_none() is None:
            return code
    return f"{prefix}{secrets.randbelow(1_000_000):06d}"


async def get_company(session: AsyncSession, company_id: uuid.UUID) -> Company:
    company = await session.get(Company, company_id)
    if company is None:
        raise NotFoundError("Company not found")
    return company


async def register_company(
    session: AsyncSession,
    company_name: str,
    admin_email: str,
    admin_password: str,
    admin_name: str,
) -> tuple[Company, User]:
    """Create a company and its first admin in one transaction."""
    email = normalize_email(admin_email)

    existing = await session.execute(select(User.id).where(User.email == email))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("User already exists")

    code = await generate_company_code(session, company_name)

    company = Company(
        name=company_name.strip(),
        code=code,
        subscription_tier=settings.default_subscription_tier,
        max_users=settings.default_max_users,
        low_stock_threshold=settings.default_low_stock_threshold,
    )
    user = User(
        company_id=company.id,
        email=email,
        password_hash=hash_password(admin_password),
        name=admin_name.strip(),
        role=UserRole.ADMIN,
        last_login_at=utcnow(),
    )
    try:
        async with atomic(session):
            session.add(company)
            await session.flush()
            session.add(user)
    except IntegrityError as exc:
        # Lost a race on the email or the company code
        raise ConflictError("User or company already exists") from exc

    logger.info("Company %s registered with code %s", company.id, company.code)
    return company, user


async def set_default_threshold(
    session: AsyncSession, actor: AuthContext, threshold: int,
) -> Company:
    async with atomic(session):
        company = await get_company(session, actor.company_id)
        company.low_stock_threshold = threshold
        company.updated_at = utcnow()
        session.add(company)
    logger.info("Company %s default threshold set to %d", company.id, threshold)
    return company


async def purge_company(
    session: AsyncSession,
    actor: AuthContext,
    company_id: uuid.UUID,
    confirmation_text: str,
) -> None:
    """Delete a company and everything it owns, dependents first, atomically."""
    if company_id != actor.company_id:
        raise NotFoundError("Company not found")

    company = await get_company(session, actor.company_id)
    if confirmation_text != deletion_phrase(company.name):
        raise ValidationError("Confirmation text does not match")

    logger.warning(
        "Admin %s is deleting company %s (%s)", actor.user_id, company.id, company.name
    )

    async with atomic(session):
        for model in (Activity, Item, Invite, User):
            await session.execute(delete(model).where(model.company_id == company_id))
        await session.execute(delete(Company).where(Company.id == company_id))

    logger.info("Company %s and all its data deleted", company_id)
