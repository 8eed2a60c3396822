"""FastAPI dependencies for authentication and tenant resolution."""

import uuid
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.database import get_session
from app.core.errors import AuthenticationError, AuthorizationError
from app.core.security import decode_jwt
from app.models.user import User, UserRole

bearer_scheme = HTTPBearer(auto_error=False)


class AuthContext:
    """Resolved identity carried through a request.

    ``company_id`` comes from the verified credential and is the only
    tenant filter route handlers may use.
    """

    __slots__ = ("company_id", "user_id", "user_role", "user_name")

    def __init__(
        self,
        company_id: uuid.UUID,
        user_id: uuid.UUID,
        user_role: str,
        user_name: str,
    ) -> None:
        self.company_id = company_id
        self.user_id = user_id
        self.user_role = user_role
        self.user_name = user_name

    @property
    def is_admin(self) -> bool:
        return self.user_role == UserRole.ADMIN


def _claims(token: str) -> tuple[uuid.UUID, uuid.UUID]:
    """Decode a JWT and extract (user_id, company_id)."""
    try:
        payload = decode_jwt(token)
    except JWTError as exc:
        raise AuthenticationError("Invalid or expired token") from exc

    try:
        return uuid.UUID(payload["sub"]), uuid.UUID(payload["cid"])
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError("Malformed token payload") from exc


async def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AuthContext:
    """Resolve a bearer JWT to an AuthContext.

    The user row is re-read so that deactivated or deleted accounts lose
    access immediately, even while their token is still unexpired.
    """
    if credentials is None:
        raise AuthenticationError("Access token required")

    user_id, company_id = _claims(credentials.credentials)

    stmt = select(User).where(User.id == user_id, User.company_id == company_id)
    result = await session.execute(stmt)
    user = result.scalar_one_or_none()

    if user is None:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User account is disabled")

    return AuthContext(
        company_id=user.company_id,
        user_id=user.id,
        user_role=user.role,
        user_name=user.name,
    )


async def require_admin(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> AuthContext:
    """Raise 403 unless the caller is a company admin."""
    if not auth.is_admin:
        raise AuthorizationError("Admin access required")
    return auth


# Typed shorthand for use in route signatures
Auth = Annotated[AuthContext, Depends(get_auth_context)]
AdminAuth = Annotated[AuthContext, Depends(require_admin)]
Session = Annotated[AsyncSession, Depends(get_session)]
