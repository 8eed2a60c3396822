"""Authentication endpoints — login + current user."""

from fastapi import APIRouter
from pydantic import BaseModel, EmailStr

from app.api.deps import Auth, Session
from app.core.security import create_jwt
from app.models.company import Company, CompanyRead
from app.models.user import User, UserRead
from app.services import companies as company_service
from app.services import users as user_service

router = APIRouter(prefix="/auth", tags=["auth"])


# ── Schemas ──────────────────────────────────────────────────

class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class SessionResponse(BaseModel):
    """A freshly issued credential together with who it belongs to."""
    access_token: str
    token_type: str = "bearer"
    user: UserRead
    company: CompanyRead


class MeResponse(BaseModel):
    user: UserRead
    company: CompanyRead


def issue_session(user: User, company: Company) -> SessionResponse:
    token = create_jwt(
        subject=str(user.id),
        company_id=str(user.company_id),
        role=user.role,
    )
    return SessionResponse(
        access_token=token,
        user=UserRead.model_validate(user),
        company=CompanyRead.model_validate(company),
    )


# ── Routes ───────────────────────────────────────────────────

@router.post("/login", response_model=SessionResponse)
async def login(body: LoginRequest, session: Session) -> SessionResponse:
    """Authenticate with email + password, receive a JWT."""
    user, company = await user_service.authenticate(session, body.email, body.password)
    return issue_session(user, company)


@router.get("/me", response_model=MeResponse)
async def get_me(auth: Auth, session: Session) -> MeResponse:
    """Return the current authenticated user and their company."""
    user = await user_service.get_user(session, auth.company_id, auth.user_id)
    company = await company_service.get_company(session, auth.company_id)
    return MeResponse(
        user=UserRead.model_validate(user),
        company=CompanyRead.model_validate(company),
    )
