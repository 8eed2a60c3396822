"""Company registration (bootstrap) and admin settings."""

from fastapi import APIRouter, status
from pydantic import BaseModel, EmailStr, Field

from app.api.deps import AdminAuth, Auth, Session
from app.api.v1.auth import SessionResponse, issue_session
from app.models.base import Label
from app.models.company import CompanyDelete, CompanyRead, CompanyThresholdUpdate
from app.services import companies as company_service

router = APIRouter(prefix="/companies", tags=["companies"])


# ── Bootstrap request schema ──────────────────────────────────

class CompanyRegisterRequest(BaseModel):
    """Everything needed to create a new company + its first admin in one call."""
    company_name: Label
    admin_email: EmailStr
    admin_password: str = Field(min_length=6, max_length=128)
    admin_name: Label


class DeleteResponse(BaseModel):
    success: bool = True
    message: str


# ── Routes ────────────────────────────────────────────────────

@router.post(
    "/register",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new company (bootstrap)",
)
async def register_company(
    body: CompanyRegisterRequest,
    session: Session,
) -> SessionResponse:
    """Create a company and its admin user, and log the admin in.

    This is one of the few unauthenticated write endpoints.
    """
    company, user = await company_service.register_company(
        session,
        company_name=body.company_name,
        admin_email=body.admin_email,
        admin_password=body.admin_password,
        admin_name=body.admin_name,
    )
    return issue_session(user, company)


@router.get("/me", response_model=CompanyRead, summary="Get current company info")
async def get_current_company(auth: Auth, session: Session) -> CompanyRead:
    company = await company_service.get_company(session, auth.company_id)
    return CompanyRead.model_validate(company)


@router.put("/me/threshold", response_model=CompanyRead)
async def update_default_threshold(
    body: CompanyThresholdUpdate,
    auth: AdminAuth,
    session: Session,
) -> CompanyRead:
    """Set the company-wide default low-stock threshold."""
    company = await company_service.set_default_threshold(
        session, auth, body.low_stock_threshold,
    )
    return CompanyRead.model_validate(company)


@router.delete("/me", response_model=DeleteResponse)
async def delete_company(
    body: CompanyDelete,
    auth: AdminAuth,
    session: Session,
) -> DeleteResponse:
    """Permanently delete the company and all of its data.

    The body must repeat the company id and the exact phrase
    ``I am sure I want to delete <company name>``.
    """
    await company_service.purge_company(
        session, auth, body.company_id, body.confirmation_text,
    )
    return DeleteResponse(message="Company and all associated data deleted successfully")
