"""Invite endpoints — admin issue, public validate and accept."""

from fastapi import APIRouter, status
from pydantic import BaseModel, EmailStr, Field

from app.api.deps import AdminAuth, Session
from app.api.v1.auth import SessionResponse, issue_session
from app.models.base import Label
from app.models.invite import InviteCreate, InviteCreated, InvitePreview
from app.services import invites as invite_service

router = APIRouter(prefix="/invites", tags=["invites"])


class InviteAcceptRequest(BaseModel):
    token: str = Field(min_length=1)
    name: Label
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)


@router.post(
    "",
    response_model=InviteCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Generate an invite link",
)
async def create_invite(body: InviteCreate, auth: AdminAuth, session: Session) -> InviteCreated:
    """The raw token is returned once — only its hash is stored."""
    return await invite_service.issue_invite(session, auth, body.role)


@router.post("/accept", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def accept_invite(body: InviteAcceptRequest, session: Session) -> SessionResponse:
    """Create an account from an invite and log it in. Unauthenticated."""
    user, company = await invite_service.redeem_invite(
        session,
        raw_token=body.token,
        name=body.name,
        email=body.email,
        password=body.password,
    )
    return issue_session(user, company)


@router.get("/{token}", response_model=InvitePreview)
async def validate_invite(token: str, session: Session) -> InvitePreview:
    """Preview a pending invite. Unauthenticated."""
    return await invite_service.preview_invite(session, token)
