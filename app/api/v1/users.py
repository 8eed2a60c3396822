"""User management — tenant-scoped, restricted to admins."""

import uuid

from fastapi import APIRouter, status
from pydantic import BaseModel

from app.api.deps import AdminAuth, Session
from app.models.user import UserPermanentDelete, UserRead
from app.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])


class PermanentDeleteResponse(BaseModel):
    success: bool = True
    reassigned_activities: int


@router.get("", response_model=list[UserRead])
async def list_users(auth: AdminAuth, session: Session) -> list[UserRead]:
    users = await user_service.list_users(session, auth.company_id)
    return [UserRead.model_validate(u) for u in users]


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_user(user_id: uuid.UUID, auth: AdminAuth, session: Session) -> None:
    """Soft delete: the account can no longer log in, history stays as is."""
    await user_service.deactivate_user(session, auth, user_id)


@router.delete("/{user_id}/permanent", response_model=PermanentDeleteResponse)
async def delete_user_permanently(
    user_id: uuid.UUID,
    body: UserPermanentDelete,
    auth: AdminAuth,
    session: Session,
) -> PermanentDeleteResponse:
    """Hard delete, confirmed with ``I am sure I want to delete <user name>``.

    The user's activities are reassigned to the calling admin.
    """
    moved = await user_service.delete_user_permanently(
        session, auth, user_id, body.confirmation_text,
    )
    return PermanentDeleteResponse(reassigned_activities=moved)
