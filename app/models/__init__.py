"""Import all models so SQLModel.metadata picks them up."""

from app.models.activity import Activity, ActivityRead, ActivityType
from app.models.company import Company, CompanyDelete, CompanyRead, CompanyThresholdUpdate
from app.models.invite import Invite, InviteCreate, InviteCreated, InvitePreview
from app.models.item import (
    Item,
    ItemCreate,
    ItemQuantityUpdate,
    ItemRead,
    ItemThresholdUpdate,
    StockStatus,
)
from app.models.user import User, UserPermanentDelete, UserRead, UserRole

__all__ = [
    "Activity",
    "ActivityRead",
    "ActivityType",
    "Company",
    "CompanyDelete",
    "CompanyRead",
    "CompanyThresholdUpdate",
    "Invite",
    "InviteCreate",
    "InviteCreated",
    "InvitePreview",
    "Item",
    "ItemCreate",
    "ItemQuantityUpdate",
    "ItemRead",
    "ItemThresholdUpdate",
    "StockStatus",
    "User",
    "UserPermanentDelete",
    "UserRead",
    "UserRole",
]
