"""V1 API router aggregation."""

from fastapi import APIRouter

from app.api.v1.activities import router as activities_router
from app.api.v1.auth import router as auth_router
from app.api.v1.companies import router as companies_router
from app.api.v1.invites import router as invites_router
from app.api.v1.items import router as items_router
from app.api.v1.system import router as system_router
from app.api.v1.users import router as users_router

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(companies_router)
v1_router.include_router(auth_router)
v1_router.include_router(items_router)
v1_router.include_router(activities_router)
v1_router.include_router(users_router)
v1_router.include_router(invites_router)
v1_router.include_router(system_router)
