"""Multi-step operations either fully apply or leave no trace."""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import delete as sa_delete
from sqlalchemy.exc import OperationalError

from app.api.deps import AuthContext
from app.core.database import atomic
from app.core.errors import InternalError
from app.models.user import User
from app.services import companies as company_service
from app.services import users as user_service


def _delete_failing_for(model):
    """Stand-in for ``sqlalchemy.delete`` that breaks when it reaches ``model``."""

    def _delete(target):
        if target is model:
            raise OperationalError("DELETE", {}, Exception("database is locked"))
        return sa_delete(target)

    return _delete


def _actor(session_data: dict) -> AuthContext:
    return AuthContext(
        company_id=uuid.UUID(session_data["company"]["id"]),
        user_id=uuid.UUID(session_data["user"]["id"]),
        user_role=session_data["user"]["role"],
        user_name=session_data["user"]["name"],
    )


async def _register(client: AsyncClient, slug: str) -> dict:
    resp = await client.post("/v1/companies/register", json={
        "company_name": f"{slug} Co",
        "admin_email": f"admin@{slug}.com",
        "admin_password": "testpass123",
        "admin_name": "Boss",
    })
    assert resp.status_code == 201, resp.text
    data = resp.json()
    data["headers"] = {"Authorization": f"Bearer {data['access_token']}"}
    return data


async def _join(client: AsyncClient, admin: dict, email: str, name: str) -> dict:
    resp = await client.post("/v1/invites", json={"role": "user"}, headers=admin["headers"])
    resp = await client.post("/v1/invites/accept", json={
        "token": resp.json()["token"],
        "name": name,
        "email": email,
        "password": "memberpass1",
    })
    assert resp.status_code == 201, resp.text
    data = resp.json()
    data["headers"] = {"Authorization": f"Bearer {data['access_token']}"}
    return data


@pytest.mark.asyncio
async def test_atomic_reports_database_failures_as_internal(session):
    with pytest.raises(InternalError) as exc_info:
        async with atomic(session):
            raise OperationalError("SELECT 1", {}, Exception("connection reset"))
    assert exc_info.value.status_code == 500
    assert isinstance(exc_info.value.__cause__, OperationalError)


@pytest.mark.asyncio
async def test_failed_company_purge_keeps_everything(client: AsyncClient, session, monkeypatch):
    admin = await _register(client, "tx-purge")
    headers = admin["headers"]
    resp = await client.post("/v1/items", json={
        "name": "Pallet", "barcode": "TX-P-1", "quantity": 4,
    }, headers=headers)
    assert resp.status_code == 201

    monkeypatch.setattr(company_service, "delete", _delete_failing_for(User))

    with pytest.raises(InternalError):
        await company_service.purge_company(
            session,
            _actor(admin),
            uuid.UUID(admin["company"]["id"]),
            "I am sure I want to delete tx-purge Co",
        )

    # Activities and items were deleted before the failure; both are back
    resp = await client.get("/v1/items", headers=headers)
    assert [i["name"] for i in resp.json()] == ["Pallet"]
    resp = await client.get("/v1/activities", headers=headers)
    assert [a["type"] for a in resp.json()] == ["created"]
    resp = await client.get("/v1/companies/me", headers=headers)
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_failed_permanent_delete_keeps_authorship(client: AsyncClient, session, monkeypatch):
    admin = await _register(client, "tx-user")
    member = await _join(client, admin, "member@tx-user.com", "Sam Member")

    resp = await client.post("/v1/items", json={
        "name": "Ladder", "barcode": "TX-U-1", "quantity": 2,
    }, headers=member["headers"])
    item_id = resp.json()["id"]

    monkeypatch.setattr(user_service, "delete", _delete_failing_for(User))

    with pytest.raises(InternalError):
        await user_service.delete_user_permanently(
            session,
            _actor(admin),
            uuid.UUID(member["user"]["id"]),
            "I am sure I want to delete Sam Member",
        )

    resp = await client.get(f"/v1/activities/items/{item_id}", headers=admin["headers"])
    feed = resp.json()
    assert len(feed) == 1
    assert feed[0]["user_id"] == member["user"]["id"]
    assert feed[0]["user_name"] == "Sam Member"

    resp = await client.get("/v1/items", headers=member["headers"])
    assert resp.status_code == 200
