"""Tests for user listing, soft removal and permanent deletion."""

import pytest
from httpx import AsyncClient

from app.models.activity import Activity


async def _bootstrap(client: AsyncClient, slug: str):
    """Helper: register a company, invite one member, return (admin_headers, member)."""
    resp = await client.post("/v1/companies/register", json={
        "company_name": f"{slug} Co",
        "admin_email": f"admin@{slug}.com",
        "admin_password": "testpass123",
        "admin_name": "Boss",
    })
    assert resp.status_code == 201
    admin = resp.json()
    headers = {"Authorization": f"Bearer {admin['access_token']}"}

    resp = await client.post("/v1/invites", json={"role": "user"}, headers=headers)
    token = resp.json()["token"]
    resp = await client.post("/v1/invites/accept", json={
        "token": token,
        "name": "Sam Member",
        "email": f"member@{slug}.com",
        "password": "memberpass1",
    })
    assert resp.status_code == 201
    member = resp.json()
    member["headers"] = {"Authorization": f"Bearer {member['access_token']}"}
    member["admin_id"] = admin["user"]["id"]
    return headers, member


@pytest.mark.asyncio
async def test_list_users_admin_only(client: AsyncClient):
    headers, member = await _bootstrap(client, slug="users-list")

    resp = await client.get("/v1/users", headers=headers)
    assert resp.status_code == 200
    users = resp.json()
    assert [u["email"] for u in users] == ["admin@users-list.com", "member@users-list.com"]
    assert all("password_hash" not in u for u in users)

    resp = await client.get("/v1/users", headers=member["headers"])
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_soft_delete_blocks_access(client: AsyncClient):
    headers, member = await _bootstrap(client, slug="users-soft")
    member_id = member["user"]["id"]

    resp = await client.delete(f"/v1/users/{member_id}", headers=headers)
    assert resp.status_code == 204

    # Outstanding token stops working immediately
    resp = await client.get("/v1/items", headers=member["headers"])
    assert resp.status_code == 401
    assert resp.json()["detail"] == "User account is disabled"

    resp = await client.post("/v1/auth/login", json={
        "email": "member@users-soft.com",
        "password": "memberpass1",
    })
    assert resp.status_code == 401

    resp = await client.get("/v1/users", headers=headers)
    flagged = {u["id"]: u["is_active"] for u in resp.json()}
    assert flagged[member_id] is False


@pytest.mark.asyncio
async def test_cannot_delete_self(client: AsyncClient):
    headers, member = await _bootstrap(client, slug="users-self")
    admin_id = member["admin_id"]

    resp = await client.delete(f"/v1/users/{admin_id}", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Cannot delete your own account"

    resp = await client.request(
        "DELETE", f"/v1/users/{admin_id}/permanent",
        json={"confirmation_text": "I am sure I want to delete Boss"},
        headers=headers,
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_member_cannot_delete_users(client: AsyncClient):
    _, member = await _bootstrap(client, slug="users-member")
    resp = await client.delete(f"/v1/users/{member['admin_id']}", headers=member["headers"])
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_permanent_delete_reassigns_history(client: AsyncClient):
    headers, member = await _bootstrap(client, slug="users-perm")
    member_id = member["user"]["id"]

    resp = await client.post("/v1/items", json={
        "name": "Drill", "barcode": "UP-0001", "quantity": 3,
    }, headers=member["headers"])
    item_id = resp.json()["id"]
    await client.put(f"/v1/items/{item_id}", json={"quantity": 1}, headers=member["headers"])

    resp = await client.request(
        "DELETE", f"/v1/users/{member_id}/permanent",
        json={"confirmation_text": "I am sure I want to delete Sam Member"},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json() == {"success": True, "reassigned_activities": 2}

    resp = await client.get(f"/v1/activities/items/{item_id}", headers=headers)
    feed = resp.json()
    assert len(feed) == 2
    assert all(a["user_id"] == member["admin_id"] for a in feed)
    assert all(a["user_name"] == "Sam Member (deleted by Boss)" for a in feed)

    resp = await client.get("/v1/users", headers=headers)
    assert member_id not in {u["id"] for u in resp.json()}

    resp = await client.get("/v1/items", headers=member["headers"])
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_permanent_delete_requires_exact_phrase(client: AsyncClient):
    headers, member = await _bootstrap(client, slug="users-phrase")
    member_id = member["user"]["id"]

    resp = await client.request(
        "DELETE", f"/v1/users/{member_id}/permanent",
        json={"confirmation_text": "i am sure i want to delete sam member"},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Confirmation text does not match"

    resp = await client.get("/v1/items", headers=member["headers"])
    assert resp.status_code == 200


def test_activity_authorship_is_not_cascaded():
    """Removing a user row must never take its activities along."""
    (fk,) = Activity.__table__.c.user_id.foreign_keys
    assert fk.column.table.name == "users"
    assert fk.ondelete == "RESTRICT"
