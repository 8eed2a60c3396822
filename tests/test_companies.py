"""Tests for company settings and the confirmed full purge."""

import pytest
from httpx import AsyncClient

from app.services.companies import code_prefix


async def _register(client: AsyncClient, slug: str, name: str | None = None) -> dict:
    resp = await client.post("/v1/companies/register", json={
        "company_name": name or f"{slug} Co",
        "admin_email": f"admin@{slug}.com",
        "admin_password": "testpass123",
        "admin_name": "Owner",
    })
    assert resp.status_code == 201, resp.text
    data = resp.json()
    data["headers"] = {"Authorization": f"Bearer {data['access_token']}"}
    return data


def test_code_prefix():
    assert code_prefix("Acme") == "ACM"
    assert code_prefix("a.b-c d") == "ABC"
    assert code_prefix("X") == "X"
    assert code_prefix("!!!") == "CMP"


@pytest.mark.asyncio
async def test_default_threshold_drives_item_status(client: AsyncClient):
    company = await _register(client, "co-threshold")
    headers = company["headers"]

    resp = await client.post("/v1/items", json={
        "name": "Bolt", "barcode": "CT-0001", "quantity": 8,
    }, headers=headers)
    item_id = resp.json()["id"]
    assert resp.json()["stock_status"] == "in_stock"

    resp = await client.put("/v1/companies/me/threshold", json={"low_stock_threshold": 10}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["low_stock_threshold"] == 10

    resp = await client.get(f"/v1/items/{item_id}", headers=headers)
    assert resp.json()["effective_threshold"] == 10
    assert resp.json()["stock_status"] == "low_stock"

    resp = await client.put("/v1/companies/me/threshold", json={"low_stock_threshold": -1}, headers=headers)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_threshold_update_admin_only(client: AsyncClient):
    company = await _register(client, "co-threshold-member")
    resp = await client.post("/v1/invites", json={"role": "user"}, headers=company["headers"])
    resp = await client.post("/v1/invites/accept", json={
        "token": resp.json()["token"],
        "name": "Member",
        "email": "member@co-threshold-member.com",
        "password": "memberpass1",
    })
    member_headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}

    resp = await client.put(
        "/v1/companies/me/threshold", json={"low_stock_threshold": 1}, headers=member_headers,
    )
    assert resp.status_code == 403

    resp = await client.get("/v1/companies/me", headers=member_headers)
    assert resp.status_code == 200
    assert resp.json()["low_stock_threshold"] == 5


@pytest.mark.asyncio
async def test_purge_requires_exact_phrase(client: AsyncClient):
    company = await _register(client, "co-phrase", name="Phrase Works")
    resp = await client.request(
        "DELETE", "/v1/companies/me",
        json={
            "company_id": company["company"]["id"],
            "confirmation_text": "I am sure I want to delete phrase works",
        },
        headers=company["headers"],
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Confirmation text does not match"

    resp = await client.get("/v1/companies/me", headers=company["headers"])
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_purge_company_removes_everything(client: AsyncClient):
    company = await _register(client, "co-purge", name="Purge Ltd")
    headers = company["headers"]

    resp = await client.post("/v1/items", json={
        "name": "Crate", "barcode": "CP-0001", "quantity": 2,
    }, headers=headers)
    assert resp.status_code == 201
    await client.post("/v1/invites", json={"role": "user"}, headers=headers)

    resp = await client.request(
        "DELETE", "/v1/companies/me",
        json={
            "company_id": company["company"]["id"],
            "confirmation_text": "I am sure I want to delete Purge Ltd",
        },
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["success"] is True

    resp = await client.get("/v1/companies/me", headers=headers)
    assert resp.status_code == 401

    resp = await client.post("/v1/auth/login", json={
        "email": "admin@co-purge.com", "password": "testpass123",
    })
    assert resp.status_code == 401

    # The barcode and email are free again
    fresh = await _register(client, "co-purge", name="Purge Again")
    resp = await client.post("/v1/items", json={
        "name": "Crate", "barcode": "CP-0001",
    }, headers=fresh["headers"])
    assert resp.status_code == 201
