"""Integration tests: User endpoints."""

import pytest
from tests.conftest import requires_db, login

pytestmark = requires_db
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_users_admin_only(async_client: AsyncClient, api_base: str, admin: dict, customer: dict):
    resp = await async_client.get(f"{api_base}/users", headers=customer["headers"])
    assert resp.status_code == 403

    resp = await async_client.get(
        f"{api_base}/users",
        params={"role": "customer", "search": customer["customer_id"]},
        headers=admin["headers"],
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["meta"]["total"] == 1
    assert body["data"][0]["id"] == customer["id"]


@pytest.mark.asyncio
async def test_get_self_but_not_others(async_client: AsyncClient, api_base: str, admin: dict, customer: dict):
    resp = await async_client.get(f"{api_base}/users/{customer['id']}", headers=customer["headers"])
    assert resp.status_code == 200

    resp = await async_client.get(f"{api_base}/users/{admin['id']}", headers=customer["headers"])
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_customer_cannot_promote_self(async_client: AsyncClient, api_base: str, customer: dict):
    resp = await async_client.put(
        f"{api_base}/users/{customer['id']}",
        json={"full_name": "Nguyen Van Updated", "role": "admin"},
        headers=customer["headers"],
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["full_name"] == "Nguyen Van Updated"
    assert data["role"] == "customer"


@pytest.mark.asyncio
async def test_deactivate_user_blocks_login(async_client: AsyncClient, api_base: str, admin: dict, customer: dict):
    resp = await async_client.delete(f"{api_base}/users/{admin['id']}", headers=admin["headers"])
    assert resp.status_code == 400

    resp = await async_client.delete(f"{api_base}/users/{customer['id']}", headers=admin["headers"])
    assert resp.status_code == 200

    resp = await async_client.post(
        f"{api_base}/auth/login",
        json={"email": customer["email"], "password": customer["password"]},
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_admin_login_helper(async_client: AsyncClient, api_base: str, admin: dict):
    headers = await login(async_client, api_base, admin["email"], "AdminPass123")
    resp = await async_client.get(f"{api_base}/auth/me", headers=headers)
    assert resp.json()["data"]["role"] == "admin"
