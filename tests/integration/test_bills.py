"""Integration tests: Bill endpoints."""

import pytest
from tests.conftest import requires_db

pytestmark = requires_db
from httpx import AsyncClient


def _bill_payload(customer_id: str, **overrides) -> dict:
    payload = {
        "customer_id": customer_id,
        "period_from": "2025-01-01",
        "period_to": "2025-01-31",
        "water_usage": {"previous_reading": 100, "current_reading": 150},
        "due_date": "2025-02-15",
    }
    payload.update(overrides)
    return payload


async def _create_bill(client: AsyncClient, api_base: str, admin: dict, customer: dict, **overrides) -> dict:
    resp = await client.post(
        f"{api_base}/bills",
        json=_bill_payload(customer["customer_id"], **overrides),
        headers=admin["headers"],
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.mark.asyncio
async def test_create_bill_computes_amounts(async_client: AsyncClient, api_base: str, admin: dict, customer: dict):
    bill = await _create_bill(async_client, api_base, admin, customer)
    assert bill["bill_number"].startswith("BILL")
    assert len(bill["bill_number"]) == 14
    assert bill["water_usage"]["consumption"] == 50
    assert bill["amounts"] == {
        "base_amount": 0,
        "consumption_amount": 250000,
        "service_amount": 50000,
        "environmental_amount": 10000,
        "subtotal": 310000,
        "tax": 31000,
        "total": 341000,
    }
    assert bill["status"] == "pending"
    assert bill["customer_info"]["full_name"] == "Nguyen Van Test"
    assert bill["created_by"] == admin["id"]


@pytest.mark.asyncio
async def test_create_bill_reading_backwards(async_client: AsyncClient, api_base: str, admin: dict, customer: dict):
    resp = await async_client.post(
        f"{api_base}/bills",
        json=_bill_payload(
            customer["customer_id"],
            water_usage={"previous_reading": 150, "current_reading": 100},
        ),
        headers=admin["headers"],
    )
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["field"] == "water_usage.current_reading"


@pytest.mark.asyncio
async def test_create_bill_unknown_customer(async_client: AsyncClient, api_base: str, admin: dict):
    resp = await async_client.post(
        f"{api_base}/bills", json=_bill_payload("CUST00000000"), headers=admin["headers"]
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_customer_cannot_create_bill(async_client: AsyncClient, api_base: str, customer: dict):
    resp = await async_client.post(
        f"{api_base}/bills", json=_bill_payload(customer["customer_id"]), headers=customer["headers"]
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_update_bill_recomputes(async_client: AsyncClient, api_base: str, admin: dict, customer: dict):
    bill = await _create_bill(async_client, api_base, admin, customer)
    resp = await async_client.put(
        f"{api_base}/bills/{bill['id']}",
        json={"water_usage": {"current_reading": 160}, "notes": "re-read"},
        headers=admin["headers"],
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["water_usage"] == {"previous_reading": 100, "current_reading": 160, "consumption": 60}
    assert data["amounts"]["total"] == 396000
    assert data["notes"] == "re-read"


@pytest.mark.asyncio
async def test_pay_then_cancel_rejected(async_client: AsyncClient, api_base: str, admin: dict, customer: dict):
    bill = await _create_bill(async_client, api_base, admin, customer)
    resp = await async_client.put(
        f"{api_base}/bills/{bill['id']}/status",
        json={"status": "paid", "payment_info": {"method": "cash"}},
        headers=admin["headers"],
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "paid"
    assert data["payment_info"]["method"] == "cash"
    assert data["payment_info"]["paid_at"]

    resp = await async_client.put(
        f"{api_base}/bills/{bill['id']}/status",
        json={"status": "cancelled"},
        headers=admin["headers"],
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"


@pytest.mark.asyncio
async def test_customer_sees_only_own_bills(
    async_client: AsyncClient, api_base: str, admin: dict, customer: dict, staff: dict
):
    bill = await _create_bill(async_client, api_base, admin, customer)

    resp = await async_client.get(f"{api_base}/bills", headers=customer["headers"])
    assert resp.status_code == 200
    assert {b["customer_id"] for b in resp.json()["data"]} == {customer["customer_id"]}

    resp = await async_client.get(f"{api_base}/bills/{bill['id']}", headers=customer["headers"])
    assert resp.status_code == 200
    assert resp.json()["data"]["is_overdue"] is True

    resp = await async_client.get(f"{api_base}/bills/customer/CUST00000000", headers=customer["headers"])
    assert resp.status_code == 403

    resp = await async_client.get(f"{api_base}/bills/{bill['id']}", headers=staff["headers"])
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_admin_lists_customer_bills(
    async_client: AsyncClient, api_base: str, admin: dict, customer: dict
):
    await _create_bill(async_client, api_base, admin, customer)
    resp = await async_client.get(
        f"{api_base}/bills/customer/{customer['customer_id']}", headers=admin["headers"]
    )
    assert resp.status_code == 200
    assert resp.json()["meta"]["total"] == 1


@pytest.mark.asyncio
async def test_public_lookup(async_client: AsyncClient, api_base: str, admin: dict, customer: dict):
    bill = await _create_bill(async_client, api_base, admin, customer)

    resp = await async_client.get(f"{api_base}/bills/lookup", params={"identifier": customer["customer_id"]})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["customer"]["customer_id"] == customer["customer_id"]
    assert data["bill"]["bill_number"] == bill["bill_number"]
    assert data["bill"]["total"] == 341000

    resp = await async_client.get(f"{api_base}/bills/lookup", params={"identifier": "CUST00000000"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_bill_stats(async_client: AsyncClient, api_base: str, admin: dict, customer: dict):
    await _create_bill(async_client, api_base, admin, customer)
    resp = await async_client.get(f"{api_base}/bills/stats/summary", headers=admin["headers"])
    assert resp.status_code == 200
    stats = resp.json()["data"]
    assert stats["total_bills"] >= 1
    assert stats["current_month_bills"] >= 1

    resp = await async_client.get(f"{api_base}/bills/stats/summary", headers=customer["headers"])
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_update_bill_rejects_inverted_period(
    async_client: AsyncClient, api_base: str, admin: dict, customer: dict
):
    bill = await _create_bill(async_client, api_base, admin, customer)
    resp = await async_client.put(
        f"{api_base}/bills/{bill['id']}",
        json={"period_from": "2025-03-01"},
        headers=admin["headers"],
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["field"] == "period_to"
