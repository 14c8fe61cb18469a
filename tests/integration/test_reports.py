"""Integration tests: Report endpoints."""

import pytest
from tests.conftest import requires_db

pytestmark = requires_db
from httpx import AsyncClient


REPORT = {
    "report_type": "water_leak",
    "title": "Pipe burst on Le Loi",
    "description": "Water has been leaking onto the street since morning",
    "location": {"address": "12 Le Loi", "district": "District 1", "city": "Ho Chi Minh City"},
    "priority": "high",
}


async def _submit(client: AsyncClient, api_base: str, customer: dict, **overrides) -> dict:
    resp = await client.post(f"{api_base}/reports", json={**REPORT, **overrides}, headers=customer["headers"])
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.mark.asyncio
async def test_submit_report(async_client: AsyncClient, api_base: str, customer: dict):
    report = await _submit(async_client, api_base, customer)
    assert report["report_number"].startswith("RPT")
    assert report["status"] == "submitted"
    assert report["priority"] == "high"
    assert report["customer_id"] == customer["customer_id"]
    assert report["estimated_resolution"] is not None
    assert report["is_overdue"] is False
    # Customers get the public view
    assert "internal_notes" not in report


@pytest.mark.asyncio
async def test_submit_report_validation(async_client: AsyncClient, api_base: str, customer: dict):
    resp = await async_client.post(
        f"{api_base}/reports",
        json={**REPORT, "report_type": "earthquake"},
        headers=customer["headers"],
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_customer_sees_only_own_reports(
    async_client: AsyncClient, api_base: str, customer: dict, staff: dict
):
    report = await _submit(async_client, api_base, customer)

    resp = await async_client.get(f"{api_base}/reports", headers=customer["headers"])
    assert resp.status_code == 200
    assert all(r["customer_id"] == customer["customer_id"] for r in resp.json()["data"])

    resp = await async_client.get(f"{api_base}/reports/{report['id']}", headers=staff["headers"])
    assert resp.status_code == 200
    assert resp.json()["data"]["internal_notes"] == []
    assert resp.json()["data"]["reporter_id"] == customer["id"]


@pytest.mark.asyncio
async def test_customer_cannot_change_status(async_client: AsyncClient, api_base: str, customer: dict):
    report = await _submit(async_client, api_base, customer)
    resp = await async_client.put(
        f"{api_base}/reports/{report['id']}/status",
        json={"status": "closed"},
        headers=customer["headers"],
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_status_flow_with_note(async_client: AsyncClient, api_base: str, customer: dict, staff: dict):
    report = await _submit(async_client, api_base, customer)

    resp = await async_client.put(
        f"{api_base}/reports/{report['id']}/status",
        json={"status": "in_progress", "note": "Crew dispatched"},
        headers=staff["headers"],
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "in_progress"
    assert data["internal_notes"][0]["note"] == "Crew dispatched"
    assert data["internal_notes"][0]["added_by"] == staff["id"]

    resp = await async_client.put(
        f"{api_base}/reports/{report['id']}/resolution",
        json={"description": "Replaced the broken section", "actions": ["replace pipe"], "cost": 250000},
        headers=staff["headers"],
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "resolved"
    assert data["actual_resolution"] is not None
    assert data["resolution"]["resolved_by"] == staff["id"]

    resp = await async_client.put(
        f"{api_base}/reports/{report['id']}/status", json={"status": "closed"}, headers=staff["headers"]
    )
    assert resp.status_code == 200

    resp = await async_client.put(
        f"{api_base}/reports/{report['id']}/status", json={"status": "in_progress"}, headers=staff["headers"]
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"


@pytest.mark.asyncio
async def test_assign_report(
    async_client: AsyncClient, api_base: str, customer: dict, staff: dict, admin: dict
):
    report = await _submit(async_client, api_base, customer)

    resp = await async_client.put(
        f"{api_base}/reports/{report['id']}/assign",
        json={"assigned_to": customer["id"]},
        headers=admin["headers"],
    )
    assert resp.status_code == 400

    resp = await async_client.put(
        f"{api_base}/reports/{report['id']}/assign",
        json={"assigned_to": staff["id"]},
        headers=admin["headers"],
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["assigned_to"] == staff["id"]

    resp = await async_client.get(
        f"{api_base}/reports", params={"assigned_to": staff["id"]}, headers=staff["headers"]
    )
    assert report["id"] in {r["id"] for r in resp.json()["data"]}


@pytest.mark.asyncio
async def test_update_report_keeps_estimate(async_client: AsyncClient, api_base: str, customer: dict, staff: dict):
    report = await _submit(async_client, api_base, customer)
    resp = await async_client.put(
        f"{api_base}/reports/{report['id']}",
        json={"priority": "urgent", "title": None},
        headers=staff["headers"],
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["priority"] == "urgent"
    assert data["title"] == REPORT["title"]
    assert data["estimated_resolution"] == report["estimated_resolution"]


@pytest.mark.asyncio
async def test_internal_note_requires_text(async_client: AsyncClient, api_base: str, customer: dict, staff: dict):
    report = await _submit(async_client, api_base, customer)
    resp = await async_client.post(
        f"{api_base}/reports/{report['id']}/notes", json={"note": "   "}, headers=staff["headers"]
    )
    assert resp.status_code in (400, 422)


@pytest.mark.asyncio
async def test_attachment_type_rejected(async_client: AsyncClient, api_base: str, customer: dict):
    report = await _submit(async_client, api_base, customer)
    resp = await async_client.post(
        f"{api_base}/reports/{report['id']}/attachments",
        files=[("files", ("notes.txt", b"hello", "text/plain"))],
        headers=customer["headers"],
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["field"] == "files"


@pytest.mark.asyncio
async def test_report_stats(async_client: AsyncClient, api_base: str, customer: dict, admin: dict):
    await _submit(async_client, api_base, customer)
    resp = await async_client.get(f"{api_base}/reports/stats/summary", headers=admin["headers"])
    assert resp.status_code == 200
    assert resp.json()["data"]["total_reports"] >= 1
