"""Unit tests for request/response schema validation."""

from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from app.models.enums import BillStatus, NewsStatus, ReportStatus
from app.schemas.auth import LoginRequest, RegisterRequest
from app.schemas.billing import BillCreate, BillResponse
from app.schemas.news import NewsCreate
from app.schemas.payment import CreateQRRequest
from app.schemas.report import ReportCreate, ReportResponse, ReportStaffResponse
from app.schemas.responses import PaginationMeta


def _bill_payload(**overrides):
    payload = {
        "customer_id": "CUST12345678",
        "period_from": "2025-01-01",
        "period_to": "2025-01-31",
        "water_usage": {"previous_reading": 100, "current_reading": 150},
        "due_date": "2025-02-15",
    }
    payload.update(overrides)
    return payload


def test_bill_create_valid():
    bill = BillCreate(**_bill_payload())
    assert bill.rates is None
    assert bill.period_from == date(2025, 1, 1)


def test_bill_create_rejects_inverted_period():
    with pytest.raises(ValidationError):
        BillCreate(**_bill_payload(period_from="2025-02-01", period_to="2025-01-01"))


def test_bill_create_rejects_negative_reading():
    with pytest.raises(ValidationError):
        BillCreate(**_bill_payload(water_usage={"previous_reading": -1, "current_reading": 5}))


def test_bill_response_is_overdue():
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    response = BillResponse(
        id=uuid4(),
        bill_number="BILL2025010001",
        customer_id="CUST12345678",
        customer_info={"full_name": "A"},
        period_from=date(2025, 1, 1),
        period_to=date(2025, 1, 31),
        water_usage={},
        rates={},
        amounts={"total": 1},
        due_date=(now - timedelta(days=2)).date(),
        status=BillStatus.PENDING,
        created_at=now,
        updated_at=now,
    )
    assert response.model_dump()["is_overdue"] is True


def test_login_requires_identifier():
    with pytest.raises(ValidationError):
        LoginRequest(password="secret")
    assert LoginRequest(username="admin", password="secret").username == "admin"


def test_register_phone_pattern():
    base = {"username": "nguyenvana", "email": "a@example.com", "password": "secret1", "full_name": "Nguyen A"}
    assert RegisterRequest(**base, phone="0987654321")
    with pytest.raises(ValidationError):
        RegisterRequest(**base, phone="12345")


def test_report_create_bounds():
    with pytest.raises(ValidationError):
        ReportCreate(report_type="water_leak", title="abc", description="too short", location={"address": "x"})


def test_customer_report_view_hides_internal_notes():
    now = datetime(2025, 1, 1)
    data = {
        "id": uuid4(),
        "report_number": "RPT2025010001",
        "reporter_id": uuid4(),
        "customer_info": {"full_name": "A"},
        "report_type": "no_water",
        "priority": "high",
        "title": "No water",
        "description": "No water since this morning",
        "location": {"address": "x"},
        "status": ReportStatus.SUBMITTED,
        "is_public": False,
        "internal_notes": [{"note": "secret"}],
        "created_at": now,
        "updated_at": now,
    }
    assert "internal_notes" not in ReportResponse(**data).model_dump()
    assert ReportStaffResponse(**data).model_dump()["internal_notes"] == [{"note": "secret"}]


def test_news_create_rejects_archived():
    payload = {
        "title": "Water outage",
        "summary": "Planned outage in district 1",
        "content": "x" * 60,
        "category": "maintenance",
    }
    assert NewsCreate(**payload).status == NewsStatus.DRAFT
    with pytest.raises(ValidationError):
        NewsCreate(**payload, status="archived")
    with pytest.raises(ValidationError):
        NewsCreate(**payload, slug="Not A Slug")


def test_news_create_normalizes_aware_datetimes():
    payload = {
        "title": "Water outage",
        "summary": "Planned outage in district 1",
        "content": "x" * 60,
        "category": "maintenance",
        "published_at": "2025-01-01T07:00:00+07:00",
    }
    assert NewsCreate(**payload).published_at == datetime(2025, 1, 1, 0, 0)


def test_payment_request_validation():
    shipping = {"full_name": "A", "phone": "0987654321", "address_line": "1 Street"}
    with pytest.raises(ValidationError):
        CreateQRRequest(items=[], total=100, shipping=shipping)
    with pytest.raises(ValidationError):
        CreateQRRequest(items=[{"name": "Bình 20L", "price": 65000}], total=0, shipping=shipping)
    request = CreateQRRequest(items=[{"name": "Bình 20L", "price": 65000}], total=65000, shipping=shipping)
    assert request.items[0].quantity == 1


def test_pagination_meta_build():
    meta = PaginationMeta.build(page=2, page_size=10, total=21)
    assert meta.total_pages == 3
    assert PaginationMeta.build(page=1, page_size=10, total=0).total_pages == 0
