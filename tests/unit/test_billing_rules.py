"""Unit tests for bill computation and lifecycle rules."""

import copy
from datetime import date, datetime

import pytest

from app.core.exceptions import ComputationError, DomainValidationError, InvalidStatusTransition
from app.domain.billing import (
    DEFAULT_RATES,
    compute_bill_amounts,
    is_bill_overdue,
    prepare_bill_for_create,
    prepare_bill_for_update,
)
from app.models.enums import BillStatus

NOW = datetime(2025, 1, 15, 8, 30)


def _draft(previous=100, current=150, rates=None, **extra):
    draft = {
        "customer_id": "CUST00000001",
        "water_usage": {"previous_reading": previous, "current_reading": current},
        "rates": rates if rates is not None else dict(DEFAULT_RATES),
        "due_date": date(2025, 2, 15),
    }
    draft.update(extra)
    return draft


def test_default_rates_scenario():
    draft = prepare_bill_for_create(_draft(), now=NOW, randbelow=lambda n: 42)

    assert draft["water_usage"]["consumption"] == 50
    assert draft["amounts"] == {
        "base_amount": 0,
        "consumption_amount": 250000,
        "service_amount": 50000,
        "environmental_amount": 10000,
        "subtotal": 310000,
        "tax": 31000,
        "total": 341000,
    }
    assert draft["bill_number"] == "BILL2025010042"
    assert draft["status"] == BillStatus.PENDING


@pytest.mark.parametrize(
    "previous,current,rates",
    [
        (0, 0, {"base_rate": 0, "consumption_rate": 0, "service_fee": 0, "environmental_fee": 0}),
        (10, 37, {"base_rate": 12000, "consumption_rate": 7300, "service_fee": 15000, "environmental_fee": 999}),
        (1.5, 4.25, {"base_rate": 3, "consumption_rate": 11, "service_fee": 7, "environmental_fee": 5}),
    ],
)
def test_total_is_subtotal_plus_ten_percent(previous, current, rates):
    usage, amounts = compute_bill_amounts(
        {"previous_reading": previous, "current_reading": current}, rates
    )
    expected = (
        rates["base_rate"]
        + rates["consumption_rate"] * (current - previous)
        + rates["service_fee"]
        + rates["environmental_fee"]
    ) * 1.1
    assert abs(amounts["total"] - expected) <= 1
    assert amounts["total"] == amounts["subtotal"] + amounts["tax"]
    assert usage["consumption"] == pytest.approx(current - previous)


def test_tax_rounds_half_up():
    # subtotal 5 -> tax 0.5 -> 1
    _, amounts = compute_bill_amounts(
        {"previous_reading": 0, "current_reading": 0},
        {"base_rate": 5, "consumption_rate": 0, "service_fee": 0, "environmental_fee": 0},
    )
    assert amounts["tax"] == 1
    assert amounts["total"] == 6


def test_fractional_consumption_is_float():
    usage, _ = compute_bill_amounts(
        {"previous_reading": 10, "current_reading": 12.5}, DEFAULT_RATES
    )
    assert usage["consumption"] == 2.5


def test_reading_regression_rejected_without_touching_draft():
    draft = _draft(previous=150, current=100)
    before = copy.deepcopy(draft)

    with pytest.raises(DomainValidationError) as exc:
        prepare_bill_for_create(draft, now=NOW)

    assert exc.value.field == "water_usage.current_reading"
    assert draft == before


def test_computation_is_idempotent():
    usage = {"previous_reading": 100, "current_reading": 150}
    first = compute_bill_amounts(usage, DEFAULT_RATES)
    second = compute_bill_amounts(usage, DEFAULT_RATES)
    assert first == second
    assert "consumption" not in usage


@pytest.mark.parametrize(
    "usage,rates",
    [
        (None, DEFAULT_RATES),
        ({"previous_reading": 1}, DEFAULT_RATES),
        ({"previous_reading": "abc", "current_reading": 2}, DEFAULT_RATES),
        ({"previous_reading": 1, "current_reading": 2}, {"base_rate": 0}),
        ({"previous_reading": 1, "current_reading": float("nan")}, DEFAULT_RATES),
    ],
)
def test_malformed_inputs_raise_computation_error(usage, rates):
    with pytest.raises(ComputationError):
        compute_bill_amounts(usage, rates)


def test_missing_rates_fall_back_to_defaults():
    draft = _draft(rates={})
    draft.pop("rates")
    prepare_bill_for_create(draft, now=NOW)
    assert draft["rates"] == DEFAULT_RATES


def test_given_bill_number_is_kept():
    draft = prepare_bill_for_create(_draft(bill_number="BILL2025019999"), now=NOW)
    assert draft["bill_number"] == "BILL2025019999"


def test_create_as_paid_stamps_paid_at():
    draft = prepare_bill_for_create(_draft(status="paid"), now=NOW)
    assert draft["payment_info"]["paid_at"] == NOW.isoformat()


def _existing(**overrides):
    existing = prepare_bill_for_create(_draft(), now=NOW)
    existing.update(overrides)
    return existing


def test_update_recomputes_when_reading_changes():
    existing = _existing()
    update = prepare_bill_for_update(existing, {"water_usage": {"current_reading": 160}}, now=NOW)

    assert update["water_usage"] == {"previous_reading": 100, "current_reading": 160, "consumption": 60}
    assert update["amounts"]["consumption_amount"] == 300000
    assert update["amounts"]["total"] == 396000


def test_update_recomputes_when_rates_change():
    existing = _existing()
    update = prepare_bill_for_update(existing, {"rates": {"consumption_rate": 6000}}, now=NOW)
    assert update["rates"]["consumption_rate"] == 6000
    assert update["rates"]["service_fee"] == 50000
    assert update["amounts"]["consumption_amount"] == 300000


def test_update_without_usage_change_leaves_amounts_alone():
    existing = _existing()
    update = prepare_bill_for_update(existing, {"notes": "meter replaced"}, now=NOW)
    assert update == {"notes": "meter replaced"}


def test_same_values_count_as_unchanged():
    existing = _existing()
    update = prepare_bill_for_update(
        existing, {"water_usage": {"current_reading": 150}, "status": BillStatus.PENDING}, now=NOW
    )
    assert update == {}


def test_explicit_changed_set_drives_recompute():
    existing = _existing()
    update = prepare_bill_for_update(existing, {"notes": "x"}, changed={"notes", "rates"}, now=NOW)
    assert "amounts" in update
    assert update["amounts"] == existing["amounts"]


def test_update_reading_regression_rejected():
    existing = _existing()
    with pytest.raises(DomainValidationError):
        prepare_bill_for_update(existing, {"water_usage": {"current_reading": 90}}, now=NOW)


def test_marking_paid_stamps_paid_at_once():
    existing = _existing()
    update = prepare_bill_for_update(existing, {"status": "paid"}, now=NOW)
    assert update["status"] == BillStatus.PAID
    assert update["payment_info"]["paid_at"] == NOW.isoformat()


def test_marking_paid_keeps_given_paid_at():
    existing = _existing()
    update = prepare_bill_for_update(
        existing,
        {"status": "paid", "payment_info": {"method": "cash", "paid_at": "2025-01-10T09:00:00"}},
        now=NOW,
    )
    assert update["payment_info"] == {"method": "cash", "paid_at": "2025-01-10T09:00:00"}


def test_cancelling_paid_bill_is_illegal():
    existing = _existing(status=BillStatus.PAID)
    with pytest.raises(InvalidStatusTransition):
        prepare_bill_for_update(existing, {"status": "cancelled"}, now=NOW)


def test_is_bill_overdue():
    assert is_bill_overdue(BillStatus.PENDING, date(2025, 1, 14), NOW)
    assert not is_bill_overdue(BillStatus.PENDING, date(2025, 1, 15), NOW)
    assert not is_bill_overdue(BillStatus.PAID, date(2025, 1, 1), NOW)
    assert not is_bill_overdue(BillStatus.PENDING, None, NOW)


def test_inverted_period_rejected_on_create():
    draft = _draft(period_from=date(2025, 2, 1), period_to=date(2025, 1, 1))
    with pytest.raises(DomainValidationError) as exc:
        prepare_bill_for_create(draft, now=NOW)
    assert exc.value.field == "period_to"
    assert "amounts" not in draft


def test_update_rejects_inverted_period():
    existing = _existing(period_from=date(2025, 1, 1), period_to=date(2025, 1, 31))
    with pytest.raises(DomainValidationError) as exc:
        prepare_bill_for_update(
            existing, {"period_from": date(2025, 3, 1), "period_to": date(2025, 1, 1)}, now=NOW
        )
    assert exc.value.field == "period_to"


def test_update_checks_period_against_stored_bound():
    existing = _existing(period_from=date(2025, 1, 1), period_to=date(2025, 1, 31))
    with pytest.raises(DomainValidationError):
        prepare_bill_for_update(existing, {"period_from": date(2025, 2, 15)}, now=NOW)
    with pytest.raises(DomainValidationError):
        prepare_bill_for_update(existing, {"period_to": date(2024, 12, 31)}, now=NOW)

    update = prepare_bill_for_update(existing, {"period_to": date(2025, 2, 28)}, now=NOW)
    assert update == {"period_to": date(2025, 2, 28)}
