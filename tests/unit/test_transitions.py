"""Unit tests for bill and report status transition tables."""

import pytest

from app.core.exceptions import InvalidStatusTransition
from app.domain.transitions import (
    BILL_TRANSITIONS,
    REPORT_TRANSITIONS,
    check_bill_transition,
    check_report_transition,
)
from app.models.enums import BillStatus, ReportStatus


def test_every_status_has_a_row():
    assert set(BILL_TRANSITIONS) == set(BillStatus)
    assert set(REPORT_TRANSITIONS) == set(ReportStatus)


@pytest.mark.parametrize("status", list(BillStatus))
def test_reasserting_bill_status_is_allowed(status):
    assert check_bill_transition(status, status.value) == status


@pytest.mark.parametrize(
    "current,requested",
    [("pending", "paid"), ("pending", "overdue"), ("overdue", "paid"), ("overdue", "cancelled")],
)
def test_allowed_bill_transitions(current, requested):
    assert check_bill_transition(current, requested) == BillStatus(requested)


@pytest.mark.parametrize(
    "current,requested",
    [("paid", "cancelled"), ("paid", "pending"), ("cancelled", "pending"), ("overdue", "pending")],
)
def test_rejected_bill_transitions(current, requested):
    with pytest.raises(InvalidStatusTransition) as exc:
        check_bill_transition(current, requested)
    assert exc.value.status_code == 409
    assert exc.value.code == "INVALID_STATUS_TRANSITION"


def test_closed_report_is_terminal():
    for status in ReportStatus:
        if status is ReportStatus.CLOSED:
            continue
        with pytest.raises(InvalidStatusTransition):
            check_report_transition(ReportStatus.CLOSED, status)


def test_resolved_report_can_reopen():
    assert check_report_transition("resolved", "in_progress") == ReportStatus.IN_PROGRESS


def test_unknown_status_is_a_value_error():
    with pytest.raises(ValueError):
        check_bill_transition("pending", "refunded")
