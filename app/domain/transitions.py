"""Status transition tables for bills and reports.

Re-asserting the current status is always allowed and is a no-op.
"""

from typing import Dict, FrozenSet, Mapping, Union

from app.core.exceptions import InvalidStatusTransition
from app.models.enums import BillStatus, ReportStatus


BILL_TRANSITIONS: Dict[BillStatus, FrozenSet[BillStatus]] = {
    BillStatus.PENDING: frozenset({BillStatus.PAID, BillStatus.OVERDUE, BillStatus.CANCELLED}),
    BillStatus.OVERDUE: frozenset({BillStatus.PAID, BillStatus.CANCELLED}),
    BillStatus.PAID: frozenset(),
    BillStatus.CANCELLED: frozenset(),
}

REPORT_TRANSITIONS: Dict[ReportStatus, FrozenSet[ReportStatus]] = {
    ReportStatus.SUBMITTED: frozenset({
        ReportStatus.UNDER_REVIEW,
        ReportStatus.IN_PROGRESS,
        ReportStatus.RESOLVED,
        ReportStatus.REJECTED,
        ReportStatus.CLOSED,
    }),
    ReportStatus.UNDER_REVIEW: frozenset({
        ReportStatus.IN_PROGRESS,
        ReportStatus.RESOLVED,
        ReportStatus.REJECTED,
        ReportStatus.CLOSED,
    }),
    ReportStatus.IN_PROGRESS: frozenset({
        ReportStatus.UNDER_REVIEW,
        ReportStatus.RESOLVED,
        ReportStatus.CLOSED,
    }),
    ReportStatus.RESOLVED: frozenset({ReportStatus.IN_PROGRESS, ReportStatus.CLOSED}),
    ReportStatus.REJECTED: frozenset({ReportStatus.UNDER_REVIEW, ReportStatus.CLOSED}),
    ReportStatus.CLOSED: frozenset(),
}


def _check(entity: str, table: Mapping, enum_cls, current: Union[str, object], requested: Union[str, object]):
    current = enum_cls(current)
    requested = enum_cls(requested)
    if current == requested:
        return requested
    if requested not in table[current]:
        raise InvalidStatusTransition(entity, current.value, requested.value)
    return requested


def check_bill_transition(current, requested) -> BillStatus:
    """Return the requested status or raise ``InvalidStatusTransition``."""
    return _check("Bill", BILL_TRANSITIONS, BillStatus, current, requested)


def check_report_transition(current, requested) -> ReportStatus:
    """Return the requested status or raise ``InvalidStatusTransition``."""
    return _check("Report", REPORT_TRANSITIONS, ReportStatus, current, requested)
