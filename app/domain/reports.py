"""Service-issue report rules: numbering, SLA defaults, resolution and notes."""

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional

from app.core.exceptions import DomainValidationError
from app.domain.changes import changed_fields, merged_value
from app.domain.numbering import RandBelow, generate_report_number
from app.domain.transitions import check_report_transition
from app.models.enums import ReportPriority, ReportStatus
from app.utils.time import get_utc_now

# Days from creation until the estimated resolution, per priority
SLA_DAYS: Dict[ReportPriority, int] = {
    ReportPriority.URGENT: 1,
    ReportPriority.HIGH: 3,
    ReportPriority.MEDIUM: 7,
    ReportPriority.LOW: 14,
}

OPEN_STATUSES = frozenset(set(ReportStatus) - {ReportStatus.RESOLVED, ReportStatus.CLOSED})


def default_estimated_resolution(priority: Any, created_at: datetime) -> datetime:
    return created_at + timedelta(days=SLA_DAYS[ReportPriority(priority)])


def append_internal_note(
    notes: Optional[Iterable[Mapping[str, Any]]],
    note: str,
    added_by: Any,
    now: datetime,
) -> List[Dict[str, Any]]:
    """Return a new notes list with ``note`` appended; existing entries are kept as-is."""
    text = (note or "").strip()
    if not text:
        raise DomainValidationError("Note cannot be empty", field="note")
    entries = [dict(n) for n in (notes or [])]
    entries.append({
        "note": text,
        "added_by": str(added_by) if added_by is not None else None,
        "added_at": now.isoformat(),
    })
    return entries


def build_resolution(
    description: str,
    actions: List[str],
    resolved_by: Any,
    now: datetime,
    materials: Optional[List[str]] = None,
    cost: Optional[float] = None,
) -> Dict[str, Any]:
    return {
        "description": description,
        "actions": list(actions),
        "materials": list(materials or []),
        "cost": cost or 0,
        "resolved_by": str(resolved_by) if resolved_by is not None else None,
        "resolved_at": now.isoformat(),
    }


def prepare_report_for_create(
    draft: Dict[str, Any],
    *,
    now: Optional[datetime] = None,
    randbelow: Optional[RandBelow] = None,
) -> Dict[str, Any]:
    """Fill in report number, defaults and the SLA estimate on a new report draft."""
    now = now or get_utc_now()
    priority = ReportPriority(draft.get("priority") or ReportPriority.MEDIUM)

    if not draft.get("report_number"):
        draft["report_number"] = generate_report_number(now, randbelow)
    draft["priority"] = priority
    draft["status"] = ReportStatus(draft.get("status") or ReportStatus.SUBMITTED)
    draft["created_at"] = draft.get("created_at") or now
    if not draft.get("estimated_resolution"):
        draft["estimated_resolution"] = default_estimated_resolution(priority, draft["created_at"])
    draft["attachments"] = list(draft.get("attachments") or [])
    draft["internal_notes"] = list(draft.get("internal_notes") or [])
    draft["resolution"] = dict(draft.get("resolution") or {})
    return draft


def prepare_report_for_update(
    existing: Mapping[str, Any],
    changes: Mapping[str, Any],
    changed: Optional[Iterable[str]] = None,
    *,
    now: Optional[datetime] = None,
    actor_id: Any = None,
    note: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Turn a partial change set into the field values to write.

    The SLA estimate is only defaulted at creation; a priority change leaves
    ``estimated_resolution`` alone. Moving
    into ``resolved`` stamps ``actual_resolution`` once. ``note`` is appended
    to the internal notes log.
    """
    if "internal_notes" in changes:
        raise DomainValidationError("Internal notes are append-only", field="internal_notes")

    now = now or get_utc_now()
    changed = set(changed) if changed is not None else changed_fields(existing, changes)
    update: Dict[str, Any] = {
        field: merged_value(existing, changes, field)
        for field in changed
        if field in changes
    }

    if "priority" in changed:
        update["priority"] = ReportPriority(changes["priority"])

    if "status" in changed:
        status = check_report_transition(existing.get("status"), changes["status"])
        update["status"] = status
        if status == ReportStatus.RESOLVED and not existing.get("actual_resolution"):
            update.setdefault("actual_resolution", now)

    if note:
        update["internal_notes"] = append_internal_note(
            existing.get("internal_notes"), note, actor_id, now
        )

    return update


def is_report_overdue(status: Any, estimated_resolution: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """Open report (not resolved/closed) whose estimated resolution has passed."""
    if estimated_resolution is None:
        return False
    if ReportStatus(status) not in OPEN_STATUSES:
        return False
    now = now or get_utc_now()
    return now > estimated_resolution


def days_since_submission(created_at: Optional[datetime], now: Optional[datetime] = None) -> int:
    if created_at is None:
        return 0
    now = now or get_utc_now()
    return max((now - created_at).days, 0)
