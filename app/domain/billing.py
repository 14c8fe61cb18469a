"""Bill computation and lifecycle rules.

A bill draft is a plain dict shaped like the ``bills`` row:

    {
        "bill_number": "BILL2025010042",          # optional on create
        "water_usage": {"previous_reading": 100, "current_reading": 150},
        "rates": {"base_rate": 0, "consumption_rate": 5000,
                  "service_fee": 50000, "environmental_fee": 10000},
        "status": "pending",
        "payment_info": {...},
        ...
    }

``prepare_bill_for_create`` and ``prepare_bill_for_update`` fill in the derived
fields (consumption, amounts, bill number, paid timestamp) and validate the
domain rules. Neither touches the database.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from app.core.exceptions import ComputationError, DomainValidationError
from app.domain.changes import changed_fields, merged_value
from app.domain.numbering import RandBelow, generate_bill_number
from app.domain.transitions import check_bill_transition
from app.models.enums import BillStatus
from app.utils.time import get_utc_now

TAX_RATE = Decimal("0.1")

DEFAULT_RATES: Dict[str, int] = {
    "base_rate": 0,
    "consumption_rate": 5000,
    "service_fee": 50000,
    "environmental_fee": 10000,
}

RATE_KEYS = tuple(DEFAULT_RATES)
USAGE_FIELDS = ("water_usage", "rates")
PERIOD_FIELDS = ("period_from", "period_to")


def _to_decimal(value: Any, field: str) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ComputationError(f"{field} is required to compute bill amounts", field=field)
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ComputationError(f"{field} must be a number, got {value!r}", field=field) from exc
    if not number.is_finite():
        raise ComputationError(f"{field} must be a finite number", field=field)
    return number


def _round_money(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _plain_number(value: Decimal):
    """JSON-friendly number: int when integral, float otherwise."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def compute_bill_amounts(
    water_usage: Optional[Mapping[str, Any]],
    rates: Optional[Mapping[str, Any]],
) -> Tuple[Dict[str, Any], Dict[str, int]]:
    """
    Derive consumption and the amounts breakdown from readings and rates.

    Returns new ``(water_usage, amounts)`` dicts; the inputs are not mutated,
    so running it twice on the same input yields identical output.

    Raises:
        DomainValidationError: current reading is below the previous reading
        ComputationError: usage or rates are missing or not numeric
    """
    if not isinstance(water_usage, Mapping):
        raise ComputationError("water_usage is required to compute bill amounts", field="water_usage")
    if not isinstance(rates, Mapping):
        raise ComputationError("rates are required to compute bill amounts", field="rates")

    previous = _to_decimal(water_usage.get("previous_reading"), "water_usage.previous_reading")
    current = _to_decimal(water_usage.get("current_reading"), "water_usage.current_reading")
    if current < previous:
        raise DomainValidationError(
            "Current reading cannot be less than previous reading",
            field="water_usage.current_reading",
        )

    rate = {key: _to_decimal(rates.get(key), f"rates.{key}") for key in RATE_KEYS}
    consumption = current - previous

    amounts = {
        "base_amount": _round_money(rate["base_rate"]),
        "consumption_amount": _round_money(consumption * rate["consumption_rate"]),
        "service_amount": _round_money(rate["service_fee"]),
        "environmental_amount": _round_money(rate["environmental_fee"]),
    }
    subtotal = sum(amounts.values())
    tax = _round_money(Decimal(subtotal) * TAX_RATE)
    amounts["subtotal"] = subtotal
    amounts["tax"] = tax
    amounts["total"] = subtotal + tax

    usage = dict(water_usage)
    usage["consumption"] = _plain_number(consumption)
    return usage, amounts


def check_period(period_from: Optional[date], period_to: Optional[date]) -> None:
    if period_from and period_to and period_to < period_from:
        raise DomainValidationError("period_to must not be before period_from", field="period_to")


def _stamp_paid(payment_info: Optional[Mapping[str, Any]], now: datetime) -> Dict[str, Any]:
    info = dict(payment_info or {})
    if not info.get("paid_at"):
        info["paid_at"] = now.isoformat()
    return info


def prepare_bill_for_create(
    draft: Dict[str, Any],
    *,
    now: Optional[datetime] = None,
    randbelow: Optional[RandBelow] = None,
) -> Dict[str, Any]:
    """Validate a new bill draft and fill in its derived fields in place."""
    now = now or get_utc_now()
    rates = draft.get("rates") or dict(DEFAULT_RATES)

    check_period(draft.get("period_from"), draft.get("period_to"))
    # Compute before mutating so a rejected draft is left untouched
    usage, amounts = compute_bill_amounts(draft.get("water_usage"), rates)
    status = BillStatus(draft.get("status") or BillStatus.PENDING)

    if not draft.get("bill_number"):
        draft["bill_number"] = generate_bill_number(now, randbelow)
    draft["rates"] = dict(rates)
    draft["water_usage"] = usage
    draft["amounts"] = amounts
    draft["status"] = status
    if status == BillStatus.PAID:
        draft["payment_info"] = _stamp_paid(draft.get("payment_info"), now)
    else:
        draft["payment_info"] = dict(draft.get("payment_info") or {})
    return draft


def prepare_bill_for_update(
    existing: Mapping[str, Any],
    changes: Mapping[str, Any],
    changed: Optional[Iterable[str]] = None,
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Turn a partial change set into the field values to write.

    ``changed`` names the fields that actually differ from ``existing``; it is
    derived from ``changes`` when not given. Amounts are recomputed only when
    ``water_usage`` or ``rates`` changed.
    """
    now = now or get_utc_now()
    changed = set(changed) if changed is not None else changed_fields(existing, changes)
    update: Dict[str, Any] = {
        field: merged_value(existing, changes, field)
        for field in changed
        if field in changes
    }

    if changed.intersection(PERIOD_FIELDS):
        check_period(
            update.get("period_from", existing.get("period_from")),
            update.get("period_to", existing.get("period_to")),
        )

    if changed.intersection(USAGE_FIELDS):
        usage = update.get("water_usage", existing.get("water_usage"))
        rates = update.get("rates", existing.get("rates")) or dict(DEFAULT_RATES)
        update["water_usage"], update["amounts"] = compute_bill_amounts(usage, rates)
        update["rates"] = dict(rates)

    if "status" in changed:
        status = check_bill_transition(existing.get("status"), changes["status"])
        update["status"] = status
        if status == BillStatus.PAID:
            update["payment_info"] = _stamp_paid(
                update.get("payment_info", existing.get("payment_info")), now
            )

    return update


def is_bill_overdue(status: Any, due_date: Optional[date], now: Optional[datetime] = None) -> bool:
    """Pending bill whose due date has passed."""
    if due_date is None or status != BillStatus.PENDING:
        return False
    now = now or get_utc_now()
    if isinstance(due_date, datetime):
        return now > due_date
    return now.date() > due_date
