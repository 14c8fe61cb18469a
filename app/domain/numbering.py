"""Human-readable identifier generation.

Generators only produce candidates. Uniqueness is enforced by the database's
unique constraints; callers decide whether to retry on collision.
"""

import secrets
import string
from datetime import datetime, timezone
from typing import Callable, Optional

BILL_PREFIX = "BILL"
REPORT_PREFIX = "RPT"
CUSTOMER_PREFIX = "CUST"
ORDER_PREFIX = "ORDER"

RandBelow = Callable[[int], int]


def generate_period_number(
    prefix: str,
    now: datetime,
    randbelow: Optional[RandBelow] = None,
) -> str:
    """Build ``<prefix><YYYY><MM><RRRR>`` with a zero-padded 4-digit random suffix."""
    randbelow = randbelow or secrets.randbelow
    suffix = randbelow(10000)
    return f"{prefix}{now.year}{now.month:02d}{suffix:04d}"


def generate_bill_number(now: datetime, randbelow: Optional[RandBelow] = None) -> str:
    return generate_period_number(BILL_PREFIX, now, randbelow)


def generate_report_number(now: datetime, randbelow: Optional[RandBelow] = None) -> str:
    return generate_period_number(REPORT_PREFIX, now, randbelow)


def epoch_millis(now: datetime) -> int:
    """Milliseconds since the epoch; naive datetimes are taken as UTC."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return int(now.timestamp() * 1000)


def generate_customer_id(now: datetime) -> str:
    """``CUST`` followed by the last 8 digits of the millisecond timestamp."""
    return f"{CUSTOMER_PREFIX}{str(epoch_millis(now))[-8:]}"


def generate_order_id(now: datetime) -> str:
    """``ORDER-<millis>-<8 random uppercase alphanumerics>`` for the payment stub."""
    alphabet = string.ascii_uppercase + string.digits
    token = "".join(secrets.choice(alphabet) for _ in range(8))
    return f"{ORDER_PREFIX}-{epoch_millis(now)}-{token}"
