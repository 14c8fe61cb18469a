"""Unit tests for human-readable identifier generation."""

import re
from datetime import datetime, timezone

from app.domain.numbering import (
    epoch_millis,
    generate_bill_number,
    generate_customer_id,
    generate_order_id,
    generate_report_number,
)

NOW = datetime(2025, 1, 5, 10, 0)


def test_bill_number_format():
    assert generate_bill_number(NOW, lambda n: 5) == "BILL2025010005"
    assert re.fullmatch(r"BILL202501\d{4}", generate_bill_number(NOW))


def test_report_number_format():
    assert generate_report_number(datetime(2024, 12, 31), lambda n: 9999) == "RPT2024129999"


def test_customer_id_uses_last_eight_millis_digits():
    millis = epoch_millis(NOW)
    assert generate_customer_id(NOW) == f"CUST{str(millis)[-8:]}"
    assert len(generate_customer_id(NOW)) == 12


def test_naive_datetimes_are_utc():
    assert epoch_millis(NOW) == epoch_millis(NOW.replace(tzinfo=timezone.utc))


def test_order_id_format():
    order_id = generate_order_id(NOW)
    assert re.fullmatch(rf"ORDER-{epoch_millis(NOW)}-[A-Z0-9]{{8}}", order_id)
