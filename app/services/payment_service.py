"""
Payment gateway stub: builds an order id, a payment URL and a QR image URL.
No provider is contacted and nothing is persisted; order status is always pending.
"""
from datetime import datetime
from typing import Optional
from urllib.parse import urlencode

from app.config import settings
from app.core.logging import get_logger
from app.domain.numbering import generate_order_id
from app.schemas.payment import CreateQRRequest
from app.utils.time import get_utc_now

logger = get_logger(__name__)

PENDING = "pending"


def payment_url(order_id: str, amount: int, user_id=None) -> str:
    params = {"orderId": order_id, "amount": amount}
    if user_id is not None:
        params["userId"] = str(user_id)
    return f"{settings.PAYMENT_GATEWAY_URL}?{urlencode(params)}"


def qr_image_url(data: str, size: int = 300) -> str:
    return f"{settings.QR_SERVICE_URL}?{urlencode({'size': f'{size}x{size}', 'data': data})}"


def create_payment_qr(request: CreateQRRequest, user_id=None, now: Optional[datetime] = None) -> dict:
    order_id = generate_order_id(now or get_utc_now())
    url = payment_url(order_id, request.total, user_id)
    logger.info(
        "Payment QR created",
        extra={"order_id": order_id, "amount": request.total, "items": len(request.items)},
    )
    return {
        "qr_code": qr_image_url(url),
        "payment_url": url,
        "order_id": order_id,
        "amount": request.total,
    }


def check_payment(order_id: str) -> dict:
    return {"status": PENDING, "order_id": order_id}
