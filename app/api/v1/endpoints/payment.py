"""Payment QR Endpoints (gateway stub)"""

from fastapi import APIRouter, Depends, Path

from app.api.deps import get_current_user
from app.models.user import User
from app.schemas.payment import CreateQRRequest, PaymentQR, PaymentStatus
from app.schemas.responses import SuccessResponse
from app.services import payment_service

router = APIRouter()


@router.post("/create-qr", response_model=SuccessResponse[PaymentQR])
async def create_qr(
    request: CreateQRRequest,
    current_user: User = Depends(get_current_user),
):
    """
    Create an order id, a payment URL and a QR image URL pointing at it.
    """
    qr = payment_service.create_payment_qr(request, user_id=current_user.id)
    return SuccessResponse(data=PaymentQR(**qr))


@router.get("/check/{order_id}", response_model=SuccessResponse[PaymentStatus])
async def check_payment(
    order_id: str = Path(..., min_length=1, max_length=64),
    current_user: User = Depends(get_current_user),
):
    return SuccessResponse(data=PaymentStatus(**payment_service.check_payment(order_id)))
