from typing import List, Optional
from pydantic import BaseModel, Field


class PaymentItem(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    price: int = Field(..., ge=0)
    code: Optional[str] = None


class ShippingInfo(BaseModel):
    full_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address_line: str = Field(..., min_length=1)
    note: Optional[str] = None


class CreateQRRequest(BaseModel):
    items: List[PaymentItem] = Field(..., min_length=1)
    total: int = Field(..., gt=0)
    shipping: ShippingInfo


class PaymentQR(BaseModel):
    qr_code: str
    payment_url: str
    order_id: str
    amount: int


class PaymentStatus(BaseModel):
    status: str
    order_id: str
