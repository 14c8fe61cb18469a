from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from uuid import UUID
from datetime import datetime, date

from app.domain.billing import is_bill_overdue
from app.models.enums import BillStatus
from app.schemas.common import CustomerInfo


class WaterUsage(BaseModel):
    previous_reading: float = Field(..., ge=0)
    current_reading: float = Field(..., ge=0)


class WaterUsageUpdate(BaseModel):
    previous_reading: Optional[float] = Field(None, ge=0)
    current_reading: Optional[float] = Field(None, ge=0)


class RateSchedule(BaseModel):
    """Rates in whole currency units (VND)"""
    base_rate: int = Field(0, ge=0)
    consumption_rate: int = Field(5000, ge=0, description="Per cubic meter")
    service_fee: int = Field(50000, ge=0)
    environmental_fee: int = Field(10000, ge=0)


class RateScheduleUpdate(BaseModel):
    base_rate: Optional[int] = Field(None, ge=0)
    consumption_rate: Optional[int] = Field(None, ge=0)
    service_fee: Optional[int] = Field(None, ge=0)
    environmental_fee: Optional[int] = Field(None, ge=0)


class BillCreate(BaseModel):
    customer_id: str = Field(..., min_length=1, max_length=20)
    customer_info: Optional[CustomerInfo] = None
    period_from: date
    period_to: date
    water_usage: WaterUsage
    rates: Optional[RateSchedule] = None
    due_date: date
    meter_info: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_period(self) -> "BillCreate":
        if self.period_to < self.period_from:
            raise ValueError("period_to must not be before period_from")
        return self


class BillUpdate(BaseModel):
    """Partial update; nested water_usage/rates keys overlay the stored values"""
    customer_info: Optional[CustomerInfo] = None
    period_from: Optional[date] = None
    period_to: Optional[date] = None
    water_usage: Optional[WaterUsageUpdate] = None
    rates: Optional[RateScheduleUpdate] = None
    due_date: Optional[date] = None
    meter_info: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None


class BillStatusUpdate(BaseModel):
    status: BillStatus
    payment_info: Optional[Dict[str, Any]] = None


class BillResponse(BaseModel):
    id: UUID
    bill_number: str
    customer_id: str
    customer_info: Dict[str, Any]
    period_from: date
    period_to: date
    water_usage: Dict[str, Any]
    rates: Dict[str, Any]
    amounts: Dict[str, Any]
    due_date: date
    status: BillStatus
    payment_info: Optional[Dict[str, Any]] = None
    meter_info: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def is_overdue(self) -> bool:
        return is_bill_overdue(self.status, self.due_date)


class LatestBill(BaseModel):
    id: UUID
    bill_number: str
    status: BillStatus
    total: int
    due_date: date


class CustomerLookup(BaseModel):
    id: UUID
    full_name: str
    phone: str
    customer_id: Optional[str] = None


class CustomerLookupResponse(BaseModel):
    customer: CustomerLookup
    bill: Optional[LatestBill] = None


class BillStats(BaseModel):
    total_bills: int
    pending_bills: int
    paid_bills: int
    overdue_bills: int
    current_month_bills: int
    current_month_revenue: int
