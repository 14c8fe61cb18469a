"""Water Bill Endpoints"""

from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user, require_admin
from app.models.billing import Bill
from app.models.enums import BillStatus
from app.models.user import User
from app.schemas.billing import (
    BillCreate, BillResponse, BillStats, BillStatusUpdate, BillUpdate,
    CustomerLookup, CustomerLookupResponse, LatestBill,
)
from app.schemas.responses import PaginatedResponse, PaginationMeta, SuccessResponse
from app.services.bill_service import BillService

router = APIRouter()


def _can_view(user: User, bill: Bill) -> bool:
    return user.is_staff or (user.customer_id is not None and bill.customer_id == user.customer_id)


async def _get_bill_or_404(db: AsyncSession, bill_id: UUID) -> Bill:
    bill = await BillService.get_bill_by_id(db, bill_id)
    if not bill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bill not found")
    return bill


@router.get("/lookup", response_model=SuccessResponse[CustomerLookupResponse])
async def lookup_customer(
    identifier: str = Query(..., min_length=1, max_length=50, description="Phone number or customer id"),
    db: AsyncSession = Depends(get_db),
):
    """
    Public lookup: customer by phone or customer id with their latest bill.
    """
    found = await BillService.lookup(db, identifier)
    if not found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")

    customer, bill = found
    latest = None
    if bill:
        latest = LatestBill(
            id=bill.id,
            bill_number=bill.bill_number,
            status=bill.status,
            total=bill.amounts.get("total", 0),
            due_date=bill.due_date,
        )
    return SuccessResponse(
        data=CustomerLookupResponse(customer=CustomerLookup.model_validate(customer, from_attributes=True), bill=latest)
    )


@router.get("", response_model=PaginatedResponse[BillResponse])
async def list_bills(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    status_filter: Optional[BillStatus] = Query(None, alias="status"),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    List bills. Customers only ever see their own.
    """
    customer_id = None
    if not current_user.is_staff:
        if not current_user.customer_id:
            return PaginatedResponse(data=[], meta=PaginationMeta.build(page, page_size, 0))
        customer_id = current_user.customer_id

    bills, total = await BillService.list_bills(
        db,
        skip=(page - 1) * page_size,
        limit=page_size,
        customer_id=customer_id,
        status=status_filter,
        year=year,
        search=search,
    )
    return PaginatedResponse(
        data=[BillResponse.model_validate(b) for b in bills],
        meta=PaginationMeta.build(page, page_size, total),
    )


@router.get("/stats/summary", response_model=SuccessResponse[BillStats])
async def bill_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    stats = await BillService.get_stats(db)
    return SuccessResponse(data=BillStats(**stats))


@router.get("/customer/{customer_id}", response_model=PaginatedResponse[BillResponse])
async def customer_bills(
    customer_id: str,
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not current_user.is_staff and current_user.customer_id != customer_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    bills, total = await BillService.list_bills(
        db, skip=(page - 1) * page_size, limit=page_size, customer_id=customer_id
    )
    return PaginatedResponse(
        data=[BillResponse.model_validate(b) for b in bills],
        meta=PaginationMeta.build(page, page_size, total),
    )


@router.get("/{bill_id}", response_model=SuccessResponse[BillResponse])
async def get_bill(
    bill_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    bill = await _get_bill_or_404(db, bill_id)
    if not _can_view(current_user, bill):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return SuccessResponse(data=BillResponse.model_validate(bill))


@router.post("", response_model=SuccessResponse[BillResponse], status_code=status.HTTP_201_CREATED)
async def create_bill(
    bill_in: BillCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    Create a bill. Consumption, amounts and the bill number are derived.
    """
    bill = await BillService.create_bill(db, bill_in, current_user)
    if not bill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return SuccessResponse(data=BillResponse.model_validate(bill), message="Bill created successfully")


@router.put("/{bill_id}", response_model=SuccessResponse[BillResponse])
async def update_bill(
    bill_id: UUID,
    bill_in: BillUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    bill = await _get_bill_or_404(db, bill_id)
    bill = await BillService.update_bill(db, bill, bill_in)
    return SuccessResponse(data=BillResponse.model_validate(bill), message="Bill updated successfully")


@router.put("/{bill_id}/status", response_model=SuccessResponse[BillResponse])
async def update_bill_status(
    bill_id: UUID,
    status_in: BillStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    bill = await _get_bill_or_404(db, bill_id)
    bill = await BillService.update_status(db, bill, status_in.status, status_in.payment_info)
    return SuccessResponse(data=BillResponse.model_validate(bill), message="Bill status updated successfully")
