"""Bill Service - Business Logic Layer"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.domain.billing import prepare_bill_for_create, prepare_bill_for_update
from app.domain.numbering import generate_bill_number
from app.models.billing import Bill
from app.models.enums import BillStatus
from app.models.user import User
from app.schemas.billing import BillCreate, BillUpdate
from app.services.persistence import add_with_generated_number
from app.services.user_service import UserService
from app.utils.time import get_utc_now

logger = get_logger(__name__)

# Explicit nulls on these are ignored in partial updates
REQUIRED_FIELDS = frozenset({
    "customer_info", "period_from", "period_to", "water_usage", "rates", "due_date",
})


def customer_snapshot(user: User) -> Dict[str, Any]:
    return {
        "full_name": user.full_name,
        "phone": user.phone,
        "email": user.email,
        "address": user.address or {},
    }


def month_bounds(now: datetime) -> Tuple[datetime, datetime]:
    start = datetime(now.year, now.month, 1)
    if now.month == 12:
        return start, datetime(now.year + 1, 1, 1)
    return start, datetime(now.year, now.month + 1, 1)


class BillService:
    """Service layer for water bills"""

    @staticmethod
    async def get_bill_by_id(db: AsyncSession, bill_id: UUID) -> Optional[Bill]:
        result = await db.execute(select(Bill).where(Bill.id == bill_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def list_bills(
        db: AsyncSession,
        skip: int = 0,
        limit: int = 10,
        customer_id: Optional[str] = None,
        status: Optional[BillStatus] = None,
        year: Optional[int] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Bill], int]:
        """
        Get paginated bills, newest first.

        Returns:
            Tuple of (bills list, total count)
        """
        conditions = []
        if customer_id:
            conditions.append(Bill.customer_id == customer_id)
        if status:
            conditions.append(Bill.status == status)
        if year:
            conditions.append(Bill.period_from >= date(year, 1, 1))
            conditions.append(Bill.period_from < date(year + 1, 1, 1))
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(
                Bill.bill_number.ilike(pattern),
                Bill.customer_id.ilike(pattern),
                Bill.customer_info["full_name"].astext.ilike(pattern),
            ))

        total = await db.scalar(select(func.count(Bill.id)).where(*conditions))
        result = await db.execute(
            select(Bill)
            .where(*conditions)
            .order_by(Bill.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    @staticmethod
    async def create_bill(db: AsyncSession, data: BillCreate, created_by: User) -> Optional[Bill]:
        """
        Create a bill for an existing customer.

        Returns None when the customer_id matches no user.
        """
        customer = await UserService.get_user_by_customer_id(db, data.customer_id)
        if not customer:
            return None

        draft = data.model_dump(exclude_none=True)
        draft.setdefault("customer_info", customer_snapshot(customer))
        draft["created_by"] = created_by.id
        now = get_utc_now()
        prepare_bill_for_create(draft, now=now)

        bill = await add_with_generated_number(
            db,
            Bill,
            draft,
            field="bill_number",
            regenerate=lambda: generate_bill_number(get_utc_now()),
        )
        await db.refresh(bill)
        logger.info(
            "Bill created",
            extra={"bill_id": str(bill.id), "bill_number": bill.bill_number, "total": bill.amounts["total"]},
        )
        return bill

    @staticmethod
    async def _apply(db: AsyncSession, bill: Bill, changes: Dict[str, Any]) -> Bill:
        update = prepare_bill_for_update(bill.to_draft(), changes, now=get_utc_now())
        for field, value in update.items():
            setattr(bill, field, value)
        if update:
            await db.flush()
            await db.refresh(bill)
        return bill

    @staticmethod
    async def update_bill(db: AsyncSession, bill: Bill, data: BillUpdate) -> Bill:
        """Partial update; amounts are recomputed when readings or rates change."""
        changes = {
            k: v for k, v in data.model_dump(exclude_unset=True).items()
            if v is not None or k not in REQUIRED_FIELDS
        }
        for nested in ("water_usage", "rates"):
            if changes.get(nested):
                changes[nested] = {k: v for k, v in changes[nested].items() if v is not None}
        bill = await BillService._apply(db, bill, changes)
        logger.info("Bill updated", extra={"bill_id": str(bill.id), "fields": sorted(changes)})
        return bill

    @staticmethod
    async def update_status(
        db: AsyncSession,
        bill: Bill,
        status: BillStatus,
        payment_info: Optional[Dict[str, Any]] = None,
    ) -> Bill:
        previous = bill.status
        changes: Dict[str, Any] = {"status": status}
        if payment_info:
            changes["payment_info"] = payment_info
        bill = await BillService._apply(db, bill, changes)
        logger.info(
            "Bill status changed",
            extra={"bill_id": str(bill.id), "from": previous.value, "to": bill.status.value},
        )
        return bill

    @staticmethod
    async def get_latest_bill(db: AsyncSession, customer_id: str) -> Optional[Bill]:
        result = await db.execute(
            select(Bill)
            .where(Bill.customer_id == customer_id)
            .order_by(Bill.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def lookup(db: AsyncSession, identifier: str) -> Optional[Tuple[User, Optional[Bill]]]:
        """Customer (by phone or customer_id) with their most recent bill."""
        customer = await UserService.find_customer(db, identifier)
        if not customer:
            return None
        bill = None
        if customer.customer_id:
            bill = await BillService.get_latest_bill(db, customer.customer_id)
        return customer, bill

    @staticmethod
    async def get_stats(db: AsyncSession, now: Optional[datetime] = None) -> Dict[str, int]:
        now = now or get_utc_now()
        rows = await db.execute(select(Bill.status, func.count(Bill.id)).group_by(Bill.status))
        by_status = {status: count for status, count in rows.all()}

        month_start, month_end = month_bounds(now)
        in_month = (Bill.created_at >= month_start, Bill.created_at < month_end)
        current_month_bills = await db.scalar(select(func.count(Bill.id)).where(*in_month))
        revenue = await db.scalar(
            select(func.coalesce(func.sum(Bill.amounts["total"].as_integer()), 0))
            .where(Bill.status == BillStatus.PAID, *in_month)
        )

        return {
            "total_bills": sum(by_status.values()),
            "pending_bills": by_status.get(BillStatus.PENDING, 0),
            "paid_bills": by_status.get(BillStatus.PAID, 0),
            "overdue_bills": by_status.get(BillStatus.OVERDUE, 0),
            "current_month_bills": current_month_bills or 0,
            "current_month_revenue": int(revenue or 0),
        }
