"""Report Service - Business Logic Layer"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import DomainValidationError
from app.core.logging import get_logger
from app.domain.numbering import generate_report_number
from app.domain.reports import (
    OPEN_STATUSES,
    build_resolution,
    prepare_report_for_create,
    prepare_report_for_update,
)
from app.models.enums import ReportPriority, ReportStatus, ReportType, UserRole
from app.models.report import Report
from app.models.user import User
from app.schemas.report import ReportCreate, ReportResolutionCreate, ReportUpdate
from app.services.bill_service import customer_snapshot
from app.services.persistence import add_with_generated_number
from app.services.user_service import UserService
from app.utils.time import get_utc_now

logger = get_logger(__name__)

NON_NULLABLE = frozenset({
    "title", "description", "location", "priority", "estimated_resolution", "is_public",
})


class ReportService:
    """Service layer for customer service-issue reports"""

    @staticmethod
    async def get_report_by_id(db: AsyncSession, report_id: UUID) -> Optional[Report]:
        result = await db.execute(select(Report).where(Report.id == report_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def list_reports(
        db: AsyncSession,
        skip: int = 0,
        limit: int = 10,
        reporter_id: Optional[UUID] = None,
        status: Optional[ReportStatus] = None,
        report_type: Optional[ReportType] = None,
        priority: Optional[ReportPriority] = None,
        assigned_to: Optional[UUID] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Report], int]:
        """
        Get paginated reports, newest first.

        Returns:
            Tuple of (reports list, total count)
        """
        conditions = []
        if reporter_id:
            conditions.append(Report.reporter_id == reporter_id)
        if status:
            conditions.append(Report.status == status)
        if report_type:
            conditions.append(Report.report_type == report_type)
        if priority:
            conditions.append(Report.priority == priority)
        if assigned_to:
            conditions.append(Report.assigned_to == assigned_to)
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(
                Report.report_number.ilike(pattern),
                Report.title.ilike(pattern),
                Report.description.ilike(pattern),
            ))

        total = await db.scalar(select(func.count(Report.id)).where(*conditions))
        result = await db.execute(
            select(Report)
            .where(*conditions)
            .order_by(Report.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    @staticmethod
    async def create_report(db: AsyncSession, data: ReportCreate, reporter: User) -> Report:
        draft = data.model_dump(mode="json")
        draft.update({
            "report_type": data.report_type,
            "priority": data.priority,
            "reporter_id": reporter.id,
            "customer_id": reporter.customer_id,
            "customer_info": customer_snapshot(reporter),
        })
        prepare_report_for_create(draft, now=get_utc_now())

        report = await add_with_generated_number(
            db,
            Report,
            draft,
            field="report_number",
            regenerate=lambda: generate_report_number(get_utc_now()),
        )
        await db.refresh(report)
        logger.info(
            "Report submitted",
            extra={
                "report_id": str(report.id),
                "report_number": report.report_number,
                "priority": report.priority.value,
            },
        )
        return report

    @staticmethod
    async def _apply(
        db: AsyncSession,
        report: Report,
        changes: Dict[str, Any],
        actor: Optional[User] = None,
        note: Optional[str] = None,
    ) -> Report:
        update = prepare_report_for_update(
            report.to_draft(),
            changes,
            now=get_utc_now(),
            actor_id=actor.id if actor else None,
            note=note,
        )
        for field, value in update.items():
            setattr(report, field, value)
        if update:
            await db.flush()
            await db.refresh(report)
        return report

    @staticmethod
    async def update_report(db: AsyncSession, report: Report, data: ReportUpdate, actor: User) -> Report:
        changes = data.model_dump(exclude_unset=True)
        changes = {k: v for k, v in changes.items() if v is not None or k not in NON_NULLABLE}
        return await ReportService._apply(db, report, changes, actor)

    @staticmethod
    async def update_status(
        db: AsyncSession,
        report: Report,
        status: ReportStatus,
        actor: User,
        note: Optional[str] = None,
    ) -> Report:
        previous = report.status
        report = await ReportService._apply(db, report, {"status": status}, actor, note)
        logger.info(
            "Report status changed",
            extra={"report_id": str(report.id), "from": previous.value, "to": report.status.value},
        )
        return report

    @staticmethod
    async def assign(db: AsyncSession, report: Report, assignee_id: UUID) -> Report:
        """
        Assign the report to a staff member or admin.

        Raises:
            DomainValidationError: assignee missing, inactive or a customer
        """
        assignee = await UserService.get_user_by_id(db, assignee_id)
        if not assignee or not assignee.is_active or assignee.role == UserRole.CUSTOMER:
            raise DomainValidationError("Assignee must be an active staff member", field="assigned_to")
        report.assigned_to = assignee.id
        await db.flush()
        await db.refresh(report)
        logger.info("Report assigned", extra={"report_id": str(report.id), "assigned_to": str(assignee.id)})
        return report

    @staticmethod
    async def add_resolution(db: AsyncSession, report: Report, data: ReportResolutionCreate, actor: User) -> Report:
        """Record the resolution and move the report to resolved."""
        resolution = build_resolution(
            data.description,
            data.actions,
            actor.id,
            get_utc_now(),
            materials=data.materials,
            cost=data.cost,
        )
        return await ReportService._apply(
            db, report, {"status": ReportStatus.RESOLVED, "resolution": resolution}, actor
        )

    @staticmethod
    async def add_note(db: AsyncSession, report: Report, note: str, actor: User) -> Report:
        return await ReportService._apply(db, report, {}, actor, note)

    @staticmethod
    async def add_attachments(db: AsyncSession, report: Report, records: List[Dict[str, Any]]) -> Report:
        report.attachments = [*(report.attachments or []), *records]
        await db.flush()
        await db.refresh(report)
        return report

    @staticmethod
    def attachment_slots(report: Report) -> int:
        return max(settings.MAX_REPORT_ATTACHMENTS - len(report.attachments or []), 0)

    @staticmethod
    async def get_stats(db: AsyncSession, now: Optional[datetime] = None) -> Dict[str, int]:
        now = now or get_utc_now()
        rows = await db.execute(select(Report.status, func.count(Report.id)).group_by(Report.status))
        by_status = {status: count for status, count in rows.all()}
        overdue = await db.scalar(
            select(func.count(Report.id)).where(
                Report.status.in_(list(OPEN_STATUSES)),
                Report.estimated_resolution < now,
            )
        )
        return {
            "total_reports": sum(by_status.values()),
            "pending_reports": by_status.get(ReportStatus.SUBMITTED, 0),
            "in_progress_reports": by_status.get(ReportStatus.IN_PROGRESS, 0),
            "resolved_reports": by_status.get(ReportStatus.RESOLVED, 0),
            "overdue_reports": overdue or 0,
        }
