"""Service Issue Report Endpoints"""

from typing import List, Optional, Union
from uuid import UUID
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user, require_admin, require_staff
from app.config import settings
from app.models.enums import ReportPriority, ReportStatus, ReportType
from app.models.report import Report
from app.models.user import User
from app.schemas.report import (
    InternalNoteCreate, ReportAssign, ReportCreate, ReportResolutionCreate,
    ReportResponse, ReportStaffResponse, ReportStats, ReportStatusUpdate, ReportUpdate,
)
from app.schemas.responses import PaginatedResponse, PaginationMeta, SuccessResponse
from app.services import storage_service
from app.services.report_service import ReportService

router = APIRouter()

# Staff first: a customer view lacks reporter_id and never matches it
ReportView = Union[ReportStaffResponse, ReportResponse]


def _view(user: User, report: Report) -> ReportView:
    if user.is_staff:
        return ReportStaffResponse.model_validate(report)
    return ReportResponse.model_validate(report)


async def _get_report_or_404(db: AsyncSession, report_id: UUID) -> Report:
    report = await ReportService.get_report_by_id(db, report_id)
    if not report:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    return report


def _ensure_owner_or_staff(user: User, report: Report) -> None:
    if not user.is_staff and report.reporter_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")


@router.post("", response_model=SuccessResponse[ReportView], status_code=status.HTTP_201_CREATED)
async def create_report(
    report_in: ReportCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Submit a service issue. The report number and estimated resolution are derived.
    """
    report = await ReportService.create_report(db, report_in, current_user)
    return SuccessResponse(data=_view(current_user, report), message="Report submitted successfully")


@router.post("/{report_id}/attachments", response_model=SuccessResponse[ReportView])
async def upload_attachments(
    report_id: UUID,
    files: List[UploadFile] = File(...),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Attach photos or documents, up to MAX_REPORT_ATTACHMENTS per report.
    """
    report = await _get_report_or_404(db, report_id)
    _ensure_owner_or_staff(current_user, report)

    if len(files) > ReportService.attachment_slots(report):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"A report can have at most {settings.MAX_REPORT_ATTACHMENTS} attachments",
        )
    try:
        records = await storage_service.upload_all(
            f"reports/{report.id}", files, storage_service.ATTACHMENT_TYPES
        )
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    report = await ReportService.add_attachments(db, report, records)
    return SuccessResponse(data=_view(current_user, report), message="Attachments uploaded")


@router.get("", response_model=PaginatedResponse[ReportView])
async def list_reports(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    status_filter: Optional[ReportStatus] = Query(None, alias="status"),
    report_type: Optional[ReportType] = Query(None),
    priority: Optional[ReportPriority] = Query(None),
    assigned_to: Optional[UUID] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    List reports. Customers only see the reports they filed.
    """
    reports, total = await ReportService.list_reports(
        db,
        skip=(page - 1) * page_size,
        limit=page_size,
        reporter_id=None if current_user.is_staff else current_user.id,
        status=status_filter,
        report_type=report_type,
        priority=priority,
        assigned_to=assigned_to,
        search=search,
    )
    return PaginatedResponse(
        data=[_view(current_user, r) for r in reports],
        meta=PaginationMeta.build(page, page_size, total),
    )


@router.get("/stats/summary", response_model=SuccessResponse[ReportStats])
async def report_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    stats = await ReportService.get_stats(db)
    return SuccessResponse(data=ReportStats(**stats))


@router.get("/{report_id}", response_model=SuccessResponse[ReportView])
async def get_report(
    report_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    report = await _get_report_or_404(db, report_id)
    _ensure_owner_or_staff(current_user, report)
    return SuccessResponse(data=_view(current_user, report))


@router.put("/{report_id}", response_model=SuccessResponse[ReportStaffResponse])
async def update_report(
    report_id: UUID,
    report_in: ReportUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    report = await _get_report_or_404(db, report_id)
    report = await ReportService.update_report(db, report, report_in, current_user)
    return SuccessResponse(data=ReportStaffResponse.model_validate(report), message="Report updated successfully")


@router.put("/{report_id}/status", response_model=SuccessResponse[ReportStaffResponse])
async def update_report_status(
    report_id: UUID,
    status_in: ReportStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    report = await _get_report_or_404(db, report_id)
    report = await ReportService.update_status(db, report, status_in.status, current_user, status_in.note)
    return SuccessResponse(data=ReportStaffResponse.model_validate(report), message="Report status updated successfully")


@router.put("/{report_id}/assign", response_model=SuccessResponse[ReportStaffResponse])
async def assign_report(
    report_id: UUID,
    assign_in: ReportAssign,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    report = await _get_report_or_404(db, report_id)
    report = await ReportService.assign(db, report, assign_in.assigned_to)
    return SuccessResponse(data=ReportStaffResponse.model_validate(report), message="Report assigned successfully")


@router.put("/{report_id}/resolution", response_model=SuccessResponse[ReportStaffResponse])
async def add_resolution(
    report_id: UUID,
    resolution_in: ReportResolutionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    """
    Record how the issue was fixed and mark the report resolved.
    """
    report = await _get_report_or_404(db, report_id)
    report = await ReportService.add_resolution(db, report, resolution_in, current_user)
    return SuccessResponse(data=ReportStaffResponse.model_validate(report), message="Resolution added successfully")


@router.post("/{report_id}/notes", response_model=SuccessResponse[ReportStaffResponse])
async def add_internal_note(
    report_id: UUID,
    note_in: InternalNoteCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    report = await _get_report_or_404(db, report_id)
    report = await ReportService.add_note(db, report, note_in.note, current_user)
    return SuccessResponse(data=ReportStaffResponse.model_validate(report), message="Note added")
