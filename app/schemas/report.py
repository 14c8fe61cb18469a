from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, computed_field
from uuid import UUID
from datetime import datetime

from app.domain.reports import days_since_submission, is_report_overdue
from app.models.enums import ReportType, ReportPriority, ReportStatus
from app.schemas.common import UtcDatetime


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class Location(BaseModel):
    address: str = Field(..., min_length=1)
    ward: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    landmark: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class ReportCreate(BaseModel):
    report_type: ReportType
    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., min_length=10, max_length=2000)
    location: Location
    priority: ReportPriority = ReportPriority.MEDIUM
    is_public: bool = False


class ReportUpdate(BaseModel):
    """Staff edits. Priority changes do not move the SLA estimate."""
    title: Optional[str] = Field(None, min_length=5, max_length=200)
    description: Optional[str] = Field(None, min_length=10, max_length=2000)
    location: Optional[Location] = None
    priority: Optional[ReportPriority] = None
    estimated_resolution: Optional[UtcDatetime] = None
    is_public: Optional[bool] = None


class ReportStatusUpdate(BaseModel):
    status: ReportStatus
    note: Optional[str] = Field(None, max_length=2000)


class ReportAssign(BaseModel):
    assigned_to: UUID


class ReportResolutionCreate(BaseModel):
    description: str = Field(..., min_length=1)
    actions: List[str]
    materials: Optional[List[str]] = None
    cost: Optional[float] = Field(None, ge=0)


class InternalNoteCreate(BaseModel):
    note: str = Field(..., min_length=1, max_length=2000)


class ReportResponse(BaseModel):
    """Report as seen by the customer who filed it"""
    id: UUID
    report_number: str
    customer_id: Optional[str] = None
    customer_info: Dict[str, Any]
    report_type: ReportType
    priority: ReportPriority
    title: str
    description: str
    location: Dict[str, Any]
    attachments: List[Dict[str, Any]] = []
    status: ReportStatus
    assigned_to: Optional[UUID] = None
    estimated_resolution: Optional[datetime] = None
    actual_resolution: Optional[datetime] = None
    resolution: Dict[str, Any] = {}
    is_public: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def is_overdue(self) -> bool:
        return is_report_overdue(self.status, self.estimated_resolution)

    @computed_field
    @property
    def days_since_submission(self) -> int:
        return days_since_submission(self.created_at)


class ReportStaffResponse(ReportResponse):
    """Staff view adds the internal notes log"""
    reporter_id: UUID
    internal_notes: List[Dict[str, Any]] = []


class ReportStats(BaseModel):
    total_reports: int
    pending_reports: int
    in_progress_reports: int
    resolved_reports: int
    overdue_reports: int
