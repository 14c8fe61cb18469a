"""Service-Issue Report Model"""

from sqlalchemy import Column, String, Text, DateTime, Boolean, ForeignKey
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, pg_enum
from app.models.enums import ReportType, ReportPriority, ReportStatus


class Report(BaseModel):
    """
    Issue reported by a customer (leak, quality, pressure, meter, billing...).
    internal_notes is an append-only log of {note, added_by, added_at}.
    """
    __tablename__ = "reports"

    report_number = Column(String(20), unique=True, nullable=False, index=True)
    reporter_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_id = Column(String(20), ForeignKey("users.customer_id", ondelete="SET NULL"), nullable=True, index=True)
    customer_info = Column(JSONB, nullable=False)

    report_type = Column(pg_enum(ReportType, "report_type"), nullable=False, index=True)
    priority = Column(pg_enum(ReportPriority, "report_priority"), default=ReportPriority.MEDIUM, nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(JSONB, nullable=False)
    attachments = Column(JSONB, nullable=False, default=list)

    status = Column(pg_enum(ReportStatus, "report_status"), default=ReportStatus.SUBMITTED, nullable=False, index=True)
    assigned_to = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    estimated_resolution = Column(DateTime, nullable=True, index=True)
    actual_resolution = Column(DateTime, nullable=True)
    resolution = Column(JSONB, nullable=False, default=dict)
    internal_notes = Column(JSONB, nullable=False, default=list)
    is_public = Column(Boolean, default=False, nullable=False)

    # Relationships
    assignee = relationship("User", back_populates="assigned_reports", foreign_keys=[assigned_to])
    reporter = relationship("User", foreign_keys=[reporter_id])

    def __repr__(self) -> str:
        return f"<Report {self.report_number} - {self.status}>"
