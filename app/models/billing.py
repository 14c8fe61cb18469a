"""Billing Model"""

from sqlalchemy import Column, Date, String, Text, ForeignKey
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, pg_enum
from app.models.enums import BillStatus


class Bill(BaseModel):
    """
    Water bill for one customer and billing period.
    water_usage, rates and amounts are JSON documents kept consistent by
    app.domain.billing before every write.
    """
    __tablename__ = "bills"

    bill_number = Column(String(20), unique=True, nullable=False, index=True)
    customer_id = Column(
        String(20),
        ForeignKey("users.customer_id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    customer_info = Column(JSONB, nullable=False)

    period_from = Column(Date, nullable=False, index=True)
    period_to = Column(Date, nullable=False)

    water_usage = Column(JSONB, nullable=False)
    rates = Column(JSONB, nullable=False)
    amounts = Column(JSONB, nullable=False)

    due_date = Column(Date, nullable=False)
    status = Column(pg_enum(BillStatus, "bill_status"), default=BillStatus.PENDING, nullable=False, index=True)
    payment_info = Column(JSONB, nullable=True, default=dict)
    meter_info = Column(JSONB, nullable=True)
    notes = Column(Text, nullable=True)

    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    creator = relationship("User", back_populates="created_bills", foreign_keys=[created_by])

    def __repr__(self) -> str:
        return f"<Bill {self.bill_number} - {self.status}>"
