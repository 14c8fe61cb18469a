"""User & Authentication Model"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, StatusMixin, pg_enum
from app.models.enums import UserRole


class User(BaseModel, StatusMixin):
    """
    Customer, staff and admin accounts.
    Customers get a human-readable customer_id that bills and reports reference.
    """
    __tablename__ = "users"

    # Authentication
    username = Column(String(30), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    # Profile
    full_name = Column(String(100), nullable=False)
    phone = Column(String(15), nullable=False, index=True)
    address = Column(JSONB, nullable=True, default=dict)
    avatar = Column(String(255), nullable=True)

    role = Column(pg_enum(UserRole, "user_role"), default=UserRole.CUSTOMER, nullable=False, index=True)
    customer_id = Column(String(20), unique=True, nullable=True, index=True)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    created_bills = relationship("Bill", back_populates="creator", foreign_keys="Bill.created_by")
    assigned_reports = relationship("Report", back_populates="assignee", foreign_keys="Report.assigned_to")
    authored_news = relationship("News", back_populates="author")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_staff(self) -> bool:
        """Admins and staff both handle reports"""
        return self.role in (UserRole.ADMIN, UserRole.STAFF)

    @property
    def is_customer(self) -> bool:
        return self.role == UserRole.CUSTOMER

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.role})>"
