"""User Pydantic Schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, ConfigDict

from app.models.enums import UserRole
from app.schemas.common import Address


class UserResponse(BaseModel):
    """Schema for user responses (never includes the password hash)"""
    id: UUID
    username: str
    email: EmailStr
    full_name: str
    phone: str
    address: Optional[Address] = None
    role: UserRole
    is_active: bool
    avatar: Optional[str] = None
    customer_id: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    """Profile update. role and is_active are honoured for admins only."""
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone: Optional[str] = Field(None, pattern=r"^[0-9]{10,11}$")
    address: Optional[Address] = None
    avatar: Optional[str] = Field(None, max_length=255)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class PasswordChange(BaseModel):
    """Schema for changing password"""
    current_password: str
    new_password: str = Field(..., min_length=6, description="New password must be at least 6 characters")
