"""Shared schema building blocks"""

from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID
from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr

from app.utils.time import to_naive_utc

# Stored as TIMESTAMP WITHOUT TIME ZONE, so incoming values are normalized to naive UTC
UtcDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]


class Address(BaseModel):
    street: Optional[str] = None
    ward: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None


class CustomerInfo(BaseModel):
    """Customer snapshot copied onto bills and reports"""
    full_name: str
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[Address] = None


class UserBrief(BaseModel):
    id: Optional[UUID] = None
    full_name: str
    email: EmailStr

    model_config = ConfigDict(from_attributes=True)
