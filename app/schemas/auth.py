from typing import Optional
from pydantic import BaseModel, EmailStr, Field, model_validator

from app.schemas.common import Address


class RegisterRequest(BaseModel):
    """Customer self-registration"""
    username: str = Field(..., min_length=3, max_length=30, pattern=r"^[A-Za-z0-9]+$")
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=255)
    full_name: str = Field(..., min_length=2, max_length=100)
    phone: str = Field(..., pattern=r"^[0-9]{10,11}$")
    address: Optional[Address] = None


class LoginRequest(BaseModel):
    """Login with either email or username"""
    email: Optional[EmailStr] = None
    username: Optional[str] = None
    password: str

    @model_validator(mode="after")
    def require_identifier(self) -> "LoginRequest":
        if not self.email and not self.username:
            raise ValueError("email or username is required")
        return self


class RefreshRequest(BaseModel):
    refresh_token: str


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    role: str
    user_id: str
    customer_id: Optional[str] = None
