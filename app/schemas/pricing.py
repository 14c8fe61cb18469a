from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID


class PricingTierCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=30, pattern=r"^[a-z0-9_-]+$")
    name: str = Field(..., min_length=1, max_length=100)
    badge: Optional[str] = Field(None, max_length=50)
    description: str = Field(..., min_length=1, max_length=255)
    price: int = Field(..., ge=0)
    unit: str = Field(..., min_length=1, max_length=100)
    includes: List[str] = []
    is_active: bool = True


class PricingTierUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    badge: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[int] = Field(None, ge=0)
    unit: Optional[str] = Field(None, min_length=1, max_length=100)
    includes: Optional[List[str]] = None
    is_active: Optional[bool] = None


class PricingTierResponse(BaseModel):
    id: UUID
    code: str
    name: str
    badge: Optional[str] = None
    description: str
    price: int
    unit: str
    includes: List[str]
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
