"""Pricing Tier Endpoints"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, require_admin
from app.models.user import User
from app.schemas.pricing import PricingTierCreate, PricingTierResponse, PricingTierUpdate
from app.schemas.responses import SuccessResponse
from app.services.pricing_service import PricingService

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[PricingTierResponse]])
async def list_pricing(db: AsyncSession = Depends(get_db)):
    """Active pricing tiers, cheapest first."""
    tiers = await PricingService.list_active(db)
    return SuccessResponse(data=[PricingTierResponse.model_validate(t) for t in tiers])


@router.post("", response_model=SuccessResponse[PricingTierResponse], status_code=status.HTTP_201_CREATED)
async def create_pricing(
    tier_in: PricingTierCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    tier = await PricingService.create_tier(db, tier_in)
    return SuccessResponse(data=PricingTierResponse.model_validate(tier), message="Pricing tier created")


@router.put("/{tier_id}", response_model=SuccessResponse[PricingTierResponse])
async def update_pricing(
    tier_id: UUID,
    tier_in: PricingTierUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    tier = await PricingService.get_tier_by_id(db, tier_id)
    if not tier:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pricing tier not found")
    tier = await PricingService.update_tier(db, tier, tier_in)
    return SuccessResponse(data=PricingTierResponse.model_validate(tier), message="Pricing tier updated")
