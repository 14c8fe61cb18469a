"""Pricing Service - Business Logic Layer"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.models.pricing import PricingTier
from app.schemas.pricing import PricingTierCreate, PricingTierUpdate
from app.services.persistence import add_unique

logger = get_logger(__name__)


class PricingService:

    @staticmethod
    async def list_active(db: AsyncSession) -> List[PricingTier]:
        """Active tiers, cheapest first."""
        result = await db.execute(
            select(PricingTier)
            .where(PricingTier.is_active.is_(True))
            .order_by(PricingTier.price.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_tier_by_id(db: AsyncSession, tier_id: UUID) -> Optional[PricingTier]:
        result = await db.execute(select(PricingTier).where(PricingTier.id == tier_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def create_tier(db: AsyncSession, data: PricingTierCreate) -> PricingTier:
        tier = await add_unique(db, PricingTier(**data.model_dump()), fields=("code",), entity="Pricing tier")
        await db.refresh(tier)
        logger.info("Pricing tier created", extra={"code": tier.code, "price": tier.price})
        return tier

    @staticmethod
    async def update_tier(db: AsyncSession, tier: PricingTier, data: PricingTierUpdate) -> PricingTier:
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field != "badge":
                continue
            setattr(tier, field, value)
        await db.flush()
        await db.refresh(tier)
        return tier
