"""Pricing Tier Model"""

from sqlalchemy import Column, String, Integer
from sqlalchemy.dialects.postgresql import JSONB

from app.models.base import BaseModel, StatusMixin


class PricingTier(BaseModel, StatusMixin):
    """Bottled-water delivery packages shown on the public pricing page."""
    __tablename__ = "pricing_tiers"

    code = Column(String(30), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    badge = Column(String(50), nullable=True)
    description = Column(String(255), nullable=False)
    price = Column(Integer, nullable=False)
    unit = Column(String(100), nullable=False)
    includes = Column(JSONB, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<PricingTier {self.code} {self.price}>"
