"""Models Package - Export all models for easy imports"""

from app.models.base import BaseModel, StatusMixin
from app.models.enums import *
from app.models.user import User
from app.models.billing import Bill
from app.models.report import Report
from app.models.news import News
from app.models.pricing import PricingTier


__all__ = [
    # Base classes
    "BaseModel",
    "StatusMixin",

    # Enums
    "UserRole",
    "BillStatus",
    "ReportType",
    "ReportPriority",
    "ReportStatus",
    "NewsCategory",
    "NewsStatus",
    "TargetAudience",
    "NewsPriority",

    # Models
    "User",
    "Bill",
    "Report",
    "News",
    "PricingTier",
]
