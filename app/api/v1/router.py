"""API Router"""

from fastapi import APIRouter

# Import endpoint routers
from app.api.v1.endpoints import auth, users, bills, reports, news, pricing, payment

api_router = APIRouter()

# Include endpoint routers with prefixes and tags
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(bills.router, prefix="/bills", tags=["Bills"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
api_router.include_router(news.router, prefix="/news", tags=["News"])
api_router.include_router(pricing.router, prefix="/pricing", tags=["Pricing"])
api_router.include_router(payment.router, prefix="/payment", tags=["Payment"])
