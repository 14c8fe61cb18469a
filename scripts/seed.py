#!/usr/bin/env python3
"""
Seed the database with sample accounts, news articles and pricing tiers.

Usage:
  python scripts/seed.py
  # Requires DATABASE_URL and SECRET_KEY in .env (or export)

Existing users, bills, reports, news and pricing tiers are deleted first.
Refuses to run when ENVIRONMENT=production.
"""
import asyncio
import os
import sys

from dotenv import load_dotenv

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
load_dotenv(os.path.join(_root, ".env"))

# Add project root to path
sys.path.insert(0, _root)

from sqlalchemy import delete  # noqa: E402

from app.config import settings  # noqa: E402
from app.database import AsyncSessionLocal, init_db  # noqa: E402
from app.models import Bill, News, PricingTier, Report, User, UserRole  # noqa: E402
from app.schemas.news import NewsCreate  # noqa: E402
from app.schemas.pricing import PricingTierCreate  # noqa: E402
from app.services.news_service import NewsService  # noqa: E402
from app.services.pricing_service import PricingService  # noqa: E402
from app.services.user_service import UserService  # noqa: E402

SAMPLE_USERS = [
    {
        "username": "admin",
        "email": "admin@introaqua.vn",
        "password": "admin123",
        "full_name": "Administrator",
        "phone": "0123456789",
        "role": UserRole.ADMIN,
        "address": {
            "street": "123 Admin Street",
            "ward": "Admin Ward",
            "district": "Admin District",
            "city": "Ho Chi Minh City",
        },
    },
    {
        "username": "customer1",
        "email": "customer1@example.com",
        "password": "customer123",
        "full_name": "Nguyen Van A",
        "phone": "0987654321",
        "role": UserRole.CUSTOMER,
        "address": {
            "street": "456 Customer Street",
            "ward": "Customer Ward",
            "district": "District 1",
            "city": "Ho Chi Minh City",
        },
    },
    {
        "username": "staff1",
        "email": "staff1@introaqua.vn",
        "password": "staff123",
        "full_name": "Tran Thi B",
        "phone": "0912345678",
        "role": UserRole.STAFF,
        "address": {
            "street": "789 Staff Street",
            "ward": "Staff Ward",
            "district": "District 2",
            "city": "Ho Chi Minh City",
        },
    },
]

SAMPLE_NEWS = [
    {
        "title": "Thông báo về việc bảo trì hệ thống cấp nước",
        "slug": "thong-bao-bao-tri-he-thong-cap-nuoc",
        "summary": "Hệ thống cấp nước sẽ được bảo trì định kỳ vào cuối tuần này.",
        "content": "Kính gửi quý khách hàng, chúng tôi xin thông báo về việc bảo trì hệ thống cấp nước định kỳ...",
        "category": "maintenance",
        "tags": ["bảo trì", "hệ thống", "cấp nước"],
        "status": "published",
        "is_featured": True,
        "target_audience": "all",
    },
    {
        "title": "Hướng dẫn tiết kiệm nước trong mùa khô",
        "slug": "huong-dan-tiet-kiem-nuoc-mua-kho",
        "summary": "Những mẹo đơn giản giúp bạn tiết kiệm nước và giảm chi phí hóa đơn.",
        "content": "Mùa khô đang đến, việc tiết kiệm nước không chỉ giúp bảo vệ môi trường mà còn giảm chi phí...",
        "category": "tips",
        "tags": ["tiết kiệm", "nước", "mùa khô", "mẹo"],
        "status": "published",
        "is_featured": False,
        "target_audience": "customers",
    },
    {
        "title": "Cập nhật biểu giá nước mới từ tháng 1/2025",
        "slug": "cap-nhat-bieu-gia-nuoc-2025",
        "summary": "Biểu giá nước mới sẽ có hiệu lực từ ngày 1/1/2025 với mức tăng nhẹ.",
        "content": "Theo quy định mới của thành phố, biểu giá nước sẽ được điều chỉnh từ đầu năm 2025...",
        "category": "announcement",
        "tags": ["biểu giá", "nước", "2025", "thông báo"],
        "status": "published",
        "is_featured": True,
        "target_audience": "all",
    },
]

SAMPLE_PRICING = [
    {
        "code": "family",
        "name": "Gói Gia đình",
        "badge": "Phổ biến",
        "description": "Thích hợp cho hộ gia đình 3-5 người sử dụng hằng ngày.",
        "price": 65000,
        "unit": "mỗi bình 20L",
        "includes": [
            "Giao trong 2 giờ tại nội thành",
            "Cho mượn tối đa 4 vỏ miễn phí",
            "Nhắc lịch đổi bình định kỳ qua SMS",
        ],
    },
    {
        "code": "office",
        "name": "Gói Văn phòng",
        "badge": "Tiết kiệm",
        "description": "Giao định kỳ cho doanh nghiệp nhỏ và văn phòng co-working.",
        "price": 58000,
        "unit": "mỗi bình 20L",
        "includes": [
            "Tối thiểu 8 bình/tuần",
            "Miễn phí thiết lập kệ và van rót",
            "Báo cáo tiêu thụ & công nợ hàng tháng",
        ],
    },
    {
        "code": "dealer",
        "name": "Gói Đại lý",
        "badge": "Sỉ",
        "description": "Dành cho đại lý phân phối, chung cư và căng-tin trường học.",
        "price": 52000,
        "unit": "mỗi bình 20L",
        "includes": [
            "Đơn tối thiểu 30 bình/lần",
            "Ưu tiên giao sáng sớm & cuối ngày",
            "Hỗ trợ vật phẩm POS và biển hiệu",
        ],
    },
]


async def seed() -> None:
    await init_db()
    async with AsyncSessionLocal() as db:
        for model in (Bill, Report, News, PricingTier, User):
            await db.execute(delete(model))
        print("Cleared existing data")

        admin = None
        for data in SAMPLE_USERS:
            user = await UserService.create_user(db, **data)
            admin = admin or (user if user.is_admin else None)
            print(f"  Created user: {user.username} ({user.role.value})")

        for data in SAMPLE_NEWS:
            news = await NewsService.create_news(db, NewsCreate(**data), admin)
            print(f"  Created news: {news.slug}")

        for data in SAMPLE_PRICING:
            tier = await PricingService.create_tier(db, PricingTierCreate(**data))
            print(f"  Created pricing: {tier.name} ({tier.price:,}đ)")

        await db.commit()

    print("Database seeded. Sample accounts:")
    for data in SAMPLE_USERS:
        print(f"  {data['role'].value}: {data['email']} / {data['password']}")


def main():
    if settings.is_production:
        print("ERROR: refusing to seed a production database.")
        sys.exit(1)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
