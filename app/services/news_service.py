"""News Service - Business Logic Layer"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.attributes import set_committed_value

from app.core.exceptions import ConflictError
from app.core.logging import get_logger
from app.domain.news import prepare_news_for_create, prepare_news_for_update
from app.models.enums import NewsCategory, NewsStatus
from app.models.news import News
from app.models.user import User
from app.schemas.news import NewsCreate, NewsUpdate
from app.services.persistence import add_unique, is_unique_violation
from app.utils.time import get_utc_now


logger = get_logger(__name__)

NON_NULLABLE = frozenset({
    "title", "summary", "content", "category", "tags", "status",
    "is_featured", "is_pinned", "target_audience", "priority", "seo",
})
COUNTERS = ("view_count", "like_count", "share_count")


def published_conditions(now: datetime) -> list:
    """SQL form of the effectively-published predicate."""
    return [
        News.status == NewsStatus.PUBLISHED,
        News.published_at.is_not(None),
        News.published_at <= now,
        or_(News.expires_at.is_(None), News.expires_at > now),
    ]


def _search(term: str):
    pattern = f"%{term}%"
    return or_(News.title.ilike(pattern), News.summary.ilike(pattern), News.content.ilike(pattern))


class NewsService:
    """Service layer for news articles and announcements"""

    @staticmethod
    async def _page(db: AsyncSession, conditions: list, order_by: tuple, skip: int, limit: int) -> Tuple[List[News], int]:
        total = await db.scalar(select(func.count(News.id)).where(*conditions))
        result = await db.execute(
            select(News)
            .options(selectinload(News.author))
            .where(*conditions)
            .order_by(*order_by)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    @staticmethod
    async def list_published(
        db: AsyncSession,
        skip: int = 0,
        limit: int = 10,
        category: Optional[NewsCategory] = None,
        featured: Optional[bool] = None,
        search: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[List[News], int]:
        """Effectively published articles; pinned, then featured, then newest."""
        conditions = published_conditions(now or get_utc_now())
        if category:
            conditions.append(News.category == category)
        if featured is not None:
            conditions.append(News.is_featured == featured)
        if search:
            conditions.append(_search(search))
        order = (News.is_pinned.desc(), News.is_featured.desc(), News.published_at.desc())
        return await NewsService._page(db, conditions, order, skip, limit)

    @staticmethod
    async def list_all(
        db: AsyncSession,
        skip: int = 0,
        limit: int = 10,
        status: Optional[NewsStatus] = None,
        category: Optional[NewsCategory] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[News], int]:
        conditions = []
        if status:
            conditions.append(News.status == status)
        if category:
            conditions.append(News.category == category)
        if search:
            conditions.append(_search(search))
        return await NewsService._page(db, conditions, (News.created_at.desc(),), skip, limit)

    @staticmethod
    async def get_news_by_id(db: AsyncSession, news_id: UUID) -> Optional[News]:
        result = await db.execute(
            select(News).options(selectinload(News.author)).where(News.id == news_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_published_by_slug(db: AsyncSession, slug: str, now: Optional[datetime] = None) -> Optional[News]:
        result = await db.execute(
            select(News)
            .options(selectinload(News.author))
            .where(News.slug == slug, *published_conditions(now or get_utc_now()))
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def increment(db: AsyncSession, news_id: UUID, counter: str) -> Optional[int]:
        """Atomically add one to a counter; returns the new value or None if missing."""
        if counter not in COUNTERS:
            raise ValueError(f"Unknown counter: {counter}")
        column = getattr(News, counter)
        result = await db.execute(
            update(News)
            .where(News.id == news_id)
            .values({counter: column + 1})
            .returning(column)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def view(db: AsyncSession, news: News) -> News:
        count = await NewsService.increment(db, news.id, "view_count")
        if count is not None:
            set_committed_value(news, "view_count", count)
        return news

    @staticmethod
    async def create_news(db: AsyncSession, data: NewsCreate, author: User) -> News:
        draft = data.model_dump()
        draft["author_id"] = author.id
        prepare_news_for_create(draft, now=get_utc_now())

        news = await add_unique(db, News(**draft), fields=("slug",), entity="News")
        await db.refresh(news, ["author"])
        logger.info(
            "News created",
            extra={"news_id": str(news.id), "slug": news.slug, "status": news.status.value},
        )
        return news

    @staticmethod
    async def update_news(db: AsyncSession, news: News, data: NewsUpdate) -> News:
        changes = data.model_dump(exclude_unset=True)
        changes = {k: v for k, v in changes.items() if v is not None or k not in NON_NULLABLE}
        update_values = prepare_news_for_update(news.to_draft(), changes, now=get_utc_now())
        previous_status = news.status
        for field, value in update_values.items():
            setattr(news, field, value)

        if update_values:
            try:
                async with db.begin_nested():
                    await db.flush()
            except IntegrityError as exc:
                if is_unique_violation(exc, "slug"):
                    raise ConflictError("News with this slug already exists", field="slug") from exc
                raise
            await db.refresh(news)
            await db.refresh(news, ["author"])

        if news.status != previous_status:
            logger.info(
                "News status changed",
                extra={"news_id": str(news.id), "from": previous_status.value, "to": news.status.value},
            )
        return news

    @staticmethod
    async def add_images(
        db: AsyncSession,
        news: News,
        featured_image: Optional[Dict[str, Any]],
        images: List[Dict[str, Any]],
    ) -> News:
        if featured_image:
            news.featured_image = featured_image
        if images:
            news.images = [*(news.images or []), *images]
        await db.flush()
        await db.refresh(news)
        await db.refresh(news, ["author"])
        return news

    @staticmethod
    async def delete_news(db: AsyncSession, news_id: UUID) -> bool:
        news = await NewsService.get_news_by_id(db, news_id)
        if not news:
            return False
        await db.delete(news)
        await db.flush()
        logger.info("News deleted", extra={"news_id": str(news_id)})
        return True
