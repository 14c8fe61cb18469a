"""News & Announcement Endpoints"""

from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, require_admin
from app.config import settings
from app.models.enums import NewsCategory, NewsStatus
from app.models.news import News
from app.models.user import User
from app.schemas.news import LikeResponse, NewsCreate, NewsResponse, NewsSummary, NewsUpdate, ShareResponse
from app.schemas.responses import PaginatedResponse, PaginationMeta, SuccessResponse
from app.services import storage_service
from app.services.news_service import NewsService

router = APIRouter()


async def _get_news_or_404(db: AsyncSession, news_id: UUID) -> News:
    news = await NewsService.get_news_by_id(db, news_id)
    if not news:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News not found")
    return news


@router.get("", response_model=PaginatedResponse[NewsSummary])
async def list_news(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    category: Optional[NewsCategory] = Query(None),
    featured: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    """
    Public feed of effectively published articles, pinned and featured first.
    """
    items, total = await NewsService.list_published(
        db,
        skip=(page - 1) * page_size,
        limit=page_size,
        category=category,
        featured=featured,
        search=search,
    )
    return PaginatedResponse(
        data=[NewsSummary.model_validate(n) for n in items],
        meta=PaginationMeta.build(page, page_size, total),
    )


@router.get("/admin/all", response_model=PaginatedResponse[NewsSummary])
async def list_all_news(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    status_filter: Optional[NewsStatus] = Query(None, alias="status"),
    category: Optional[NewsCategory] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    items, total = await NewsService.list_all(
        db,
        skip=(page - 1) * page_size,
        limit=page_size,
        status=status_filter,
        category=category,
        search=search,
    )
    return PaginatedResponse(
        data=[NewsSummary.model_validate(n) for n in items],
        meta=PaginationMeta.build(page, page_size, total),
    )


@router.get("/{slug}", response_model=SuccessResponse[NewsResponse])
async def get_news(
    slug: str,
    db: AsyncSession = Depends(get_db),
):
    """
    Single published article by slug. Each read counts as a view.
    """
    news = await NewsService.get_published_by_slug(db, slug)
    if not news:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News not found")
    news = await NewsService.view(db, news)
    return SuccessResponse(data=NewsResponse.model_validate(news))


@router.post("", response_model=SuccessResponse[NewsResponse], status_code=status.HTTP_201_CREATED)
async def create_news(
    news_in: NewsCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    news = await NewsService.create_news(db, news_in, current_user)
    return SuccessResponse(data=NewsResponse.model_validate(news), message="News created successfully")


@router.post("/{news_id}/images", response_model=SuccessResponse[NewsResponse])
async def upload_images(
    news_id: UUID,
    featured_image: Optional[UploadFile] = File(None),
    images: Optional[List[UploadFile]] = File(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    Upload the featured image and/or gallery images (up to MAX_NEWS_IMAGES).
    """
    news = await _get_news_or_404(db, news_id)
    images = images or []
    if not featured_image and not images:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No files uploaded")
    if len(news.images or []) + len(images) > settings.MAX_NEWS_IMAGES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"An article can have at most {settings.MAX_NEWS_IMAGES} images",
        )

    to_upload = [featured_image] if featured_image else []
    to_upload.extend(images)
    payloads = await storage_service.read_validated(to_upload, storage_service.IMAGE_TYPES)
    try:
        records = await storage_service.upload_payloads(f"news/{news.id}", payloads)
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    featured = records.pop(0) if featured_image else None
    news = await NewsService.add_images(db, news, featured, records)
    return SuccessResponse(data=NewsResponse.model_validate(news), message="Images uploaded")


@router.put("/{news_id}", response_model=SuccessResponse[NewsResponse])
async def update_news(
    news_id: UUID,
    news_in: NewsUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    news = await _get_news_or_404(db, news_id)
    news = await NewsService.update_news(db, news, news_in)
    return SuccessResponse(data=NewsResponse.model_validate(news), message="News updated successfully")


@router.delete("/{news_id}", response_model=SuccessResponse)
async def delete_news(
    news_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    if not await NewsService.delete_news(db, news_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News not found")
    return SuccessResponse(message="News deleted successfully")


@router.post("/{news_id}/like", response_model=SuccessResponse[LikeResponse])
async def like_news(news_id: UUID, db: AsyncSession = Depends(get_db)):
    count = await NewsService.increment(db, news_id, "like_count")
    if count is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News not found")
    return SuccessResponse(data=LikeResponse(like_count=count))


@router.post("/{news_id}/share", response_model=SuccessResponse[ShareResponse])
async def share_news(news_id: UUID, db: AsyncSession = Depends(get_db)):
    count = await NewsService.increment(db, news_id, "share_count")
    if count is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News not found")
    return SuccessResponse(data=ShareResponse(share_count=count))
