from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from uuid import UUID
from datetime import datetime

from app.domain.news import is_effectively_published, is_expired, reading_time
from app.models.enums import NewsCategory, NewsStatus, TargetAudience, NewsPriority
from app.schemas.common import UserBrief, UtcDatetime

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class NewsCreate(BaseModel):
    title: str = Field(..., min_length=5, max_length=200)
    slug: Optional[str] = Field(None, max_length=250, pattern=SLUG_PATTERN)
    summary: str = Field(..., min_length=10, max_length=500)
    content: str = Field(..., min_length=50)
    category: NewsCategory
    tags: List[str] = []
    status: NewsStatus = NewsStatus.DRAFT
    is_featured: bool = False
    is_pinned: bool = False
    published_at: Optional[UtcDatetime] = None
    expires_at: Optional[UtcDatetime] = None
    target_audience: TargetAudience = TargetAudience.ALL
    priority: NewsPriority = NewsPriority.NORMAL
    seo: Dict[str, Any] = {}

    @field_validator("status")
    @classmethod
    def not_archived(cls, v: NewsStatus) -> NewsStatus:
        if v == NewsStatus.ARCHIVED:
            raise ValueError("New articles must be draft or published")
        return v


class NewsUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=5, max_length=200)
    slug: Optional[str] = Field(None, max_length=250, pattern=SLUG_PATTERN)
    summary: Optional[str] = Field(None, min_length=10, max_length=500)
    content: Optional[str] = Field(None, min_length=50)
    category: Optional[NewsCategory] = None
    tags: Optional[List[str]] = None
    status: Optional[NewsStatus] = None
    is_featured: Optional[bool] = None
    is_pinned: Optional[bool] = None
    published_at: Optional[UtcDatetime] = None
    expires_at: Optional[UtcDatetime] = None
    target_audience: Optional[TargetAudience] = None
    priority: Optional[NewsPriority] = None
    seo: Optional[Dict[str, Any]] = None


class NewsSummary(BaseModel):
    """List item; content is left out"""
    id: UUID
    title: str
    slug: str
    summary: str
    category: NewsCategory
    tags: List[str] = []
    featured_image: Optional[Dict[str, Any]] = None
    status: NewsStatus
    is_featured: bool
    is_pinned: bool
    published_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    view_count: int
    like_count: int
    share_count: int
    target_audience: TargetAudience
    priority: NewsPriority
    author: Optional[UserBrief] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def is_expired(self) -> bool:
        return is_expired(self.expires_at)

    @computed_field
    @property
    def is_published(self) -> bool:
        return is_effectively_published(self.status, self.published_at, self.expires_at)


class NewsResponse(NewsSummary):
    content: str
    images: List[Dict[str, Any]] = []
    attachments: List[Dict[str, Any]] = []
    seo: Dict[str, Any] = {}
    updated_at: datetime

    @computed_field
    @property
    def reading_time(self) -> int:
        return reading_time(self.content)


class LikeResponse(BaseModel):
    like_count: int


class ShareResponse(BaseModel):
    share_count: int
