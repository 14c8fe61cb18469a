"""News & Announcements Model"""

from sqlalchemy import Column, String, Text, DateTime, Boolean, Integer, ForeignKey
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, pg_enum
from app.models.enums import NewsCategory, NewsStatus, TargetAudience, NewsPriority


class News(BaseModel):
    """
    Public news article. Visible to readers only while effectively
    published (see app.domain.news.is_effectively_published).
    """
    __tablename__ = "news"

    title = Column(String(200), nullable=False)
    slug = Column(String(250), unique=True, nullable=False, index=True)
    summary = Column(String(500), nullable=False)
    content = Column(Text, nullable=False)
    author_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)

    category = Column(pg_enum(NewsCategory, "news_category"), nullable=False, index=True)
    tags = Column(JSONB, nullable=False, default=list)
    featured_image = Column(JSONB, nullable=True)
    images = Column(JSONB, nullable=False, default=list)
    attachments = Column(JSONB, nullable=False, default=list)
    seo = Column(JSONB, nullable=False, default=dict)

    status = Column(pg_enum(NewsStatus, "news_status"), default=NewsStatus.DRAFT, nullable=False, index=True)
    is_featured = Column(Boolean, default=False, nullable=False)
    is_pinned = Column(Boolean, default=False, nullable=False)
    published_at = Column(DateTime, nullable=True, index=True)
    expires_at = Column(DateTime, nullable=True)

    view_count = Column(Integer, default=0, nullable=False)
    like_count = Column(Integer, default=0, nullable=False)
    share_count = Column(Integer, default=0, nullable=False)

    target_audience = Column(pg_enum(TargetAudience, "target_audience"), default=TargetAudience.ALL, nullable=False)
    priority = Column(pg_enum(NewsPriority, "news_priority"), default=NewsPriority.NORMAL, nullable=False)

    # Relationships
    author = relationship("User", back_populates="authored_news")

    def __repr__(self) -> str:
        return f"<News {self.slug} ({self.status})>"
