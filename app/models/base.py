"""Base Models and Mixins"""

import uuid
from sqlalchemy import Column, DateTime, Boolean
from sqlalchemy.dialects.postgresql import ENUM, UUID

from app.database import Base
from app.utils.time import get_utc_now


class BaseModel(Base):
    """
    Base model class with common fields for all models.

    Provides:
    - UUID primary key
    - created_at timestamp
    - updated_at timestamp
    """
    __abstract__ = True

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    created_at = Column(DateTime, default=get_utc_now, nullable=False)
    updated_at = Column(DateTime, default=get_utc_now, onupdate=get_utc_now, nullable=False)

    def to_draft(self, *fields: str) -> dict:
        """Snapshot of column values as a plain dict for the rules engine."""
        names = fields or tuple(c.key for c in self.__table__.columns)
        return {name: getattr(self, name) for name in names}


class StatusMixin:
    """
    Mixin for models with active/inactive status.

    Provides:
    - is_active boolean flag
    """
    is_active = Column(Boolean, default=True, nullable=False, index=True)


def pg_enum(enum_cls, name: str) -> ENUM:
    """PostgreSQL ENUM type that stores the enum values (not the member names)."""
    return ENUM(enum_cls, name=name, values_callable=lambda members: [m.value for m in members])
