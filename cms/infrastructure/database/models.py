# cms/infrastructure/database/models.py

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from cms.infrastructure.database.session import Base


class BaseModel(Base):
    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    is_deleted = Column(Boolean, default=False)


class ContentRecord(BaseModel):
    """ORM model for content records of every content type."""

    __tablename__ = "content"

    contenttype = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default="draft")
    ownerid = Column(Integer, nullable=True, index=True)
    slug = Column(String, nullable=True)
    datepublish = Column(String, nullable=True)
    datedepublish = Column(String, nullable=True)
    values = Column(JSONB, nullable=False, default=dict)
    relations = Column(JSONB, nullable=False, default=dict)
    taxonomy = Column(JSONB, nullable=False, default=dict)


class ChangeLogEntry(BaseModel):
    """Append-only change log: one row per content save."""

    __tablename__ = "content_changelog"

    action = Column(String, nullable=False)
    contenttype = Column(String, nullable=False, index=True)
    content_id = Column(Integer, nullable=True, index=True)
    new = Column(JSONB, nullable=False)
    old = Column(JSONB, nullable=True)
    comment = Column(Text, nullable=False, default="")
    actor = Column(Integer, nullable=True)
    correlation_id = Column(String, nullable=True)
