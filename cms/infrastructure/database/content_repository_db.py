"""DB-backed content repository. Persists records of every content type to PostgreSQL (content table)."""

from datetime import datetime, timezone
from typing import Optional

from pydantic_core import to_jsonable_python
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cms.application.exceptions import PersistenceFailureError
from cms.domain.models.content import Content, ContentStatus
from cms.infrastructure.database.models import ContentRecord


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_domain(orm: ContentRecord) -> Content:
    return Content(
        id=orm.id,
        contenttype=orm.contenttype,
        status=ContentStatus(orm.status),
        ownerid=orm.ownerid,
        slug=orm.slug,
        datecreated=_aware(orm.created_at),
        datechanged=_aware(orm.updated_at),
        datepublish=orm.datepublish,
        datedepublish=orm.datedepublish,
        values=dict(orm.values or {}),
        relation={k: list(v) for k, v in (orm.relations or {}).items()},
        taxonomy=dict(orm.taxonomy or {}),
    )


class DbContentRepository:
    """Loads and stores content records. Implements ContentRepository protocol."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find(self, contenttype: str, content_id: int) -> Optional[Content]:
        """Return the record of that content type, or None (soft-deleted rows are invisible)."""
        stmt = select(ContentRecord).where(
            ContentRecord.id == content_id,
            ContentRecord.contenttype == contenttype,
            ContentRecord.is_deleted == False,
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceFailureError(f"Loading {contenttype} {content_id} failed: {e}") from e
        orm = result.scalar_one_or_none()
        if orm is None:
            return None
        return _to_domain(orm)

    async def create(self, contenttype: str, status: ContentStatus) -> Content:
        return Content(contenttype=contenttype, status=status)

    async def save(self, content: Content) -> None:
        """Insert or update and flush; the caller commits. Copies id and change dates back onto the record."""
        now = datetime.now(timezone.utc)
        try:
            if content.id is None:
                orm = ContentRecord(contenttype=content.contenttype, created_at=now)
                self._session.add(orm)
            else:
                orm = await self._session.get(ContentRecord, content.id)
                if orm is None or orm.is_deleted:
                    raise PersistenceFailureError(
                        f"{content.contenttype} {content.id} no longer exists"
                    )
            orm.status = content.status.value
            orm.ownerid = content.ownerid
            orm.slug = content.slug
            orm.datepublish = content.datepublish
            orm.datedepublish = content.datedepublish
            orm.values = to_jsonable_python(content.values)
            orm.relations = to_jsonable_python(content.relation)
            orm.taxonomy = to_jsonable_python(content.taxonomy)
            orm.updated_at = now
            await self._session.flush()
            await self._session.refresh(orm)
        except SQLAlchemyError as e:
            raise PersistenceFailureError(f"Saving {content.contenttype} record failed: {e}") from e

        content.id = orm.id
        content.datecreated = _aware(orm.created_at)
        content.datechanged = _aware(orm.updated_at)
