"""DB-backed change-log repository. Appends rows to the content_changelog table."""

from pydantic_core import to_jsonable_python
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cms.application.exceptions import PersistenceFailureError
from cms.governance.audit_models import AuditRecord
from cms.infrastructure.database.models import ChangeLogEntry


class DbAuditRepository:
    """Implements AuditRepository protocol. Insert only; rows are never updated. Flushes; the caller commits."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, record: AuditRecord) -> None:
        orm = ChangeLogEntry(
            action=record.action.value,
            contenttype=record.contenttype,
            content_id=record.record_id,
            new=to_jsonable_python(dict(record.new)),
            old=to_jsonable_python(dict(record.old)) if record.old is not None else None,
            comment=record.comment,
            actor=record.actor,
            correlation_id=record.correlation_id,
            created_at=record.timestamp_utc,
        )
        self._session.add(orm)
        try:
            await self._session.flush()
        except SQLAlchemyError as e:
            raise PersistenceFailureError(f"Writing change log failed: {e}") from e
