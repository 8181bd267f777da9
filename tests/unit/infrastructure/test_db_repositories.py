"""Tests for the SQLAlchemy repositories with a mocked AsyncSession."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from cms.application.exceptions import PersistenceFailureError
from cms.domain.models.content import Content, ContentStatus
from cms.governance.audit_models import AuditAction, AuditRecord
from cms.infrastructure.database.audit_repository_db import DbAuditRepository
from cms.infrastructure.database.content_repository_db import DbContentRepository
from cms.infrastructure.database.models import ChangeLogEntry, ContentRecord
from cms.infrastructure.database.unit_of_work_db import DbUnitOfWork

NOW = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def session():
    s = MagicMock()
    s.execute = AsyncMock()
    s.get = AsyncMock()
    s.flush = AsyncMock()
    s.commit = AsyncMock()
    s.rollback = AsyncMock()
    s.refresh = AsyncMock()
    return s


def _row(**overrides) -> ContentRecord:
    row = ContentRecord(
        id=42,
        contenttype="entries",
        status="draft",
        ownerid=7,
        values={"title": "Hello"},
        relations={"pages": [1]},
        taxonomy={"tags": ["news"]},
        created_at=NOW,
        updated_at=NOW,
        is_deleted=False,
    )
    for key, value in overrides.items():
        setattr(row, key, value)
    return row


async def test_find_maps_row_to_content(session):
    result = MagicMock()
    result.scalar_one_or_none.return_value = _row()
    session.execute.return_value = result

    content = await DbContentRepository(session).find("entries", 42)

    assert content.id == 42
    assert content.status == ContentStatus.DRAFT
    assert content.values == {"title": "Hello"}
    assert content.relation == {"pages": [1]}
    assert content.datechanged == NOW


async def test_find_missing_returns_none(session):
    result = MagicMock()
    result.scalar_one_or_none.return_value = None
    session.execute.return_value = result
    assert await DbContentRepository(session).find("entries", 1) is None


async def test_find_database_error_is_persistence_failure(session):
    session.execute.side_effect = OperationalError("select", {}, Exception("down"))
    with pytest.raises(PersistenceFailureError):
        await DbContentRepository(session).find("entries", 1)


async def test_save_new_record_assigns_id(session):
    async def refresh(orm):
        orm.id = 11

    session.refresh.side_effect = refresh
    content = Content(contenttype="entries", ownerid=7, values={"title": "New"})

    await DbContentRepository(session).save(content)

    added = session.add.call_args[0][0]
    assert isinstance(added, ContentRecord)
    assert added.values == {"title": "New"}
    assert content.id == 11
    assert content.datechanged is not None
    session.flush.assert_awaited_once()
    session.commit.assert_not_awaited()


async def test_save_existing_updates_row(session):
    row = _row()
    session.get.return_value = row
    content = Content(id=42, contenttype="entries", status=ContentStatus.PUBLISHED, values={"title": "B"})

    await DbContentRepository(session).save(content)

    assert row.status == "published"
    assert row.values == {"title": "B"}
    session.add.assert_not_called()


async def test_save_deleted_row_fails(session):
    session.get.return_value = _row(is_deleted=True)
    with pytest.raises(PersistenceFailureError):
        await DbContentRepository(session).save(Content(id=42, contenttype="entries"))


async def test_save_flush_error_is_persistence_failure(session):
    session.get.return_value = _row()
    session.flush.side_effect = OperationalError("update", {}, Exception("down"))

    with pytest.raises(PersistenceFailureError):
        await DbContentRepository(session).save(Content(id=42, contenttype="entries"))
    session.commit.assert_not_awaited()


async def test_change_log_row_is_inserted(session):
    record = AuditRecord(
        action=AuditAction.UPDATE,
        contenttype="entries",
        record_id=42,
        new={"title": "B", "datechanged": NOW},
        old={"title": "A"},
        comment="fix",
        actor=7,
        correlation_id="c-1",
        timestamp_utc=NOW,
    )

    await DbAuditRepository(session).save(record)

    row = session.add.call_args[0][0]
    assert isinstance(row, ChangeLogEntry)
    assert row.action == "Update"
    assert row.new == {"title": "B", "datechanged": "2024-05-01T12:30:00Z"}
    assert row.old == {"title": "A"}
    session.flush.assert_awaited_once()
    session.commit.assert_not_awaited()


async def test_unit_of_work_commits_session(session):
    await DbUnitOfWork(session).commit()
    session.commit.assert_awaited_once()


async def test_unit_of_work_commit_error_rolls_back(session):
    session.commit.side_effect = OperationalError("commit", {}, Exception("down"))

    with pytest.raises(PersistenceFailureError):
        await DbUnitOfWork(session).commit()
    session.rollback.assert_awaited_once()
