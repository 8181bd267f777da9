"""Shared fixtures: content types, in-memory repositories, in-memory Redis, users."""

import copy
from datetime import datetime, timezone
from typing import Optional

import pytest

from cms.domain.models.content import Content, ContentStatus
from cms.domain.models.contenttype import ContentType, ContentTypeRegistry
from cms.security.users import Role, User


def _contenttypes() -> ContentTypeRegistry:
    entries = ContentType.model_validate(
        {
            "slug": "entries",
            "name": "Entries",
            "singular_name": "Entry",
            "default_status": "draft",
            "fields": {
                "title": {"type": "text"},
                "body": {"type": "html"},
                "featured": {"type": "checkbox"},
                "rating": {"type": "float"},
                "audience": {"type": "select", "multiple": True},
                "category": {"type": "select"},
            },
            "relations": {"pages": {"multiple": True}},
            "taxonomy": ["tags", "categories"],
        }
    )
    pages = ContentType.model_validate(
        {
            "slug": "pages",
            "name": "Pages",
            "singular_name": "Page",
            "default_status": "published",
            "fields": {"title": {"type": "text"}, "body": {"type": "html"}},
            "permissions": {"change-ownership": ["admin"]},
        }
    )
    return ContentTypeRegistry({"entries": entries, "pages": pages})


class InMemoryContentRepository:
    """ContentRepository keeping deep copies, so callers cannot mutate stored state."""

    def __init__(self) -> None:
        self.records: dict[tuple[str, int], Content] = {}
        self.save_calls = 0
        self._next_id = 1

    def add(self, content: Content) -> Content:
        if content.id is None:
            content.id = self._next_id
        self._next_id = max(self._next_id, content.id + 1)
        self.records[(content.contenttype, content.id)] = copy.deepcopy(content)
        return content

    def stored(self, contenttype: str, content_id: int) -> Content:
        return self.records[(contenttype, content_id)]

    async def find(self, contenttype: str, content_id: int) -> Optional[Content]:
        content = self.records.get((contenttype, content_id))
        return copy.deepcopy(content) if content is not None else None

    async def create(self, contenttype: str, status: ContentStatus) -> Content:
        return Content(contenttype=contenttype, status=status)

    async def save(self, content: Content) -> None:
        self.save_calls += 1
        now = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        if content.id is None:
            content.id = self._next_id
            content.datecreated = now
        content.datechanged = now
        self.add(content)


class InMemoryAuditRepository:
    def __init__(self) -> None:
        self.records = []

    async def save(self, record) -> None:
        self.records.append(record)


class InMemoryUnitOfWork:
    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


class FakeRedis:
    """In-memory Redis for unit tests (list operations used by the flash bag)."""

    def __init__(self):
        self._lists: dict[str, list[str]] = {}

    async def push(self, key: str, value: str, ttl: int) -> None:
        self._lists.setdefault(key, []).append(value)

    async def pop_all(self, key: str) -> list[str]:
        return self._lists.pop(key, [])

    async def delete_key(self, key: str) -> None:
        self._lists.pop(key, None)

    def peek(self, key: str) -> list[str]:
        return list(self._lists.get(key, []))


@pytest.fixture
def contenttypes():
    return _contenttypes()


@pytest.fixture
def entries(contenttypes):
    return contenttypes.get("entries")


@pytest.fixture
def content_repository():
    return InMemoryContentRepository()


@pytest.fixture
def audit_repository():
    return InMemoryAuditRepository()


@pytest.fixture
def unit_of_work():
    return InMemoryUnitOfWork()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def editor():
    return User(id=7, username="editor", roles=frozenset({Role.EDITOR}))


@pytest.fixture
def author():
    return User(id=8, username="author", roles=frozenset({Role.AUTHOR}))


@pytest.fixture
def chief_editor():
    return User(id=9, username="chief", roles=frozenset({Role.CHIEF_EDITOR}))
