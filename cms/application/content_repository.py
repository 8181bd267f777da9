"""Content repository protocol. Application layer depends on this; infrastructure implements it."""

from typing import Optional, Protocol

from cms.domain.models.content import Content, ContentStatus


class ContentRepository(Protocol):
    """Protocol for loading and persisting content records of any content type."""

    async def find(self, contenttype: str, content_id: int) -> Optional[Content]:
        """Return the record, or None if it does not exist."""
        ...

    async def create(self, contenttype: str, status: ContentStatus) -> Content:
        """Return a new, unsaved record (id is None) with the given status."""
        ...

    async def save(self, content: Content) -> None:
        """Stage an insert or update; assigns id and change dates. Durable once the unit of work commits.
        Raises PersistenceFailureError."""
        ...
