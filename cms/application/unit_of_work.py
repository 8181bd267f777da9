"""Unit-of-work protocol: the record and its change-log entry are committed together."""

from typing import Protocol


class UnitOfWork(Protocol):
    """Transaction boundary shared by the content and change-log repositories."""

    async def commit(self) -> None:
        """Make every staged write durable. Raises PersistenceFailureError."""
        ...

    async def rollback(self) -> None:
        """Discard every staged write."""
        ...
