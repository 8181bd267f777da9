"""Audit repository protocol. Governance layer depends on this; infrastructure implements it."""

from typing import Protocol

from cms.governance.audit_models import AuditRecord


class AuditRepository(Protocol):
    """Protocol for persisting immutable change-log records."""

    async def save(self, record: AuditRecord) -> None:
        """Append an immutable change-log record. Must not allow mutation."""
        ...
