"""Append-only change log for content saves. No FastAPI."""

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from cms.core.context import correlation_id_ctx
from cms.governance.audit_models import AuditAction, AuditRecord
from cms.governance.audit_repository import AuditRepository

logger = logging.getLogger(__name__)


class AuditLogger:
    """
    Writes one immutable change-log record per save via repository.
    Action is Insert when there is no prior snapshot, Update otherwise.
    """

    def __init__(self, repository: AuditRepository) -> None:
        self._repository = repository

    async def log_change(
        self,
        *,
        contenttype: str,
        record_id: Optional[int],
        new: Mapping[str, Any],
        old: Optional[Mapping[str, Any]],
        comment: str,
        actor: Optional[int],
    ) -> AuditRecord:
        """Write immutable change-log record. Timestamp is UTC."""
        action = AuditAction.UPDATE if old is not None else AuditAction.INSERT
        record = AuditRecord(
            action=action,
            contenttype=contenttype,
            record_id=record_id,
            new=new,
            old=old,
            comment=comment,
            actor=actor,
            correlation_id=correlation_id_ctx.get(),
            timestamp_utc=datetime.now(timezone.utc),
        )
        await self._repository.save(record)
        logger.info(
            f"{action.value} record",
            extra={
                "action": action.value.upper(),
                "contenttype": contenttype,
                "record_id": record_id,
                "comment": comment,
            },
        )
        return record
