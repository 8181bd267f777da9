"""Immutable change-log record model. Domain-level immutability."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class AuditAction(str, Enum):
    INSERT = "Insert"
    UPDATE = "Update"


@dataclass(frozen=True)
class AuditRecord:
    """
    Immutable change-log entry: what changed (new/old snapshots), who, when (UTC), why, correlation_id.
    """

    action: AuditAction
    contenttype: str
    record_id: Optional[int]
    new: Mapping[str, Any]
    old: Optional[Mapping[str, Any]]
    comment: str
    actor: Optional[int]
    correlation_id: Optional[str]
    timestamp_utc: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for JSON logging."""
        return {
            "action": self.action.value,
            "contenttype": self.contenttype,
            "record_id": self.record_id,
            "new": dict(self.new),
            "old": dict(self.old) if self.old is not None else None,
            "comment": self.comment,
            "actor": self.actor,
            "correlation_id": self.correlation_id,
            "timestamp_utc": self.timestamp_utc.isoformat(),
        }
