"""Governance: append-only content change log. No FastAPI."""

from cms.governance.audit_logger import AuditLogger
from cms.governance.audit_models import AuditAction, AuditRecord

__all__ = [
    "AuditAction",
    "AuditLogger",
    "AuditRecord",
]
