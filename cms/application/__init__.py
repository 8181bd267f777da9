# Application layer: services that orchestrate domain, security, governance and infrastructure.

from cms.application.content_repository import ContentRepository
from cms.application.exceptions import (
    ApplicationError,
    ContentNotFoundError,
    PersistenceFailureError,
)
from cms.application.posted_values import PostedValues
from cms.application.responses import (
    JsonOutcome,
    JsonUpdateBuilder,
    RedirectOutcome,
    ReturnMode,
    SaveOutcome,
)
from cms.application.save_service import ContentSaveService
from cms.application.unit_of_work import UnitOfWork

__all__ = [
    "ApplicationError",
    "ContentNotFoundError",
    "ContentRepository",
    "ContentSaveService",
    "JsonOutcome",
    "JsonUpdateBuilder",
    "PersistenceFailureError",
    "PostedValues",
    "RedirectOutcome",
    "ReturnMode",
    "SaveOutcome",
    "UnitOfWork",
]
