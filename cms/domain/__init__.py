"""Domain layer: content records, content types, exceptions. Pure business logic only."""

from cms.domain.exceptions import (
    ContentTypeNotFoundError,
    DomainError,
    DomainValidationError,
)
from cms.domain.models import (
    Content,
    ContentStatus,
    ContentType,
    ContentTypeRegistry,
    FieldDefinition,
    FormKeyKind,
)

__all__ = [
    "Content",
    "ContentStatus",
    "ContentType",
    "ContentTypeNotFoundError",
    "ContentTypeRegistry",
    "DomainError",
    "DomainValidationError",
    "FieldDefinition",
    "FormKeyKind",
]
