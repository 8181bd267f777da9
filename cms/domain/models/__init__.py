from cms.domain.models.content import Content, ContentStatus
from cms.domain.models.contenttype import (
    ContentType,
    ContentTypeRegistry,
    FieldDefinition,
    FormKeyKind,
)

__all__ = [
    "Content",
    "ContentStatus",
    "ContentType",
    "ContentTypeRegistry",
    "FieldDefinition",
    "FormKeyKind",
]
