"""Content-type descriptors: static configuration of fields, relations and taxonomies."""

from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from cms.domain.exceptions import ContentTypeNotFoundError
from cms.domain.models.content import CORE_ATTRIBUTES, ContentStatus


class FormKeyKind(str, Enum):
    """How a posted form key is applied to a record."""

    FIELD = "field"
    CORE = "core"
    OWNERSHIP = "ownership"
    RELATION = "relation"
    TAXONOMY = "taxonomy"
    TRANSPORT = "transport"


# Keys posted by the edit form that never reach the record.
TRANSPORT_KEYS = frozenset(
    {"contenttype", "id", "changelog-comment", "returnto", "editreferrer", "_token"}
)
RELATION_KEY = "relation"
TAXONOMY_KEY = "taxonomy"
OWNER_KEY = "ownerid"


class FieldDefinition(BaseModel):
    """Field schema entry: type plus type-specific options."""

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str
    multiple: bool = False
    label: Optional[str] = None


class ContentType(BaseModel):
    """
    Content-type descriptor. Immutable once loaded.
    `form_schema` classifies every form key the type understands and is built once.
    """

    model_config = ConfigDict(frozen=True)

    slug: str = Field(..., min_length=1)
    name: str
    singular_name: str
    fields: Dict[str, FieldDefinition] = Field(default_factory=dict)
    default_status: ContentStatus = ContentStatus.DRAFT
    relations: Dict[str, dict] = Field(default_factory=dict)
    taxonomy: List[str] = Field(default_factory=list)
    permissions: Dict[str, List[str]] = Field(default_factory=dict)

    _form_schema: Dict[str, FormKeyKind] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        schema: Dict[str, FormKeyKind] = {key: FormKeyKind.TRANSPORT for key in TRANSPORT_KEYS}
        schema.update({key: FormKeyKind.CORE for key in CORE_ATTRIBUTES})
        schema[OWNER_KEY] = FormKeyKind.OWNERSHIP
        if self.relations:
            schema[RELATION_KEY] = FormKeyKind.RELATION
        if self.taxonomy:
            schema[TAXONOMY_KEY] = FormKeyKind.TAXONOMY
        for name in self.fields:
            schema.setdefault(name, FormKeyKind.FIELD)
        self._form_schema = schema

    @property
    def form_schema(self) -> Mapping[str, FormKeyKind]:
        return dict(self._form_schema)

    def kind_of(self, key: str) -> Optional[FormKeyKind]:
        """Kind of a posted key, or None when the type does not know it."""
        return self._form_schema.get(key)

    def fields_of_type(self, field_type: str) -> List[str]:
        return [name for name, definition in self.fields.items() if definition.type == field_type]


class ContentTypeRegistry:
    """Lookup of configured content types by slug."""

    def __init__(self, contenttypes: Mapping[str, ContentType]) -> None:
        self._contenttypes = dict(contenttypes)

    def get(self, slug: str) -> ContentType:
        """Return the content type or raise ContentTypeNotFoundError."""
        try:
            return self._contenttypes[slug]
        except KeyError:
            raise ContentTypeNotFoundError(f"Content type '{slug}' is not configured") from None

    def __contains__(self, slug: object) -> bool:
        return slug in self._contenttypes

    def __iter__(self) -> Iterator[ContentType]:
        return iter(self._contenttypes.values())
