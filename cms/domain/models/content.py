"""Domain model for content records. Pure business semantics: no ORM or infrastructure."""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional


class ContentStatus(str, Enum):
    """Publication status of a content record."""

    DRAFT = "draft"
    HELD = "held"
    TIMED = "timed"
    PUBLISHED = "published"

    @classmethod
    def values(cls) -> frozenset:
        return frozenset(s.value for s in cls)


# Record attributes that live outside the field mapping.
CORE_ATTRIBUTES = frozenset({"status", "slug", "datepublish", "datedepublish"})


@dataclass
class Content:
    """
    A single record of a content type.
    `id` is assigned by the repository on first save and never reassigned here.
    """

    contenttype: str
    status: ContentStatus = ContentStatus.DRAFT
    id: Optional[int] = None
    ownerid: Optional[int] = None
    slug: Optional[str] = None
    datecreated: Optional[datetime] = None
    datechanged: Optional[datetime] = None
    datepublish: Optional[Any] = None
    datedepublish: Optional[Any] = None
    values: Dict[str, Any] = field(default_factory=dict)
    relation: Dict[str, List[int]] = field(default_factory=dict)
    taxonomy: Dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        title = self.values.get("title")
        if title:
            return str(title)
        for value in self.values.values():
            if isinstance(value, str) and value.strip():
                return value
        return ""

    def set(self, name: str, value: Any) -> None:
        """Set a core attribute or a field value."""
        if name == "status":
            self.status = ContentStatus(value) if value is not None else ContentStatus.DRAFT
        elif name in CORE_ATTRIBUTES:
            setattr(self, name, value)
        else:
            self.values[name] = value

    def to_dict(self) -> Dict[str, Any]:
        """Full snapshot of the record. Deep-copied so callers cannot mutate the record."""
        data: Dict[str, Any] = {
            "id": self.id,
            "contenttype": self.contenttype,
            "status": self.status.value,
            "ownerid": self.ownerid,
            "slug": self.slug,
            "datecreated": self.datecreated,
            "datechanged": self.datechanged,
            "datepublish": self.datepublish,
            "datedepublish": self.datedepublish,
        }
        for name, value in self.values.items():
            data.setdefault(name, value)
        data["relation"] = self.relation
        data["taxonomy"] = self.taxonomy
        return copy.deepcopy(data)

    def snapshot(self) -> Mapping[str, Any]:
        """Read-only snapshot of the current state."""
        return MappingProxyType(self.to_dict())
