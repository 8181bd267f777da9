"""Save outcomes and the JSON snapshot returned to in-place editors. No HTTP."""

import locale
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from cms.application.notifications import FlashBag
from cms.domain.models.content import Content
from cms.domain.models.contenttype import ContentType

DATE_KEYS = ("datecreated", "datechanged", "datepublish", "datedepublish")


class ReturnMode(str, Enum):
    """Caller intent posted as `returnto`."""

    NEW = "new"
    SAVE_AND_NEW = "saveandnew"
    AJAX = "ajax"
    TEST = "test"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ReturnMode"]:
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class RedirectOutcome:
    url: str


@dataclass(frozen=True)
class JsonOutcome:
    payload: Dict[str, Any]
    warnings: List[str] = field(default_factory=list)


SaveOutcome = Union[RedirectOutcome, JsonOutcome]


def resolve_decimal_point(configured: Optional[str]) -> str:
    """Configured decimal point, else the one of the active process locale."""
    if configured:
        return configured
    return locale.localeconv()["decimal_point"] or "."


def to_iso8601(value: Any) -> Any:
    """Render a datetime (or ISO string) as 'YYYY-MM-DDTHH:MM:SS+00:00'. Naive values are UTC."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    if not isinstance(value, datetime):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="seconds")


class JsonUpdateBuilder:
    """
    Builds the JSON snapshot for in-place saves.
    With flush, hook warnings are discarded and pending flash messages are cleared
    so they are not replayed on the next interactive page view.
    """

    def __init__(self, flash: FlashBag, decimal_point: str = ".") -> None:
        self._flash = flash
        self._decimal_point = decimal_point

    async def build(
        self,
        content: Content,
        contenttype: ContentType,
        flush: bool,
        warnings: Optional[List[str]] = None,
    ) -> JsonOutcome:
        payload = content.to_dict()

        for key in DATE_KEYS:
            if payload.get(key) is not None:
                payload[key] = to_iso8601(payload[key])

        # Some locales use a comma and the editor's JavaScript expects it back
        if self._decimal_point == ",":
            for name in contenttype.fields_of_type("float"):
                if payload.get(name) is not None:
                    payload[name] = str(payload[name]).replace(".", ",")

        if flush:
            await self._flash.clear()
            return JsonOutcome(payload=payload)

        for warning in warnings or []:
            await self._flash.warning(warning)
        return JsonOutcome(payload=payload, warnings=list(warnings or []))
