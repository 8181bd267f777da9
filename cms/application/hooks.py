"""Storage hooks around persistence. Hooks report side effects as warnings; they never abort a save."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, List, Sequence

from cms.domain.models.content import Content


class StorageEventName(str, Enum):
    PRE_SAVE = "pre_save"
    POST_SAVE = "post_save"


@dataclass(frozen=True)
class StorageEvent:
    name: StorageEventName
    content: Content
    created: bool


SaveHook = Callable[[StorageEvent], Awaitable[List[str]]]


async def run_hooks(
    hooks: Sequence[SaveHook],
    event: StorageEvent,
    logger: logging.Logger,
) -> List[str]:
    """Run hooks in order and collect their warnings. A failing hook becomes a warning."""
    warnings: List[str] = []
    for hook in hooks:
        hook_name = getattr(hook, "__name__", type(hook).__name__)
        try:
            warnings.extend(await hook(event) or [])
        except Exception as e:
            logger.error(
                "storage_hook_failed",
                extra={
                    "hook": hook_name,
                    "storage_event": event.name.value,
                    "contenttype": event.content.contenttype,
                    "record_id": event.content.id,
                    "error": str(e),
                },
            )
            warnings.append(f"{hook_name} failed during {event.name.value}: {e}")
    return warnings
