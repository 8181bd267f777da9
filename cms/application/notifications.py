"""Flash notification protocol: user-facing messages replayed on the next page view."""

from typing import Dict, List, Protocol


class FlashBag(Protocol):
    async def success(self, message: str) -> None:
        ...

    async def error(self, message: str) -> None:
        ...

    async def warning(self, message: str) -> None:
        ...

    async def clear(self) -> None:
        """Drop every pending message."""
        ...

    async def pop_all(self) -> List[Dict[str, str]]:
        """Return and drop pending messages, oldest first."""
        ...
