"""URL generator protocol used to build redirect targets."""

from typing import Any, Mapping, Optional, Protocol


class UrlGenerator(Protocol):
    def generate(self, name: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Absolute path for a named route. A '#' param becomes the fragment."""
        ...
