"""Named-route URL generation for redirect targets."""

import re
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote, urlencode

# '{name?}' marks an optional trailing placeholder.
BACKEND_ROUTES: Dict[str, str] = {
    "dashboard": "/",
    "overview": "/overview/{contenttypeslug}",
    "editcontent": "/editcontent/{contenttypeslug}/{id?}",
}

_PLACEHOLDER = re.compile(r"^\{(\w+)(\??)\}$")


class RouteNotFoundError(Exception):
    """Raised when a route is unknown or a mandatory parameter is missing."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RouteUrlGenerator:
    """Implements UrlGenerator over a static route table under a path prefix."""

    def __init__(self, prefix: str = "", routes: Optional[Mapping[str, str]] = None) -> None:
        self._prefix = prefix.rstrip("/")
        self._routes = dict(routes if routes is not None else BACKEND_ROUTES)

    def generate(self, name: str, params: Optional[Mapping[str, Any]] = None) -> str:
        try:
            template = self._routes[name]
        except KeyError:
            raise RouteNotFoundError(f"Route '{name}' does not exist") from None

        params = {k: v for k, v in (params or {}).items() if v is not None}
        fragment = params.pop("#", None)

        segments = [s for s in template.split("/") if s]
        path_parts = []
        for index, segment in enumerate(segments):
            match = _PLACEHOLDER.match(segment)
            if not match:
                path_parts.append(segment)
                continue
            placeholder, optional = match.group(1), match.group(2)
            if placeholder in params:
                path_parts.append(quote(str(params.pop(placeholder)), safe=""))
            elif optional and all(_PLACEHOLDER.match(s) for s in segments[index:]):
                break
            else:
                raise RouteNotFoundError(
                    f"Route '{name}' requires parameter '{placeholder}'"
                )

        url = f"{self._prefix}/{'/'.join(path_parts)}"
        if params:
            url = f"{url}?{urlencode(params, doseq=True)}"
        if fragment:
            url = f"{url}#{quote(str(fragment), safe='')}"
        return url
