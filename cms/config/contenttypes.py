"""Load the content-type registry from the configured JSON file."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from pydantic import TypeAdapter

from cms.config.settings import get_settings
from cms.domain.models.contenttype import ContentType, ContentTypeRegistry

logger = logging.getLogger(__name__)

_CONTENTTYPES_ADAPTER = TypeAdapter(Dict[str, Dict[str, Any]])


def load_contenttypes(path: Path) -> ContentTypeRegistry:
    """
    Parse a mapping of slug -> content-type definition.
    The mapping key is the slug unless the definition sets one explicitly.
    """
    raw = _CONTENTTYPES_ADAPTER.validate_json(Path(path).read_bytes())
    contenttypes = {}
    for slug, definition in raw.items():
        contenttype = ContentType.model_validate({"slug": slug, **definition})
        contenttypes[contenttype.slug] = contenttype
    logger.info(
        "contenttypes_loaded",
        extra={"path": str(path), "contenttypes": sorted(contenttypes)},
    )
    return ContentTypeRegistry(contenttypes)


@lru_cache
def get_contenttype_registry() -> ContentTypeRegistry:
    return load_contenttypes(get_settings().contenttypes_file)

