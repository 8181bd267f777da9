"""Apply a POSTed edit form to a content record: sanitation, ownership, status fallback, field dispatch."""

import logging
from typing import Any, Dict, List, Mapping, Optional

from cms.application.content_repository import ContentRepository
from cms.domain.exceptions import DomainValidationError
from cms.domain.models.content import Content, ContentStatus
from cms.domain.models.contenttype import (
    OWNER_KEY,
    ContentType,
    ContentTypeRegistry,
    FormKeyKind,
)
from cms.security.exceptions import AccessControlError
from cms.security.permissions import PermissionService
from cms.security.users import User

logger = logging.getLogger(__name__)

_NBSP = "\u00a0"


def set_successful_control_values(
    form_values: Mapping[str, Any],
    contenttype: ContentType,
) -> Dict[str, Any]:
    """
    Add the values browsers never send and normalise decimals.
    Unchecked checkboxes and empty multi-selects are not successful controls
    (HTML 4.01, 17.13.2), so an absent key means "off" / "nothing selected".
    """
    values = dict(form_values)
    for name, definition in contenttype.fields.items():
        if values.get(name) is not None:
            if definition.type == "float":
                # ',' and '.' are both accepted as decimal point; '.' is stored
                values[name] = _replace_in(values[name], ",", ".")
        elif definition.type == "select" and definition.multiple:
            values[name] = []
        elif definition.type == "checkbox":
            values[name] = 0
    return values


def clean_posted_data(value: Any) -> Any:
    """Recursively normalise posted strings: no NUL bytes, LF line endings, no tabs, plain spaces."""
    if isinstance(value, dict):
        return {key: clean_posted_data(item) for key, item in value.items()}
    if isinstance(value, list):
        return [clean_posted_data(item) for item in value]
    if isinstance(value, str):
        value = value.replace("\x00", "")
        value = value.replace("\r\n", "\n")
        value = value.replace("\t", "    ")
        return value.replace(_NBSP, " ")
    return value


def _replace_in(value: Any, old: str, new: str) -> Any:
    if isinstance(value, list):
        return [_replace_in(item, old, new) for item in value]
    if isinstance(value, str):
        return value.replace(old, new)
    return value


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


class PostedValues:
    """Mutates a record in place from raw form values and the content-type schema."""

    def __init__(
        self,
        repository: ContentRepository,
        permissions: PermissionService,
        contenttypes: ContentTypeRegistry,
    ) -> None:
        self._repository = repository
        self._permissions = permissions
        self._contenttypes = contenttypes

    async def apply(
        self,
        content: Content,
        form_values: Mapping[str, Any],
        contenttype: ContentType,
        user: User,
    ) -> None:
        """Raises AccessControlError on an unauthorised ownership change (record left untouched)."""
        values = set_successful_control_values(form_values, contenttype)
        values = clean_posted_data(values)
        values = {
            key: value
            for key, value in values.items()
            if contenttype.kind_of(key) != FormKeyKind.TRANSPORT
        }

        self._apply_ownership(content, values, contenttype, user)

        # Make sure we have a proper status.
        status = values.get("status")
        if not isinstance(status, str) or status not in ContentStatus.values():
            values["status"] = content.status.value if content.status else ContentStatus.DRAFT.value

        for name, value in values.items():
            kind = contenttype.kind_of(name)
            if kind == FormKeyKind.RELATION:
                content.relation = await self._resolve_relations(value)
            elif kind == FormKeyKind.TAXONOMY:
                content.taxonomy = value
            elif kind in (FormKeyKind.FIELD, FormKeyKind.CORE):
                content.set(name, None if value == "" else value)
            elif kind is None:
                logger.debug(
                    "form_key_ignored",
                    extra={"contenttype": contenttype.slug, "key": name},
                )

    def _apply_ownership(
        self,
        content: Content,
        values: Dict[str, Any],
        contenttype: ContentType,
        user: User,
    ) -> None:
        if content.id is None:
            content.ownerid = user.id
            return

        posted = values.get(OWNER_KEY)
        if posted is None or posted == "":
            return
        ownerid = _as_int(posted)
        if ownerid is None:
            raise DomainValidationError(f"ownerid must be an integer, got {posted!r}")
        if ownerid == content.ownerid:
            return
        permission = f"contenttype:{contenttype.slug}:change-ownership:{content.id}"
        if not self._permissions.is_allowed(permission, user):
            raise AccessControlError("Changing ownership is not allowed.")
        content.ownerid = ownerid

    async def _resolve_relations(self, posted: Any) -> Dict[str, List[int]]:
        """Look each related id up in its own content type; ids that do not resolve are dropped."""
        relations: Dict[str, List[int]] = {}
        if not isinstance(posted, dict):
            return relations
        for slug, ids in posted.items():
            if slug not in self._contenttypes:
                continue
            if isinstance(ids, dict):
                ids = list(ids.values())
            elif not isinstance(ids, list):
                ids = [ids]
            for raw_id in ids:
                related_id = _as_int(raw_id)
                if related_id is None:
                    continue
                related = await self._repository.find(slug, related_id)
                if related is not None:
                    relations.setdefault(slug, []).append(related.id)
        return relations
