"""Content permissions: role matrix, per content-type overrides, status transitions. No FastAPI."""

import logging
from typing import Dict, FrozenSet, Optional, Tuple

from cms.core.context import current_user_ctx
from cms.domain.exceptions import ContentTypeNotFoundError
from cms.domain.models.content import ContentStatus
from cms.domain.models.contenttype import ContentTypeRegistry
from cms.security.exceptions import AccessControlError
from cms.security.users import Role, User

logger = logging.getLogger(__name__)

# Permission matrix (ROOT is always allowed):
# Role          create  edit  publish  depublish  change-ownership  view
# ADMIN         ✓       ✓     ✓        ✓          ✓                 ✓
# CHIEF_EDITOR  ✓       ✓     ✓        ✓          ✓                 ✓
# EDITOR        ✓       ✓     ✓        ✓          ✗                 ✓
# AUTHOR        ✓       ✓     ✗        ✗          ✗                 ✓
# VIEWER        ✗       ✗     ✗        ✗          ✗                 ✓

_ACTION_ROLES: Dict[str, FrozenSet[Role]] = {
    "create": frozenset({Role.ADMIN, Role.CHIEF_EDITOR, Role.EDITOR, Role.AUTHOR}),
    "edit": frozenset({Role.ADMIN, Role.CHIEF_EDITOR, Role.EDITOR, Role.AUTHOR}),
    "publish": frozenset({Role.ADMIN, Role.CHIEF_EDITOR, Role.EDITOR}),
    "depublish": frozenset({Role.ADMIN, Role.CHIEF_EDITOR, Role.EDITOR}),
    "change-ownership": frozenset({Role.ADMIN, Role.CHIEF_EDITOR}),
    "view": frozenset(Role),
}

_PUBLISHED_STATES = frozenset({ContentStatus.PUBLISHED, ContentStatus.TIMED})


def parse_permission(permission: str) -> Tuple[Optional[str], str, Optional[str]]:
    """
    Split 'contenttype:{slug}:{action}[:{id}]' into (slug, action, id).
    A bare action ('publish') yields (None, action, None).
    """
    parts = permission.split(":")
    if parts[0] != "contenttype":
        return None, permission, None
    if len(parts) < 3 or not parts[1] or not parts[2]:
        raise ValueError(f"Malformed permission '{permission}'")
    record_id = parts[3] if len(parts) > 3 and parts[3] else None
    return parts[1], parts[2], record_id


def transition_action(old: ContentStatus, new: ContentStatus, content_id: Optional[int]) -> Optional[str]:
    """Action a status change requires, or None when the status is unchanged."""
    if old == new:
        return None
    if new in _PUBLISHED_STATES:
        return "publish"
    if old in _PUBLISHED_STATES:
        return "depublish"
    return "create" if content_id is None else "edit"


class PermissionService:
    """Answer content permission questions for a user. Never raises for a denied check."""

    def __init__(self, contenttypes: ContentTypeRegistry) -> None:
        self._contenttypes = contenttypes

    def current_user(self) -> User:
        """Request-scoped user set by the API middleware."""
        user = current_user_ctx.get()
        if user is None:
            raise AccessControlError("No authenticated user for this request")
        return user

    def is_allowed(self, permission: str, user: User) -> bool:
        try:
            slug, action, _ = parse_permission(permission)
        except ValueError:
            logger.warning("permission_malformed", extra={"permission": permission})
            return False
        if Role.ROOT in user.roles:
            return True
        return user.has_any_role(self._roles_for(slug, action))

    def can_transition_status(
        self,
        old: ContentStatus,
        new: ContentStatus,
        contenttype: str,
        content_id: Optional[int],
        user: User,
    ) -> bool:
        action = transition_action(old, new, content_id)
        if action is None:
            return True
        permission = f"contenttype:{contenttype}:{action}"
        if content_id is not None:
            permission = f"{permission}:{content_id}"
        return self.is_allowed(permission, user)

    def _roles_for(self, slug: Optional[str], action: str) -> FrozenSet[Role]:
        if slug is not None:
            try:
                overrides = self._contenttypes.get(slug).permissions
            except ContentTypeNotFoundError:
                return frozenset()
            if action in overrides:
                known = {role.value: role for role in Role}
                return frozenset(known[name] for name in overrides[action] if name in known)
        return _ACTION_ROLES.get(action, frozenset())
