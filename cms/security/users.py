"""Authenticated users and roles. No FastAPI."""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable


class Role(str, Enum):
    ROOT = "root"
    ADMIN = "admin"
    CHIEF_EDITOR = "chief-editor"
    EDITOR = "editor"
    AUTHOR = "author"
    VIEWER = "viewer"


@dataclass(frozen=True)
class User:
    """Authenticated user as asserted by the upstream gateway."""

    id: int
    username: str = ""
    roles: FrozenSet[Role] = field(default_factory=frozenset)

    @classmethod
    def from_role_names(cls, user_id: int, role_names: Iterable[str], username: str = "") -> "User":
        """Build a user from role names, ignoring names that are not known roles."""
        known = {role.value: role for role in Role}
        roles = frozenset(known[name.strip()] for name in role_names if name.strip() in known)
        return cls(id=user_id, username=username, roles=roles)

    def has_any_role(self, roles: Iterable[Role]) -> bool:
        return bool(self.roles.intersection(roles))
