"""Security: users, roles, content permissions. No FastAPI."""

from cms.security.permissions import PermissionService
from cms.security.users import Role, User

__all__ = [
    "PermissionService",
    "Role",
    "User",
]
