"""
Role-based permission utilities for info channel members and clients.

Info channel members hold one or more channel roles. Clients additionally
carry a platform role (``user`` or ``admin``) used for moderation and for
creator-or-admin checks.
"""

from typing import Dict, Iterable, Set, FrozenSet
from enum import Enum


ROLE_OWNER = "owner"
ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"
ROLE_VIEWER = "viewer"
ROLE_PERMISSIONS = {
    ROLE_OWNER: {
        "can_read": True,
        "can_contribute": True,
        "can_manage": True,
    },
    ROLE_ADMIN: {
        "can_read": True,
        "can_contribute": True,
        "can_manage": True,
    },
    ROLE_EDITOR: {
        "can_read": True,
        "can_contribute": True,
        "can_manage": False,
    },
    ROLE_VIEWER: {
        "can_read": True,
        "can_contribute": False,
        "can_manage": False,
    },
}

ALLOWED_ROLES = set(ROLE_PERMISSIONS.keys())

# Derived role groups
CONTRIBUTE_ROLES: FrozenSet[str] = frozenset({ROLE_OWNER, ROLE_ADMIN, ROLE_EDITOR})
MANAGE_ROLES: FrozenSet[str] = frozenset({ROLE_OWNER, ROLE_ADMIN})

# Platform (client) roles
CLIENT_ROLE_USER = "user"
CLIENT_ROLE_ADMIN = "admin"
ALLOWED_CLIENT_ROLES: FrozenSet[str] = frozenset({CLIENT_ROLE_USER, CLIENT_ROLE_ADMIN})


class RoleEnum(str, Enum):
    """Info channel roles."""
    owner = ROLE_OWNER
    admin = ROLE_ADMIN
    editor = ROLE_EDITOR
    viewer = ROLE_VIEWER


def get_role_permissions(role: str) -> Dict[str, bool]:
    """
    Get the permissions for a given info channel role.

    Args:
        role: The role name (owner, admin, editor, viewer)

    Returns:
        Dict with can_read, can_contribute and can_manage flags

    Raises:
        ValueError: If role is not recognized
    """
    if role not in ROLE_PERMISSIONS:
        raise ValueError(f"Unknown role: {role}. Allowed roles: {list(ROLE_PERMISSIONS.keys())}")

    return ROLE_PERMISSIONS[role].copy()


def get_allowed_roles() -> Set[str]:
    return ALLOWED_ROLES.copy()


def validate_role(role: str) -> None:
    """Raise ValueError if ``role`` is not an info channel role."""
    if role not in ALLOWED_ROLES:
        raise ValueError(f"Invalid role '{role}'. Allowed roles: {sorted(ALLOWED_ROLES)}")


def validate_client_role(role: str) -> None:
    if role not in ALLOWED_CLIENT_ROLES:
        raise ValueError(f"Invalid client role '{role}'. Allowed roles: {sorted(ALLOWED_CLIENT_ROLES)}")


def roles_allow_contribute(roles: Iterable[str]) -> bool:
    return any(role in CONTRIBUTE_ROLES for role in roles)


def roles_allow_manage(roles: Iterable[str]) -> bool:
    return any(role in MANAGE_ROLES for role in roles)
