"""Role policy table for Tollgate."""

from tollgate.auth.roles import (
    WILDCARD,
    Role,
    compare_roles,
    get_role_hierarchy,
    get_role_permissions,
    required_role_for,
    role_can_act_as,
    role_has_permission,
)

__all__ = [
    "WILDCARD",
    "Role",
    "compare_roles",
    "get_role_hierarchy",
    "get_role_permissions",
    "required_role_for",
    "role_can_act_as",
    "role_has_permission",
]
