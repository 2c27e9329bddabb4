"""Role policy table and role hierarchy for workspace permissions."""

from __future__ import annotations

from enum import StrEnum

WILDCARD = "*"


class Role(StrEnum):
    """Workspace roles, declared from least to most privileged."""

    VIEWER = "viewer"
    EDITOR = "editor"
    ADMIN = "admin"
    OWNER = "owner"

    @classmethod
    def parse(cls, value: str | None, *, strict: bool = False) -> Role | None:
        """Convert a role string to a Role, or None when it is not a known role."""
        if isinstance(value, Role):
            return value
        try:
            return cls(value)
        except ValueError:
            if strict:
                raise ValueError(f"Unknown role: {value!r}") from None
            return None

    @property
    def rank(self) -> int:
        return _HIERARCHY.index(self)

    @property
    def permissions(self) -> frozenset[str]:
        return _ROLE_PERMISSIONS[self]

    def matches(self, action: str) -> bool:
        """Check whether this role's defaults cover an action."""
        if not action:
            return False
        permissions = _ROLE_PERMISSIONS[self]
        return WILDCARD in permissions or action in permissions


_HIERARCHY: tuple[Role, ...] = (Role.VIEWER, Role.EDITOR, Role.ADMIN, Role.OWNER)

_ROLE_PERMISSIONS: dict[Role, frozenset[str]] = {
    Role.VIEWER: frozenset({"view", "execute"}),
    Role.EDITOR: frozenset({"view", "edit", "comment", "execute"}),
    Role.ADMIN: frozenset({"view", "edit", "delete", "comment", "execute", "manage_members"}),
    Role.OWNER: frozenset({WILDCARD}),
}


def get_role_permissions(role: str) -> frozenset[str]:
    """Return the default action set of a role (owner yields the wildcard only)."""
    return _ROLE_PERMISSIONS[Role.parse(role, strict=True)]


def role_has_permission(role: str, action: str) -> bool:
    """Check if a role's default permissions include an action."""
    parsed = Role.parse(role)
    if parsed is None:
        return False
    return parsed.matches(action)


def get_role_hierarchy() -> list[Role]:
    """Return all roles ordered from least to most privileged."""
    return list(_HIERARCHY)


def compare_roles(role_a: str, role_b: str) -> int:
    """Positive if role_a outranks role_b, negative if weaker, zero if equal."""
    a = Role.parse(role_a, strict=True)
    b = Role.parse(role_b, strict=True)
    return a.rank - b.rank


def role_can_act_as(actor: str, target: str) -> bool:
    """Check if actor's role is at or above target's role."""
    if Role.parse(actor) is None or Role.parse(target) is None:
        return False
    return compare_roles(actor, target) >= 0


def required_role_for(action: str) -> Role:
    """Return the least privileged role whose defaults cover an action."""
    for role in _HIERARCHY:
        if role.matches(action):
            return role
    return Role.OWNER
