"""Tollgate: role-based permission decisions for workspace resources."""

from tollgate.auth.roles import Role
from tollgate.core.engine import PermissionEngine
from tollgate.models import CheckRequest, Decision, DenialCode, Resource
from tollgate.storage import (
    DecisionCache,
    InMemoryMembershipResolver,
    MembershipResolver,
    ResourceOverrideStore,
    SQLiteMembershipResolver,
)

__version__ = "0.1.0"

__all__ = [
    "CheckRequest",
    "Decision",
    "DecisionCache",
    "DenialCode",
    "InMemoryMembershipResolver",
    "MembershipResolver",
    "PermissionEngine",
    "Resource",
    "ResourceOverrideStore",
    "Role",
    "SQLiteMembershipResolver",
]
