"""Tollgate storage layer."""

from tollgate.storage.base import MembershipResolver
from tollgate.storage.cache import CacheKey, DecisionCache
from tollgate.storage.memory import InMemoryMembershipResolver
from tollgate.storage.overrides import ResourceOverrideStore
from tollgate.storage.sqlite_store import SQLiteMembershipResolver

__all__ = [
    "CacheKey",
    "DecisionCache",
    "InMemoryMembershipResolver",
    "MembershipResolver",
    "ResourceOverrideStore",
    "SQLiteMembershipResolver",
]
