"""Permission engine combining role defaults, resource overrides, and caching."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from tollgate.auth import roles
from tollgate.auth.roles import Role
from tollgate.config import Config
from tollgate.events.bus import EventBus
from tollgate.events.types import DecisionEvent
from tollgate.models.decision import Decision, DenialCode
from tollgate.models.resource import CheckRequest, Resource
from tollgate.storage.base import MembershipResolver
from tollgate.storage.cache import CacheKey, DecisionCache
from tollgate.storage.overrides import ResourceOverrideStore

logger = logging.getLogger(__name__)


class PermissionEngine:
    """Decides whether a user may perform an action on a resource.

    Precedence, strongest first: not a member, explicit revocation,
    explicit grant, role default. The workspace owner resolves to the
    owner role before any membership record is consulted.
    """

    def __init__(
        self,
        resolver: MembershipResolver,
        *,
        cache: DecisionCache | None = None,
        overrides: ResourceOverrideStore | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize PermissionEngine.

        Args:
            resolver: Source of workspace ownership and membership
            cache: Decision cache, a fresh one with default TTL if omitted
            overrides: Resource override store, a fresh one if omitted
            event_bus: Bus receiving an event for every computed decision
        """
        self._resolver = resolver
        self._cache = cache if cache is not None else DecisionCache()
        self._overrides = overrides if overrides is not None else ResourceOverrideStore()
        self._event_bus = event_bus if event_bus is not None else EventBus()

    @classmethod
    def from_config(
        cls, resolver: MembershipResolver, config: Config, **kwargs
    ) -> PermissionEngine:
        cache = DecisionCache(config.cache_ttl, max_entries=config.cache_max_entries)
        return cls(resolver, cache=cache, **kwargs)

    @property
    def overrides(self) -> ResourceOverrideStore:
        return self._overrides

    # --- Checks ---

    async def check(self, user_id: str, resource: Resource, action: str) -> Decision:
        """Check if a user can perform an action on a resource."""
        key = CacheKey(user_id, resource.type, resource.id, action)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        decision = await self._decide(user_id, resource, action)
        self._cache.put(key, decision)

        logger.debug(
            "%s %s on %s:%s -> %s",
            user_id,
            action,
            resource.type,
            resource.id,
            "allow" if decision.allowed else decision.code,
        )
        if self._event_bus.has_listeners():
            await self._event_bus.publish(
                DecisionEvent(user_id=user_id, resource=resource, action=action, decision=decision)
            )
        return decision

    async def check_batch(
        self, user_id: str, checks: Iterable[CheckRequest | dict]
    ) -> dict[str, Decision]:
        """Run several checks, keyed by "<resource type>:<action>".

        Entries sharing a key collapse into one; the later entry wins.
        """
        requests = [c if isinstance(c, CheckRequest) else CheckRequest(**c) for c in checks]
        decisions = await asyncio.gather(
            *(self.check(user_id, req.resource, req.action) for req in requests)
        )
        return {req.batch_key: decision for req, decision in zip(requests, decisions)}

    async def _decide(self, user_id: str, resource: Resource, action: str) -> Decision:
        role = await self.get_user_role(user_id, resource.workspace_id)
        if role is None:
            return Decision.deny(
                DenialCode.NOT_A_MEMBER,
                f"{user_id} is not a member of the workspace",
            )

        if self._overrides.is_explicitly_revoked(resource.id, user_id, action):
            return Decision.deny(
                DenialCode.EXPLICIT_DENY,
                f"{action} on resource {resource.id} explicitly denied for {user_id}",
            )

        if self._overrides.is_explicitly_granted(resource.id, user_id, action):
            return Decision.allow()

        if roles.role_has_permission(role, action):
            return Decision.allow()

        return Decision.deny(
            DenialCode.ROLE_INSUFFICIENT,
            f"Role '{role}' does not have permission '{action}'",
            required_role=roles.required_role_for(action) if action else None,
        )

    async def get_user_role(self, user_id: str, workspace_id: str) -> str | None:
        """Get a user's role in a workspace.

        Known roles are returned as Role members. An unrecognised role string
        is passed through as-is and grants no default permissions.
        """
        owner_id = await self._resolver.resolve_owner(workspace_id)
        if owner_id is not None and owner_id == user_id:
            return Role.OWNER

        recorded = await self._resolver.resolve_member(workspace_id, user_id)
        if recorded is None:
            return None

        role = Role.parse(recorded)
        if role is None:
            logger.warning("Unknown role %r for %s in %s", recorded, user_id, workspace_id)
            return recorded
        return role

    # --- Resource overrides ---

    def grant_resource_permission(self, resource_id: str, user_id: str, action: str) -> None:
        self._overrides.grant(resource_id, user_id, action)
        self._cache.invalidate_resource(resource_id)

    def revoke_resource_permission(self, resource_id: str, user_id: str, action: str) -> None:
        self._overrides.revoke(resource_id, user_id, action)
        self._cache.invalidate_resource(resource_id)

    def remove_resource_grant(self, resource_id: str, user_id: str, action: str) -> bool:
        removed = self._overrides.remove_grant(resource_id, user_id, action)
        if removed:
            self._cache.invalidate_resource(resource_id)
        return removed

    def remove_resource_revocation(self, resource_id: str, user_id: str, action: str) -> bool:
        removed = self._overrides.remove_revocation(resource_id, user_id, action)
        if removed:
            self._cache.invalidate_resource(resource_id)
        return removed

    def clear_resource_permissions(self, resource_id: str) -> None:
        """Drop all overrides on a resource. Cached decisions live out their TTL."""
        self._overrides.clear(resource_id)

    # --- Cache ---

    def get_cache_size(self) -> int:
        return self._cache.size()

    def clear_cache(self) -> None:
        self._cache.clear()

    # --- Role table ---

    def get_role_permissions(self, role: str) -> frozenset[str]:
        return roles.get_role_permissions(role)

    def role_has_permission(self, role: str, action: str) -> bool:
        return roles.role_has_permission(role, action)

    @staticmethod
    def get_role_hierarchy() -> list[Role]:
        return roles.get_role_hierarchy()

    @staticmethod
    def compare_roles(role_a: str, role_b: str) -> int:
        return roles.compare_roles(role_a, role_b)

    @staticmethod
    def role_can_act_as(actor: str, target: str) -> bool:
        return roles.role_can_act_as(actor, target)
