"""In-memory store of per-resource grant and revoke overrides."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict

from tollgate.models.decision import ResourceOverride

logger = logging.getLogger(__name__)

# resource_id -> user_id -> actions
_OverrideMap = dict[str, dict[str, set[str]]]


class ResourceOverrideStore:
    """Explicit grants and revocations that take precedence over role defaults.

    Grants and revocations are kept in two independent maps. A revocation is
    never cleared by a later grant; only ``remove_revocation`` or ``clear``
    drop it.
    """

    def __init__(self) -> None:
        self._grants: _OverrideMap = defaultdict(lambda: defaultdict(set))
        self._revokes: _OverrideMap = defaultdict(lambda: defaultdict(set))
        self._lock = threading.Lock()

    def grant(self, resource_id: str, user_id: str, action: str) -> None:
        """Explicitly allow an action for a user on a resource."""
        with self._lock:
            self._grants[resource_id][user_id].add(action)
        logger.info("Granted %s on %s to %s", action, resource_id, user_id)

    def revoke(self, resource_id: str, user_id: str, action: str) -> None:
        """Explicitly forbid an action for a user on a resource."""
        with self._lock:
            self._revokes[resource_id][user_id].add(action)
        logger.info("Revoked %s on %s from %s", action, resource_id, user_id)

    def remove_grant(self, resource_id: str, user_id: str, action: str) -> bool:
        """Drop a single grant. Returns True if it existed."""
        with self._lock:
            return _discard(self._grants, resource_id, user_id, action)

    def remove_revocation(self, resource_id: str, user_id: str, action: str) -> bool:
        """Drop a single revocation. Returns True if it existed."""
        with self._lock:
            return _discard(self._revokes, resource_id, user_id, action)

    def clear(self, resource_id: str) -> None:
        """Remove every grant and revocation recorded for a resource."""
        with self._lock:
            self._grants.pop(resource_id, None)
            self._revokes.pop(resource_id, None)
        logger.info("Cleared overrides for resource %s", resource_id)

    def is_explicitly_granted(self, resource_id: str, user_id: str, action: str) -> bool:
        with self._lock:
            return _contains(self._grants, resource_id, user_id, action)

    def is_explicitly_revoked(self, resource_id: str, user_id: str, action: str) -> bool:
        with self._lock:
            return _contains(self._revokes, resource_id, user_id, action)

    def get_overrides(self, resource_id: str) -> dict[str, ResourceOverride]:
        """Snapshot of all overrides on a resource, keyed by user ID."""
        with self._lock:
            grants = self._grants.get(resource_id, {})
            revokes = self._revokes.get(resource_id, {})
            return {
                user_id: ResourceOverride(
                    resource_id=resource_id,
                    user_id=user_id,
                    granted=set(grants.get(user_id, ())),
                    revoked=set(revokes.get(user_id, ())),
                )
                for user_id in grants.keys() | revokes.keys()
            }


def _contains(overrides: _OverrideMap, resource_id: str, user_id: str, action: str) -> bool:
    # .get() so lookups never create empty records
    users = overrides.get(resource_id)
    if not users:
        return False
    return action in users.get(user_id, ())


def _discard(overrides: _OverrideMap, resource_id: str, user_id: str, action: str) -> bool:
    users = overrides.get(resource_id)
    if not users or action not in users.get(user_id, ()):
        return False
    actions = users[user_id]
    actions.discard(action)
    if not actions:
        del users[user_id]
        if not users:
            del overrides[resource_id]
    return True
