"""Async publication of decision events to audit listeners."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable, Coroutine
from typing import Any

from tollgate.events.types import DecisionEvent, EventType

logger = logging.getLogger(__name__)

Listener = Callable[[DecisionEvent], Coroutine[Any, Any, None]]


class EventBus:
    """Delivers each decision event to the listeners subscribed to its type."""

    def __init__(self) -> None:
        self._listeners: dict[EventType, list[Listener]] = defaultdict(list)

    def on(self, event_type: EventType, listener: Listener) -> None:
        self._listeners[event_type].append(listener)

    def on_all(self, listener: Listener) -> None:
        """Subscribe a listener to allowed and denied decisions."""
        for event_type in EventType:
            self.on(event_type, listener)

    def has_listeners(self) -> bool:
        return any(self._listeners.values())

    async def publish(self, event: DecisionEvent) -> None:
        """Deliver an event. A failing listener is logged and never reaches the caller."""
        for listener in self._listeners.get(event.type, []):
            try:
                await listener(event)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Audit listener failed for %s by %s", event.type, event.user_id)
