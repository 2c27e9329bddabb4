"""Tollgate decision events."""

from tollgate.events.bus import EventBus
from tollgate.events.types import DecisionEvent, EventType

__all__ = ["DecisionEvent", "EventBus", "EventType"]
