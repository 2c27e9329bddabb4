"""Tollgate decision engine."""

from tollgate.core.engine import PermissionEngine

__all__ = ["PermissionEngine"]
