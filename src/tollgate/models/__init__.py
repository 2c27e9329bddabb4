"""Tollgate data models."""

from tollgate.models.decision import Decision, DenialCode, ResourceOverride
from tollgate.models.resource import CheckRequest, Resource

__all__ = ["CheckRequest", "Decision", "DenialCode", "Resource", "ResourceOverride"]
