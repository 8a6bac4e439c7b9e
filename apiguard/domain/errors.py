"""Inventory error taxonomy.

Neither error is fatal for the host service: route collection failures turn
into a degraded report, missing configuration falls back to defaults.
"""
from __future__ import annotations


class InventoryError(Exception):
    """Base error for inventory failures."""


class RouteCollectionFailure(InventoryError):
    """Raised when the route registry is unreachable or returns inconsistent data."""


class ConfigurationMissing(InventoryError):
    """Raised when environment or version configuration is absent or unusable."""
