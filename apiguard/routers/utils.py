from __future__ import annotations

from fastapi import Request

from apiguard.application.inventory_service import InventoryAggregator
from apiguard.config.settings import Settings
from apiguard.domain.access_policy import AccessPolicyHolder


def app_settings(request: Request) -> Settings:
    """Read settings from app.state, or build defaults from the environment."""
    settings = getattr(request.app.state, "settings", None)
    if settings is not None:
        return settings
    return Settings()


def inventory_aggregator(request: Request) -> InventoryAggregator | None:
    return getattr(request.app.state, "inventory", None)


def access_policy(request: Request) -> AccessPolicyHolder:
    policy = getattr(request.app.state, "access_policy", None)
    if policy is not None:
        return policy
    return AccessPolicyHolder(app_settings(request).environment)


__all__ = [
    "app_settings",
    "inventory_aggregator",
    "access_policy",
]
