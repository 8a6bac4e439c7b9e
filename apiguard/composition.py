"""
Composition root: single place where concrete implementations are wired.

Builds settings, route registry, classifier, aggregator and access policy from
config; provides connect/close lifecycle. Used by the lifespan to populate
app.state. No DI container library, explicit wiring only. Registry backend
selection (fastapi or static) is driven by settings.
"""

from typing import Any

from fastapi import FastAPI
from loguru import logger

from apiguard.application.inventory_service import InventoryAggregator
from apiguard.config.settings import Settings
from apiguard.core import SERVICE_NAME
from apiguard.domain.access_policy import AccessPolicyHolder
from apiguard.domain.endpoint_classifier import EndpointClassifier
from apiguard.infrastructure.routing.factory import create_route_registry
from apiguard.ports.route_registry import RouteRegistry


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class AppDependencies:
    """Holds wired dependencies and their lifecycle. Built only in composition root."""

    def __init__(
        self,
        *,
        settings: Settings,
        registry: RouteRegistry,
        inventory: InventoryAggregator,
        access_policy: AccessPolicyHolder,
    ) -> None:
        self._settings = settings
        self._registry = registry
        self._inventory = inventory
        self._access_policy = access_policy
        self._connected = False

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def registry(self) -> RouteRegistry:
        return self._registry

    @property
    def inventory(self) -> InventoryAggregator:
        return self._inventory

    @property
    def access_policy(self) -> AccessPolicyHolder:
        return self._access_policy

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        """Take a first inventory pass so startup logs show what the service exposes."""
        report = self._inventory.compliance_report()
        _log(
            "inventory_started",
            environment=self._settings.environment.value,
            endpoints=report.total_endpoints,
            high_risk=report.high_risk_endpoints,
            score=report.compliance_score,
            degraded=report.degraded,
            policy_rules=len(self._access_policy.plan),
        )
        self._connected = True

    async def close(self) -> None:
        if self._connected:
            _log("inventory_stopped")
        self._connected = False

    def publish(self, app: FastAPI) -> None:
        app.state.settings = self._settings
        app.state.route_registry = self._registry
        app.state.inventory = self._inventory
        app.state.access_policy = self._access_policy


def create_app_dependencies(app: FastAPI, settings: Settings | None = None) -> AppDependencies:
    """
    Composition root: build all app dependencies in one place.
    Caller owns lifecycle (connect/close). Call after routers are included,
    since the static registry backend freezes the route table at build time.
    """
    _settings = settings or Settings()
    registry = create_route_registry(_settings, app)
    classifier = EndpointClassifier(app_version=_settings.app_version, owner=_settings.app_owner)
    inventory = InventoryAggregator(
        registry,
        classifier,
        _settings.environment,
        strict=_settings.strict_compliance,
    )
    return AppDependencies(
        settings=_settings,
        registry=registry,
        inventory=inventory,
        access_policy=AccessPolicyHolder(_settings.environment),
    )
