from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Iterator

from loguru import logger

from apiguard.constants import Environment, HealthStatus, RiskLevel, Status
from apiguard.core import SERVICE_NAME
from apiguard.domain.endpoint_classifier import EndpointClassifier
from apiguard.domain.errors import RouteCollectionFailure
from apiguard.domain.models import ApiEndpoint, ComplianceReport, InventorySnapshot
from apiguard.ports.route_registry import RouteRegistry


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _warn(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).warning("")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InventoryAggregator:
    """
    Builds the endpoint inventory from the route registry and derives views and reports.

    Nothing is cached: every call takes a fresh registry snapshot and classifies it.
    A registry failure yields an empty, degraded snapshot instead of an exception,
    so inventory reporting never breaks the host service.

    strict=True counts the generic fallback description as undocumented and only
    counts public endpoints as secured when they are not high risk. strict=False
    reproduces the legacy score, where the secured term equals the total.
    """

    def __init__(
        self,
        registry: RouteRegistry,
        classifier: EndpointClassifier,
        environment: Environment,
        *,
        strict: bool = True,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._registry = registry
        self._classifier = classifier
        self._environment = environment
        self._strict = strict
        self._clock = clock

    @property
    def environment(self) -> Environment:
        return self._environment

    def collect(self, environment: Environment | None = None) -> InventorySnapshot:
        env = environment or self._environment
        try:
            routes = self._registry.list_routes()
        except RouteCollectionFailure as exc:
            _warn("inventory_degraded", environment=env.value, error=str(exc))
            return InventorySnapshot(endpoints=(), degraded=True, error=str(exc))

        endpoints = tuple(self._classifier.classify(route, env) for route in routes)
        for endpoint in endpoints:
            if endpoint.status_diverges:
                _warn(
                    "inventory_status_divergence",
                    path=endpoint.path,
                    method=endpoint.method,
                    deprecated=endpoint.deprecated,
                    status=endpoint.status.value,
                )
        _log("inventory_generated", environment=env.value, endpoints=len(endpoints))
        return InventorySnapshot(endpoints=endpoints)

    def snapshot(self, environment: Environment | None = None) -> tuple[ApiEndpoint, ...]:
        return self.collect(environment).endpoints

    def active(self, environment: Environment | None = None) -> Iterator[ApiEndpoint]:
        return (e for e in self.snapshot(environment) if e.status == Status.ACTIVE)

    def deprecated(self, environment: Environment | None = None) -> Iterator[ApiEndpoint]:
        return (e for e in self.snapshot(environment) if e.deprecated)

    def undocumented(self, environment: Environment | None = None) -> Iterator[ApiEndpoint]:
        return (e for e in self.snapshot(environment) if not self.is_documented(e))

    def high_risk(self, environment: Environment | None = None) -> Iterator[ApiEndpoint]:
        return (e for e in self.snapshot(environment) if e.risk_level == RiskLevel.HIGH)

    def is_documented(self, endpoint: ApiEndpoint) -> bool:
        if not endpoint.description:
            return False
        return endpoint.documented or not self._strict

    def is_secured(self, endpoint: ApiEndpoint) -> bool:
        if self._strict:
            return endpoint.requires_auth or endpoint.risk_level != RiskLevel.HIGH
        return endpoint.requires_auth or endpoint.public_endpoint

    def compliance_score(self, endpoints: tuple[ApiEndpoint, ...]) -> float:
        total = len(endpoints)
        if total == 0:
            return 100.0
        documented = sum(1 for e in endpoints if self.is_documented(e))
        secured = sum(1 for e in endpoints if self.is_secured(e))
        status_assigned = sum(1 for e in endpoints if e.status is not None)
        return (documented + secured + status_assigned) * 100.0 / (total * 3)

    def compliance_report(self, environment: Environment | None = None) -> ComplianceReport:
        env = environment or self._environment
        snap = self.collect(env)
        endpoints = snap.endpoints

        undocumented = sum(1 for e in endpoints if not self.is_documented(e))
        healthy = undocumented == 0 and not snap.degraded
        report = ComplianceReport(
            status=HealthStatus.HEALTHY if healthy else HealthStatus.WARNING,
            timestamp=self._clock(),
            environment=env,
            total_endpoints=len(endpoints),
            active_endpoints=sum(1 for e in endpoints if e.status == Status.ACTIVE),
            deprecated_endpoints=sum(1 for e in endpoints if e.deprecated),
            undocumented_endpoints=undocumented,
            high_risk_endpoints=sum(1 for e in endpoints if e.risk_level == RiskLevel.HIGH),
            inventory_complete=healthy,
            compliance_score=self.compliance_score(endpoints),
            degraded=snap.degraded,
            error=snap.error,
        )
        if report.status == HealthStatus.WARNING:
            _warn(
                "inventory_health_warning",
                undocumented=report.undocumented_endpoints,
                degraded=report.degraded,
                score=report.compliance_score,
            )
        return report
