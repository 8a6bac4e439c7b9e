"""Domain models."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from apiguard.constants import Environment, HealthStatus, RiskLevel, Status


@dataclass(frozen=True)
class RouteRecord:
    """One registered route as reported by the route registry (value object)."""

    path_pattern: str
    http_method: str
    handler_type_name: str
    handler_method_name: str


@dataclass(frozen=True)
class ApiEndpoint:
    """Classified inventory entry for one route. Built per request, never stored."""

    path: str
    method: str
    version: str
    description: str | None
    documented: bool
    deprecated: bool
    requires_auth: bool
    roles: frozenset[str]
    environment: Environment
    last_modified: datetime
    owner: str
    status: Status
    controller_class: str
    method_name: str
    public_endpoint: bool
    risk_level: RiskLevel

    def __post_init__(self) -> None:
        if self.public_endpoint == self.requires_auth:
            raise ValueError("public_endpoint must be the negation of requires_auth")

    @property
    def status_diverges(self) -> bool:
        """True when the deprecation flag and the lifecycle status disagree."""
        return self.deprecated != (self.status == Status.DEPRECATED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "method": self.method,
            "version": self.version,
            "description": self.description,
            "documented": self.documented,
            "deprecated": self.deprecated,
            "requires_auth": self.requires_auth,
            "roles": sorted(self.roles),
            "environment": self.environment.value,
            "last_modified": self.last_modified.isoformat(),
            "owner": self.owner,
            "status": self.status.value,
            "status_description": self.status.description,
            "controller_class": self.controller_class,
            "method_name": self.method_name,
            "public_endpoint": self.public_endpoint,
            "risk_level": self.risk_level.value,
        }


@dataclass(frozen=True)
class InventorySnapshot:
    """Result of one collection pass over the route registry."""

    endpoints: tuple[ApiEndpoint, ...] = field(default_factory=tuple)
    degraded: bool = False
    error: str | None = None


@dataclass(frozen=True)
class ComplianceReport:
    status: HealthStatus
    timestamp: datetime
    environment: Environment
    total_endpoints: int
    active_endpoints: int
    deprecated_endpoints: int
    undocumented_endpoints: int
    high_risk_endpoints: int
    inventory_complete: bool
    compliance_score: float
    degraded: bool = False
    error: str | None = None

    @property
    def documented_endpoints(self) -> int:
        return self.total_endpoints - self.undocumented_endpoints
