"""Inventory-level constants shared across modules."""
from __future__ import annotations

from enum import Enum


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

    @property
    def is_production(self) -> bool:
        return self is Environment.PRODUCTION


DEFAULT_ENVIRONMENT = Environment.DEVELOPMENT
DEFAULT_APP_VERSION = "1.0.0"
DEFAULT_OWNER = "api-inventory"


class Status(str, Enum):
    ACTIVE = "ACTIVE"
    DEPRECATED = "DEPRECATED"
    BETA = "BETA"
    INTERNAL = "INTERNAL"
    DISABLED = "DISABLED"

    @property
    def description(self) -> str:
        return _STATUS_DESCRIPTIONS[self]


_STATUS_DESCRIPTIONS = {
    Status.ACTIVE: "Endpoint is active and available",
    Status.DEPRECATED: "Endpoint is deprecated and will be removed",
    Status.BETA: "Endpoint is in beta and may change",
    Status.INTERNAL: "Internal endpoint, not public",
    Status.DISABLED: "Endpoint disabled for security reasons",
}


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class HealthStatus(str, Enum):
    HEALTHY = "HEALTHY"
    WARNING = "WARNING"


class Role:
    ADMIN = "ADMIN"
    MONITOR = "MONITOR"
    DEVELOPER = "DEVELOPER"
    USER = "USER"


UNKNOWN = "unknown"


class Paths:
    """Route paths the classifier and the access policy both reason about."""

    ACTUATOR_HEALTH = "/actuator/health"
    ACTUATOR_INFO = "/actuator/info"
    DOCS_UI = ("/docs", "/redoc")
    DOCS_JSON = "/openapi.json"

    HEALTH = "/health"
    HEALTH_VERSION = "/health/version"
    HEALTH_LIVE = "/health/live"
    HEALTH_READY = "/health/ready"
    HEALTH_SECURITY = "/health/security"

    INVENTORY = "/inventory"
    USERS = "/api/v2/users"
    QUALITY_TESTS = "/api/v2/qualitytests"


INTERNAL_MARKERS = ("/actuator", "/debug", "/internal", "/inventory")
DEPRECATION_MARKERS = ("/v0/", "/deprecated/", "/legacy/")
VERSION_MARKERS = (("/v2/", "v2"), ("/v1/", "v1"))
