"""Endpoint classifier: maps one route record to a fully-populated inventory entry.

Classification is deterministic and depends only on the route, the
environment and the configured version/owner. It never raises: missing path
or method values degrade to the "unknown" sentinel.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from apiguard.constants import (
    DEFAULT_APP_VERSION,
    DEFAULT_OWNER,
    DEPRECATION_MARKERS,
    INTERNAL_MARKERS,
    UNKNOWN,
    VERSION_MARKERS,
    Environment,
    Paths,
    RiskLevel,
    Role,
    Status,
)
from apiguard.domain.models import ApiEndpoint, RouteRecord

FALLBACK_DESCRIPTION = "Endpoint of the water quality microservice"

_PUBLIC_DIAGNOSTICS = (Paths.ACTUATOR_HEALTH, Paths.ACTUATOR_INFO)
_DOCS_PATHS = (*Paths.DOCS_UI, Paths.DOCS_JSON)

_RESOURCE_SENTENCES = {
    "/users": {
        "GET_ONE": "Get a specific user",
        "GET_ALL": "List users",
        "POST": "Create a new user",
        "PUT": "Update a user",
        "DELETE": "Delete a user",
        "OTHER": "Operation on users",
    },
    "/qualitytests": {
        "GET_ONE": "Get a specific quality test",
        "GET_ALL": "List quality tests",
        "POST": "Create a new quality test",
        "PUT": "Update a quality test",
        "DELETE": "Delete a quality test",
        "OTHER": "Operation on quality tests",
    },
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_internal(path: str) -> bool:
    return any(marker in path for marker in INTERNAL_MARKERS)


def is_docs_path(path: str) -> bool:
    return any(path == p or path.startswith(p + "/") for p in _DOCS_PATHS)


def requires_authentication(path: str) -> bool:
    if any(p in path for p in _PUBLIC_DIAGNOSTICS):
        return False
    return not is_docs_path(path)


def is_deprecated(path: str) -> bool:
    return any(marker in path for marker in DEPRECATION_MARKERS)


def _resource_key(path: str) -> str | None:
    for key in _RESOURCE_SENTENCES:
        if key in path:
            return key
    return None


class EndpointClassifier:
    """Derives inventory metadata (risk, status, roles, auth, description, version) for routes."""

    def __init__(
        self,
        *,
        app_version: str = DEFAULT_APP_VERSION,
        owner: str = DEFAULT_OWNER,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._app_version = app_version or DEFAULT_APP_VERSION
        self._owner = owner or DEFAULT_OWNER
        self._clock = clock

    def classify(self, route: RouteRecord, environment: Environment) -> ApiEndpoint:
        path = route.path_pattern or UNKNOWN
        method = route.http_method.upper() if route.http_method else UNKNOWN

        internal = is_internal(path)
        requires_auth = requires_authentication(path)
        deprecated = is_deprecated(path)
        description, documented = self.describe(path, method)

        return ApiEndpoint(
            path=path,
            method=method,
            version=self.extract_version(path),
            description=description,
            documented=documented,
            deprecated=deprecated,
            requires_auth=requires_auth,
            roles=self.determine_roles(path),
            environment=environment,
            last_modified=self._clock(),
            owner=self._owner,
            status=self.determine_status(path, internal, environment),
            controller_class=route.handler_type_name or UNKNOWN,
            method_name=route.handler_method_name or UNKNOWN,
            public_endpoint=not requires_auth,
            risk_level=self.risk_level(path, method, internal, environment),
        )

    def risk_level(self, path: str, method: str, internal: bool, environment: Environment) -> RiskLevel:
        if internal and environment.is_production:
            return RiskLevel.HIGH
        if is_docs_path(path):
            return RiskLevel.HIGH if environment.is_production else RiskLevel.LOW
        if method == "DELETE":
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def determine_status(self, path: str, internal: bool, environment: Environment) -> Status:
        if is_deprecated(path):
            return Status.DEPRECATED
        if internal and environment.is_production:
            return Status.DISABLED
        if internal:
            return Status.INTERNAL
        return Status.ACTIVE

    def extract_version(self, path: str) -> str:
        for marker, version in VERSION_MARKERS:
            if marker in path:
                return version
        return self._app_version

    def describe(self, path: str, method: str) -> tuple[str, bool]:
        """Return (description, documented). The generic fallback counts as undocumented."""
        if "/actuator" in path:
            return "Monitoring endpoint (actuator)", True
        if "/inventory" in path:
            return "API inventory endpoint (development only)", True
        if is_docs_path(path):
            return "API documentation (development only)", True
        if path == Paths.HEALTH or path.startswith(Paths.HEALTH + "/"):
            return "Service health and API compliance status", True

        key = _resource_key(path)
        if key is not None:
            sentences = _RESOURCE_SENTENCES[key]
            if method == "GET":
                return sentences["GET_ONE" if "{" in path else "GET_ALL"], True
            return sentences.get(method, sentences["OTHER"]), True

        return FALLBACK_DESCRIPTION, False

    def determine_roles(self, path: str) -> frozenset[str]:
        if "/actuator" in path or "/internal" in path:
            return frozenset({Role.ADMIN, Role.MONITOR})
        if "/inventory" in path:
            return frozenset({Role.ADMIN, Role.DEVELOPER})
        if _resource_key(path) is not None:
            return frozenset({Role.USER, Role.ADMIN})
        return frozenset({Role.USER})
