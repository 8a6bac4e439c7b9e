from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

import pytest
from fastapi import FastAPI

from apiguard.application.inventory_service import InventoryAggregator
from apiguard.config.settings import Settings
from apiguard.constants import Environment
from apiguard.domain.access_policy import AccessPolicyHolder
from apiguard.domain.endpoint_classifier import EndpointClassifier
from apiguard.domain.errors import RouteCollectionFailure
from apiguard.domain.models import RouteRecord
from apiguard.routers.health import health_router, security_router
from apiguard.routers.inventory import inventory_router

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


def route(path: str, method: str = "GET", handler_type: str = "demo", handler: str = "handler") -> RouteRecord:
    return RouteRecord(
        path_pattern=path,
        http_method=method,
        handler_type_name=handler_type,
        handler_method_name=handler,
    )


class FakeRouteRegistry:
    """Implements RouteRegistry for tests; records can be swapped between calls."""

    def __init__(self, records: Iterable[RouteRecord] = ()) -> None:
        self.records = list(records)
        self.calls = 0

    def list_routes(self) -> list[RouteRecord]:
        self.calls += 1
        return list(self.records)


class FailingRouteRegistry:
    """Implements RouteRegistry for tests; always fails the way an unreachable registry does."""

    def __init__(self, message: str = "registry_down") -> None:
        self._message = message

    def list_routes(self) -> list[RouteRecord]:
        raise RouteCollectionFailure(self._message)


DEMO_ROUTES = [
    route("/api/v2/users", "GET", "users", "list_users"),
    route("/api/v2/users/{user_id}", "GET", "users", "get_user"),
    route("/api/v2/users/{user_id}", "DELETE", "users", "delete_user"),
    route("/legacy/old-endpoint", "GET", "legacy", "old_endpoint"),
    route("/inventory", "GET", "inventory", "get_inventory"),
    route("/something/else", "GET", "misc", "something"),
]


def build_aggregator(
    registry,
    environment: Environment = Environment.DEVELOPMENT,
    *,
    strict: bool = True,
) -> InventoryAggregator:
    classifier = EndpointClassifier(app_version="1.0.0", owner="tests", clock=fixed_clock)
    return InventoryAggregator(registry, classifier, environment, strict=strict, clock=fixed_clock)


def build_test_app(registry, environment: Environment = Environment.DEVELOPMENT) -> FastAPI:
    app = FastAPI()
    app.state.settings = Settings(APP_ENVIRONMENT=environment.value)
    app.state.inventory = build_aggregator(registry, environment)
    app.state.access_policy = AccessPolicyHolder(environment)
    app.include_router(health_router)
    app.include_router(inventory_router)
    app.include_router(security_router)
    return app


@pytest.fixture()
def registry() -> FakeRouteRegistry:
    return FakeRouteRegistry(DEMO_ROUTES)


@pytest.fixture()
def test_app(registry: FakeRouteRegistry) -> FastAPI:
    return build_test_app(registry)
