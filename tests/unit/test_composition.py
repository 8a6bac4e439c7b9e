import asyncio

from fastapi import FastAPI

from apiguard.composition import create_app_dependencies
from apiguard.config.settings import Settings
from apiguard.constants import Environment
from apiguard.infrastructure.routing.fastapi_registry import FastAPIRouteRegistry
from apiguard.infrastructure.routing.static_registry import StaticRouteRegistry


def _app() -> FastAPI:
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/api/v2/users")
    async def list_users() -> list:
        return []

    return app


def test_dependencies_are_wired_from_settings():
    deps = create_app_dependencies(_app(), Settings(APP_ENVIRONMENT="staging", APP_VERSION="9.9.9"))
    assert isinstance(deps.registry, FastAPIRouteRegistry)
    assert deps.inventory.environment == Environment.STAGING
    assert deps.access_policy.environment == Environment.STAGING
    assert deps.settings.app_version == "9.9.9"
    assert deps.inventory.snapshot()[0].path == "/api/v2/users"


def test_static_backend_freezes_routes():
    deps = create_app_dependencies(_app(), Settings(ROUTE_REGISTRY_BACKEND="static"))
    assert isinstance(deps.registry, StaticRouteRegistry)
    assert len(deps.registry.list_routes()) == 1


def test_publish_populates_app_state():
    app = _app()
    deps = create_app_dependencies(app, Settings())
    deps.publish(app)
    assert app.state.inventory is deps.inventory
    assert app.state.access_policy is deps.access_policy
    assert app.state.settings is deps.settings


def test_connect_and_close_lifecycle():
    deps = create_app_dependencies(_app(), Settings())
    assert deps.connected is False
    asyncio.run(deps.connect())
    assert deps.connected is True
    asyncio.run(deps.close())
    assert deps.connected is False
