"""Route registry factory: selects implementation from config."""
from __future__ import annotations

from fastapi import FastAPI

from apiguard.config.settings import Settings
from apiguard.ports.route_registry import RouteRegistry
from apiguard.infrastructure.routing.fastapi_registry import FastAPIRouteRegistry
from apiguard.infrastructure.routing.static_registry import StaticRouteRegistry


def create_route_registry(settings: Settings, app: FastAPI) -> RouteRegistry:
    """
    fastapi -> live view of app.routes, re-read on every query.
    static  -> route table frozen once from app.routes when the registry is built.
    """
    backend = settings.route_registry_backend.strip().lower()

    if backend == "fastapi":
        return FastAPIRouteRegistry(app)

    if backend == "static":
        return StaticRouteRegistry(FastAPIRouteRegistry(app).list_routes())

    raise ValueError(f"Unsupported route registry backend: {backend}")
