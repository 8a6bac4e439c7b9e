from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from apiguard.composition import create_app_dependencies
from apiguard.config.settings import Settings
from apiguard.constants import Paths
from apiguard.core import SERVICE_NAME
from apiguard.infrastructure.security.access_policy_middleware import AccessPolicyMiddleware
from apiguard.routers.demo import legacy_router, quality_tests_router, users_router
from apiguard.routers.health import health_router, security_router
from apiguard.routers.inventory import inventory_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the service. Inventory and security-detail routes are not registered in production."""
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.bind(service_name=SERVICE_NAME, event="api_starting").info("")
        await dependencies.connect()
        try:
            yield
        finally:
            logger.bind(service_name=SERVICE_NAME, event="api_stopping").info("")
            await dependencies.close()

    docs = settings.docs_enabled
    app = FastAPI(
        title="API Inventory Guard",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url=Paths.DOCS_UI[0] if docs else None,
        redoc_url=Paths.DOCS_UI[1] if docs else None,
        openapi_url=Paths.DOCS_JSON if docs else None,
    )

    app.include_router(health_router)
    app.include_router(users_router)
    app.include_router(quality_tests_router)
    app.include_router(legacy_router)
    if not settings.environment.is_production:
        app.include_router(inventory_router)
        app.include_router(security_router)

    dependencies = create_app_dependencies(app, settings)
    dependencies.publish(app)
    if settings.access_policy_enforced:
        app.add_middleware(AccessPolicyMiddleware, policy=dependencies.access_policy)
    return app


app = create_app()
