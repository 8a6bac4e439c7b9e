from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request, Response
from loguru import logger

from apiguard.constants import HealthStatus
from apiguard.core import SERVICE_NAME
from apiguard.routers.serializers import endpoints_ok, error, ok, report_response
from apiguard.routers.utils import inventory_aggregator

inventory_router = APIRouter(prefix="/inventory", tags=["Inventory"])


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _warn(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).warning("")


def _unavailable() -> Response:
    _warn("inventory_not_initialized")
    return error(503, "Inventory not available")


@inventory_router.get(
    "",
    summary="Full API inventory",
    description="Returns every registered endpoint with method, version, status, auth requirement, risk level and ownership. Development and staging only.",
    responses={
        200: {"description": "Inventory generated."},
        404: {"description": "Not registered in production."},
    },
)
async def get_inventory(request: Request) -> Response:
    aggregator = inventory_aggregator(request)
    if aggregator is None:
        return _unavailable()
    endpoints = aggregator.snapshot()
    _log("inventory_requested", endpoints=len(endpoints))
    return endpoints_ok(endpoints)


@inventory_router.get(
    "/active",
    summary="Active endpoints",
    description="Returns only endpoints whose lifecycle status is ACTIVE.",
    responses={200: {"description": "Active endpoints returned."}},
)
async def get_active(request: Request) -> Response:
    aggregator = inventory_aggregator(request)
    if aggregator is None:
        return _unavailable()
    return endpoints_ok(aggregator.active())


@inventory_router.get(
    "/deprecated",
    summary="Deprecated endpoints",
    description="Returns endpoints flagged deprecated. These should be migrated or removed.",
    responses={200: {"description": "Deprecated endpoints returned."}},
)
async def get_deprecated(request: Request) -> Response:
    aggregator = inventory_aggregator(request)
    if aggregator is None:
        return _unavailable()
    endpoints = list(aggregator.deprecated())
    if endpoints:
        _warn("deprecated_endpoints_found", count=len(endpoints))
    return endpoints_ok(endpoints)


@inventory_router.get(
    "/undocumented",
    summary="Undocumented endpoints",
    description="Returns endpoints without a real description. Undocumented endpoints are often forgotten or unmanaged APIs.",
    responses={200: {"description": "Undocumented endpoints returned."}},
)
async def get_undocumented(request: Request) -> Response:
    aggregator = inventory_aggregator(request)
    if aggregator is None:
        return _unavailable()
    endpoints = list(aggregator.undocumented())
    if endpoints:
        _warn("undocumented_endpoints_found", count=len(endpoints))
    return endpoints_ok(endpoints)


@inventory_router.get(
    "/high-risk",
    summary="High-risk endpoints",
    description="Returns endpoints classified HIGH risk: internal endpoints or documentation exposed in production.",
    responses={200: {"description": "High-risk endpoints returned."}},
)
async def get_high_risk(request: Request) -> Response:
    aggregator = inventory_aggregator(request)
    if aggregator is None:
        return _unavailable()
    endpoints = list(aggregator.high_risk())
    if endpoints:
        logger.bind(service_name=SERVICE_NAME, event="high_risk_endpoints_found", count=len(endpoints)).error("")
    return endpoints_ok(endpoints)


@inventory_router.get(
    "/health",
    summary="Inventory health report",
    description="Totals, active vs deprecated, undocumented count, high-risk count and the compliance score.",
    responses={200: {"description": "Compliance report generated."}},
)
async def get_inventory_health(request: Request) -> Response:
    aggregator = inventory_aggregator(request)
    if aggregator is None:
        return _unavailable()
    report = aggregator.compliance_report()
    if report.status == HealthStatus.HEALTHY:
        _log("inventory_healthy", score=report.compliance_score)
    return ok(report_response(report))
