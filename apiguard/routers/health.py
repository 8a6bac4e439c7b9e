from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import APIRouter, Request, Response
from loguru import logger

from apiguard.config.settings import Settings
from apiguard.constants import Paths
from apiguard.core import SERVICE_NAME
from apiguard.domain.access_policy import AccessPolicyHolder, DecisionKind
from apiguard.domain.models import ComplianceReport
from apiguard.routers.serializers import ok, report_response
from apiguard.routers.utils import access_policy, app_settings, inventory_aggregator

health_router = APIRouter(tags=["Health"])
security_router = APIRouter(tags=["Health"])

API_VERSION = "v2"
SUPPORTED_VERSIONS = ["v2"]
DEPRECATED_VERSIONS = ["v1"]
COMPLIANCE_THRESHOLD = 80.0
DOCUMENTATION_TARGET = 90.0
REVIEW_INTERVAL_DAYS = 30


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _docs_exposed(settings: Settings) -> bool:
    return settings.docs_enabled and settings.environment.is_production


def security_alerts(report: ComplianceReport, settings: Settings) -> dict[str, list[str]]:
    critical = ["Documentation UI enabled in production"] if _docs_exposed(settings) else []
    warning = (
        [f"{report.high_risk_endpoints} high-risk endpoints found"] if report.high_risk_endpoints else []
    )
    info = (
        [f"{report.undocumented_endpoints} undocumented endpoints"] if report.undocumented_endpoints else []
    )
    if report.degraded:
        warning.append("Route inventory could not be collected")
    return {"critical_alerts": critical, "warning_alerts": warning, "info_alerts": info}


def recommendations(report: ComplianceReport, settings: Settings) -> list[str]:
    result: list[str] = []
    if _docs_exposed(settings):
        result.append("CRITICAL: disable the documentation UI in production")
    if report.undocumented_endpoints:
        result.append(f"Document {report.undocumented_endpoints} missing endpoints")
    if report.deprecated_endpoints:
        result.append(f"Review {report.deprecated_endpoints} deprecated endpoints")
    if not result:
        result.append("Security configuration is optimal")
    return result


def security_recommendations(report: ComplianceReport, production_safe: bool) -> list[str]:
    result: list[str] = []
    if not production_safe:
        result.append("Set APP_ENVIRONMENT=production and DOCS_ENABLED=false")
    if report.high_risk_endpoints:
        result.append("Review and secure high-risk endpoints")
    if report.compliance_score < DOCUMENTATION_TARGET:
        result.append("Improve documentation to raise the compliance score")
    return result


def _exposed(policy: AccessPolicyHolder, path: str) -> bool:
    return policy.decision_for(path).kind != DecisionKind.DENY_ALL


def _reachable(settings: Settings, policy: AccessPolicyHolder, path: str) -> bool:
    """A path the app serves is reachable unless an enforced plan denies it."""
    return not settings.access_policy_enforced or _exposed(policy, path)


def docs_served(settings: Settings, policy: AccessPolicyHolder) -> bool:
    return settings.docs_enabled and _reachable(settings, policy, Paths.DOCS_UI[0])


def inventory_served(settings: Settings, policy: AccessPolicyHolder) -> bool:
    # The inventory router is not registered in production.
    return not settings.environment.is_production and _reachable(settings, policy, Paths.INVENTORY)


def compliance_summary(report: ComplianceReport) -> dict[str, Any]:
    return {
        "inventory_complete": report.inventory_complete,
        "compliance_score": report.compliance_score,
        "total_endpoints": report.total_endpoints,
        "documented_endpoints": report.documented_endpoints,
        "deprecated_endpoints": report.deprecated_endpoints,
        "high_risk_endpoints": report.high_risk_endpoints,
    }


@health_router.get(
    "/health",
    summary="API health",
    description="Service status, environment, inventory compliance summary, security configuration, alerts and recommendations.",
    responses={200: {"description": "Health status returned."}},
)
async def get_health(request: Request) -> Response:
    settings = app_settings(request)
    policy = access_policy(request)
    aggregator = inventory_aggregator(request)

    data: dict[str, Any] = {
        "status": "UP",
        "timestamp": datetime.now(timezone.utc),
        "version": settings.app_version,
        "environment": settings.environment.value,
        "security_config": {
            "environment": settings.environment.value,
            "docs_enabled": settings.docs_enabled,
            "docs_safe": not _docs_exposed(settings),
            "inventory_endpoint_available": inventory_served(settings, policy),
            "access_policy_enforced": settings.access_policy_enforced,
        },
        "compliance": None,
        "inventory_metrics": None,
        "security_alerts": None,
        "recommendations": None,
    }
    if aggregator is not None:
        report = aggregator.compliance_report()
        data["compliance"] = compliance_summary(report)
        data["inventory_metrics"] = report_response(report)
        data["security_alerts"] = security_alerts(report, settings)
        data["recommendations"] = recommendations(report, settings)

    _log("health_generated", environment=settings.environment.value)
    return ok(data)


@health_router.get(
    "/health/version",
    summary="Version information",
    description="Current version, environment, supported and deprecated API versions, documentation and inventory links, and the inventory compliance summary.",
    responses={200: {"description": "Version information returned."}},
)
async def get_version(request: Request) -> Response:
    settings = app_settings(request)
    policy = access_policy(request)
    aggregator = inventory_aggregator(request)
    env = settings.environment.value
    now = datetime.now(timezone.utc)

    docs_url = Paths.DOCS_UI[0] if docs_served(settings, policy) else f"Disabled in {env}"
    inventory_url = Paths.INVENTORY if inventory_served(settings, policy) else f"Disabled in {env}"
    compliance = compliance_summary(aggregator.compliance_report()) if aggregator is not None else None
    return ok(
        {
            "current_version": settings.app_version,
            "api_version": API_VERSION,
            "environment": env,
            "supported_versions": SUPPORTED_VERSIONS,
            "deprecated_versions": DEPRECATED_VERSIONS,
            "documentation_url": docs_url,
            "inventory_url": inventory_url,
            "compliance_info": {
                "owasp_api_security": "API9:2023 - Improper Inventory Management",
                "next_review_due": now + timedelta(days=REVIEW_INTERVAL_DAYS),
            },
            "compliance": compliance,
        }
    )


@health_router.get(
    "/health/live",
    summary="Liveness probe",
    description="Returns 200 if the API process is running.",
    responses={200: {"description": "Service is alive."}},
)
async def live() -> dict:
    return {"status": "ok"}


@health_router.get(
    "/health/ready",
    summary="Readiness probe",
    description="Returns 200 only when the inventory is wired and the route registry can be read.",
    responses={
        200: {"description": "Inventory is ready."},
        503: {"description": "Inventory not initialized or route registry unreadable."},
    },
)
async def ready(request: Request) -> Response:
    aggregator = inventory_aggregator(request)
    if aggregator is None:
        _log("components_not_initialized")
        return Response(status_code=503, content="Not ready")
    if aggregator.collect().degraded:
        _log("route_registry_not_ready")
        return Response(status_code=503, content="Route registry not ready")
    return Response(status_code=200, content="OK")


@security_router.get(
    Paths.HEALTH_SECURITY,
    summary="Security status",
    description="Environment configuration, exposure of sensitive endpoints derived from the access policy, and compliance status. Not registered in production.",
    responses={200: {"description": "Security status returned."}},
)
async def get_security(request: Request) -> Response:
    settings = app_settings(request)
    policy = access_policy(request)
    aggregator = inventory_aggregator(request)
    if aggregator is None:
        return Response(status_code=503, content="Inventory not available")

    report = aggregator.compliance_report()
    production_safe = settings.environment.is_production and not settings.docs_enabled
    overall = "SECURE" if report.high_risk_endpoints == 0 and production_safe else "WARNING"

    return ok(
        {
            "overall_status": overall,
            "environment": settings.environment.value,
            "production_ready": production_safe,
            "endpoint_security": {
                "docs_exposed": _docs_exposed(settings),
                "inventory_exposed": inventory_served(settings, policy),
                "high_risk_count": report.high_risk_endpoints,
                "deprecated_count": report.deprecated_endpoints,
            },
            "access_policy": [
                {"path": rule.path_pattern, "decision": str(rule.decision)} for rule in policy.plan
            ],
            "compliance_status": {
                "api9_2023_compliant": report.compliance_score > COMPLIANCE_THRESHOLD,
                "inventory_complete": report.inventory_complete,
                "documentation_complete": report.undocumented_endpoints == 0,
            },
            "recommendations": security_recommendations(report, production_safe),
        }
    )
