"""Helpers to serialize inventory domain objects into API responses."""
from __future__ import annotations

from typing import Any, Iterable

from fastapi import Response

from apiguard.domain.models import ApiEndpoint, ComplianceReport
from apiguard.schemas.inventory import (
    ApiEndpointResponse,
    ComplianceReportResponse,
    ErrorMessage,
    ResponseEnvelope,
)


def endpoint_response(endpoint: ApiEndpoint) -> ApiEndpointResponse:
    return ApiEndpointResponse(**endpoint.to_dict())


def report_response(report: ComplianceReport) -> ComplianceReportResponse:
    return ComplianceReportResponse(
        status=report.status,
        timestamp=report.timestamp,
        environment=report.environment.value,
        total_endpoints=report.total_endpoints,
        active_endpoints=report.active_endpoints,
        deprecated_endpoints=report.deprecated_endpoints,
        undocumented_endpoints=report.undocumented_endpoints,
        high_risk_endpoints=report.high_risk_endpoints,
        inventory_complete=report.inventory_complete,
        compliance_score=report.compliance_score,
        degraded=report.degraded,
        error=report.error,
    )


def ok(data: Any) -> Response:
    """Wrap data in the success envelope. Pydantic models are dumped in JSON mode."""
    return Response(
        status_code=200,
        media_type="application/json",
        content=ResponseEnvelope(success=True, data=_jsonable(data)).model_dump_json(),
    )


def endpoints_ok(endpoints: Iterable[ApiEndpoint]) -> Response:
    return ok([endpoint_response(e) for e in endpoints])


def error(status_code: int, message: str, details: str | None = None) -> Response:
    return Response(
        status_code=status_code,
        media_type="application/json",
        content=ResponseEnvelope(
            success=False,
            error=ErrorMessage(code=status_code, message=message, details=details),
        ).model_dump_json(),
    )


def _jsonable(data: Any) -> Any:
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json")
    if isinstance(data, list):
        return [_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: _jsonable(value) for key, value in data.items()}
    return data
