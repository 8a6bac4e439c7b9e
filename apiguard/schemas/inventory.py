from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from apiguard.constants import HealthStatus


class ErrorMessage(BaseModel):
    code: int
    message: str
    details: str | None = None


class ResponseEnvelope(BaseModel):
    success: bool = True
    data: Any = None
    error: ErrorMessage | None = None


class ApiEndpointResponse(BaseModel):
    path: str
    method: str
    version: str
    description: str | None = None
    documented: bool
    deprecated: bool
    requires_auth: bool
    roles: list[str] = Field(default_factory=list)
    environment: str
    last_modified: datetime
    owner: str
    status: str
    status_description: str
    controller_class: str
    method_name: str
    public_endpoint: bool
    risk_level: str


class ComplianceReportResponse(BaseModel):
    status: HealthStatus
    timestamp: datetime
    environment: str
    total_endpoints: int
    active_endpoints: int
    deprecated_endpoints: int
    undocumented_endpoints: int
    high_risk_endpoints: int
    inventory_complete: bool
    compliance_score: float
    degraded: bool = False
    error: str | None = None
