"""Transport adapter that enforces the access policy plan.

Authentication is not done here. An upstream layer is expected to set
``request.state.roles`` (an iterable of role names) for authenticated callers;
when it is absent the caller is anonymous.
"""
from __future__ import annotations

from typing import Any

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from apiguard.core import SERVICE_NAME
from apiguard.domain.access_policy import AccessPolicyHolder, DecisionKind


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).warning("")


class AccessPolicyMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, policy: AccessPolicyHolder) -> None:
        super().__init__(app)
        self._policy = policy

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        decision = self._policy.decision_for(path)
        roles = getattr(request.state, "roles", None)

        if decision.kind == DecisionKind.PERMIT_ALL:
            return await call_next(request)

        if decision.kind == DecisionKind.DENY_ALL:
            _log("access_denied", path=path, decision=str(decision))
            return Response(status_code=403, content="Forbidden")

        if roles is None:
            _log("access_unauthenticated", path=path, decision=str(decision))
            return Response(status_code=401, content="Authentication required")

        if decision.kind == DecisionKind.REQUIRE_ROLE and decision.role not in set(roles):
            _log("access_missing_role", path=path, decision=str(decision))
            return Response(status_code=403, content="Forbidden")

        return await call_next(request)
