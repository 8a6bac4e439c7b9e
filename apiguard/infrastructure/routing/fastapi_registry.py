"""Route registry backed by the live FastAPI routing table.

Included routers are resolved through ``fastapi.routing.iter_route_contexts``,
the same walk the OpenAPI generator uses, so prefixes from ``include_router``
are applied. Mounted sub-applications are walked recursively under the mount
path; a mount whose app exposes no route table (static files, plain ASGI apps)
is reported as a single opaque entry.
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, Sequence

from fastapi import FastAPI
from fastapi.routing import iter_route_contexts
from loguru import logger
from starlette.routing import BaseRoute, Mount, Route, WebSocketRoute

from apiguard.constants import UNKNOWN
from apiguard.core import SERVICE_NAME
from apiguard.domain.errors import RouteCollectionFailure
from apiguard.domain.models import RouteRecord

_IGNORED_METHODS = {"HEAD", "OPTIONS"}
WEBSOCKET_METHOD = "WS"


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).debug("")


def handler_names(endpoint: Callable[..., Any] | None) -> tuple[str, str]:
    """Return (type name, method name) for a route handler.

    Methods report their class; plain functions report the last segment of
    their module, which is where routers group handlers.
    """
    if endpoint is None:
        return UNKNOWN, UNKNOWN
    method_name = getattr(endpoint, "__name__", None) or UNKNOWN
    owner = getattr(endpoint, "__self__", None)
    if owner is not None:
        return type(owner).__name__, method_name
    qualname = getattr(endpoint, "__qualname__", "") or ""
    if "." in qualname and "<locals>" not in qualname:
        return qualname.rsplit(".", 1)[0], method_name
    module = getattr(endpoint, "__module__", None) or UNKNOWN
    return module.rsplit(".", 1)[-1], method_name


def _record(path: str, method: str, endpoint: Callable[..., Any] | None) -> RouteRecord:
    type_name, method_name = handler_names(endpoint)
    return RouteRecord(
        path_pattern=path,
        http_method=method,
        handler_type_name=type_name,
        handler_method_name=method_name,
    )


class FastAPIRouteRegistry:
    """Reads the app's routes at call time; never mutates routing."""

    def __init__(self, app: FastAPI) -> None:
        self._app = app

    def list_routes(self) -> list[RouteRecord]:
        try:
            routes = list(self._app.routes)
        except Exception as exc:
            raise RouteCollectionFailure(f"route table unavailable: {exc}") from exc
        return list(self._walk(routes, ""))

    def _walk(self, routes: Sequence[BaseRoute], prefix: str) -> Iterator[RouteRecord]:
        for context in iter_route_contexts(routes):
            original = context.original_route
            path = context.path
            if not isinstance(path, str):
                raise RouteCollectionFailure(f"route without a path: {original!r}")

            if isinstance(original, Mount):
                yield from self._mount_records(context, prefix + path)
            elif isinstance(original, WebSocketRoute):
                yield _record(prefix + path, WEBSOCKET_METHOD, getattr(original, "endpoint", None))
            elif isinstance(original, Route):
                if not prefix + path:
                    raise RouteCollectionFailure(f"route without a path: {original!r}")
                yield from self._http_records(prefix + path, context.methods, original.endpoint)
            else:
                _log("route_skipped", route_type=type(original).__name__, path=prefix + path)

    def _mount_records(self, mount: Any, path: str) -> Iterator[RouteRecord]:
        nested = list(getattr(mount, "routes", None) or ())
        if nested:
            yield from self._walk(nested, path)
            return
        # Opaque ASGI app: the mount point is the only thing we can see.
        app = getattr(mount, "app", None)
        yield RouteRecord(
            path_pattern=path or "/",
            http_method=UNKNOWN,
            handler_type_name=type(app).__name__ if app is not None else UNKNOWN,
            handler_method_name=getattr(mount, "name", None) or UNKNOWN,
        )

    def _http_records(
        self,
        path: str,
        methods: Iterable[str] | None,
        endpoint: Callable[..., Any] | None,
    ) -> Iterator[RouteRecord]:
        kept = sorted(m for m in (methods or ()) if m not in _IGNORED_METHODS)
        for method in kept or [UNKNOWN]:
            yield _record(path, method, endpoint)

