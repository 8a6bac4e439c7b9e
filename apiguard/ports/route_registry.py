"""Port: read-only snapshot of the registered routes. Implementations live in infrastructure."""
from __future__ import annotations

from typing import Protocol, Sequence

from apiguard.domain.models import RouteRecord


class RouteRegistry(Protocol):
    """Interface for route discovery. Raises RouteCollectionFailure when routes cannot be read."""

    def list_routes(self) -> Sequence[RouteRecord]: ...
