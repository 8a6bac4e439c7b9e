"""Static route registry for local mode and tests.

Holds a fixed route table built at startup. Nothing is discovered; the
records are reported exactly as given.
"""
from __future__ import annotations

from typing import Iterable

from apiguard.domain.models import RouteRecord


class StaticRouteRegistry:
    def __init__(self, records: Iterable[RouteRecord] = ()) -> None:
        self.records: tuple[RouteRecord, ...] = tuple(records)

    def list_routes(self) -> tuple[RouteRecord, ...]:
        return self.records
