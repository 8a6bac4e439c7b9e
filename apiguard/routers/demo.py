"""Demo resource routes. Static data only; they exist so the inventory has real routes to classify."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from apiguard.constants import Paths

users_router = APIRouter(prefix=Paths.USERS, tags=["Users"])
quality_tests_router = APIRouter(prefix=Paths.QUALITY_TESTS, tags=["Quality tests"])
legacy_router = APIRouter(prefix="/legacy", tags=["Legacy"], include_in_schema=False)

_USERS: dict[int, dict[str, Any]] = {
    1: {"id": 1, "name": "Ana Torres", "email": "ana@example.com"},
    2: {"id": 2, "name": "Luis Ramos", "email": "luis@example.com"},
}
_QUALITY_TESTS: dict[int, dict[str, Any]] = {
    1: {"id": 1, "sample_point": "Reservoir A", "ph": 7.2, "turbidity_ntu": 0.8},
}


class UserIn(BaseModel):
    name: str
    email: str


class QualityTestIn(BaseModel):
    sample_point: str
    ph: float
    turbidity_ntu: float


def _found(table: dict[int, dict[str, Any]], item_id: int) -> dict[str, Any]:
    item = table.get(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Not found")
    return item


@users_router.get("")
async def list_users() -> list[dict[str, Any]]:
    return list(_USERS.values())


@users_router.get("/{user_id}")
async def get_user(user_id: int) -> dict[str, Any]:
    return _found(_USERS, user_id)


@users_router.post("", status_code=201)
async def create_user(body: UserIn) -> dict[str, Any]:
    return {"id": max(_USERS) + 1, **body.model_dump()}


@users_router.put("/{user_id}")
async def update_user(user_id: int, body: UserIn) -> dict[str, Any]:
    _found(_USERS, user_id)
    return {"id": user_id, **body.model_dump()}


@users_router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: int) -> None:
    _found(_USERS, user_id)


@quality_tests_router.get("")
async def list_quality_tests() -> list[dict[str, Any]]:
    return list(_QUALITY_TESTS.values())


@quality_tests_router.get("/{test_id}")
async def get_quality_test(test_id: int) -> dict[str, Any]:
    return _found(_QUALITY_TESTS, test_id)


@quality_tests_router.post("", status_code=201)
async def create_quality_test(body: QualityTestIn) -> dict[str, Any]:
    return {"id": max(_QUALITY_TESTS) + 1, **body.model_dump()}


@legacy_router.get("/old-endpoint")
async def old_endpoint() -> str:
    return "Legacy endpoint, kept for old clients"


@legacy_router.get("/internal/config")
async def internal_config() -> dict[str, Any]:
    return {"feature_flags": {"legacy_mode": True}}
