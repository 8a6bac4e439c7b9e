"""Settings for the inventory service."""
from __future__ import annotations

from typing import Any

from loguru import logger
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from apiguard.constants import DEFAULT_APP_VERSION, DEFAULT_ENVIRONMENT, DEFAULT_OWNER, Environment
from apiguard.core import SERVICE_NAME
from apiguard.domain.errors import ConfigurationMissing


def parse_environment(value: Any) -> Environment:
    if isinstance(value, Environment):
        return value
    text = str(value or "").strip().lower()
    if not text:
        raise ConfigurationMissing("environment is not configured")
    try:
        return Environment(text)
    except ValueError as exc:
        raise ConfigurationMissing(f"unknown environment: {text}") from exc


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    environment: Environment = Field(DEFAULT_ENVIRONMENT, validation_alias="APP_ENVIRONMENT")
    app_version: str = Field(DEFAULT_APP_VERSION, validation_alias="APP_VERSION")
    app_owner: str = Field(DEFAULT_OWNER, validation_alias="APP_OWNER")
    docs_enabled: bool = Field(True, validation_alias="DOCS_ENABLED")

    # Off reproduces the legacy score: any non-empty description counts as documented
    # and every endpoint counts as secured.
    strict_compliance: bool = Field(True, validation_alias="STRICT_COMPLIANCE")

    access_policy_enforced: bool = Field(False, validation_alias="ACCESS_POLICY_ENFORCED")
    route_registry_backend: str = Field("fastapi", validation_alias="ROUTE_REGISTRY_BACKEND")

    @field_validator("environment", mode="before")
    @classmethod
    def _environment_or_default(cls, value: Any) -> Environment:
        try:
            return parse_environment(value)
        except ConfigurationMissing as exc:
            logger.bind(
                service_name=SERVICE_NAME,
                event="configuration_fallback",
                setting="APP_ENVIRONMENT",
                reason=str(exc),
                default=DEFAULT_ENVIRONMENT.value,
            ).warning("")
            return DEFAULT_ENVIRONMENT

    @field_validator("app_version", "app_owner", mode="before")
    @classmethod
    def _blank_to_default(cls, value: Any, info: ValidationInfo) -> str:
        text = str(value or "").strip()
        if text:
            return text
        default = DEFAULT_APP_VERSION if info.field_name == "app_version" else DEFAULT_OWNER
        logger.bind(
            service_name=SERVICE_NAME,
            event="configuration_fallback",
            setting=info.field_name,
            default=default,
        ).warning("")
        return default
