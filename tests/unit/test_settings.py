import pytest

from apiguard.config.settings import Settings, parse_environment
from apiguard.constants import Environment
from apiguard.domain.errors import ConfigurationMissing


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("APP_ENVIRONMENT", "APP_VERSION", "APP_OWNER", "DOCS_ENABLED", "STRICT_COMPLIANCE"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings()
    assert settings.environment == Environment.DEVELOPMENT
    assert settings.app_version == "1.0.0"
    assert settings.docs_enabled is True
    assert settings.strict_compliance is True
    assert settings.access_policy_enforced is False
    assert settings.route_registry_backend == "fastapi"


def test_reads_environment_variables(monkeypatch):
    monkeypatch.setenv("APP_ENVIRONMENT", " Production ")
    monkeypatch.setenv("APP_VERSION", "2.4.0")
    monkeypatch.setenv("DOCS_ENABLED", "false")
    settings = Settings()
    assert settings.environment == Environment.PRODUCTION
    assert settings.app_version == "2.4.0"
    assert settings.docs_enabled is False


@pytest.mark.parametrize("value", ["", "qa", "prod"])
def test_unknown_or_blank_environment_falls_back_to_development(monkeypatch, value):
    monkeypatch.setenv("APP_ENVIRONMENT", value)
    assert Settings().environment == Environment.DEVELOPMENT


def test_blank_version_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("APP_VERSION", "   ")
    assert Settings().app_version == "1.0.0"


def test_parse_environment_raises_configuration_missing():
    assert parse_environment("staging") == Environment.STAGING
    assert parse_environment(Environment.PRODUCTION) == Environment.PRODUCTION
    with pytest.raises(ConfigurationMissing):
        parse_environment(None)
    with pytest.raises(ConfigurationMissing):
        parse_environment("moon")
