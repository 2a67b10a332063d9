"""Tests for settings and service factories."""

import pytest
from pydantic import ValidationError

from qrmenu.core.config import EnvironmentMode, FallbackMode, Settings
from qrmenu.services import get_aggregator, get_repository, reset_services
from qrmenu.services.fallback import FailClosedPolicy, get_fallback_policy


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ENV_MODE", raising=False)
        monkeypatch.delenv("FALLBACK_MODE", raising=False)
        settings = Settings(_env_file=None)

        assert settings.env_mode == EnvironmentMode.DEVELOPMENT
        assert settings.use_sql_store is False
        assert settings.fallback_mode == FallbackMode.FAIL_OPEN
        assert settings.tenant_id == "main-restaurant"
        assert settings.cache_ttl_seconds == 1.0

    def test_modes_from_environment(self, monkeypatch):
        monkeypatch.setenv("ENV_MODE", "PRODUCTION")
        monkeypatch.setenv("FALLBACK_MODE", "fail-closed")
        settings = Settings(_env_file=None)

        assert settings.use_sql_store is True
        assert settings.fallback_mode == FallbackMode.FAIL_CLOSED

    def test_invalid_fallback_mode(self, monkeypatch):
        monkeypatch.setenv("FALLBACK_MODE", "sometimes")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_cors_origins_list(self):
        settings = Settings(_env_file=None, cors_allow_origins="http://a.test, http://b.test")
        assert settings.cors_allow_origins_list == ["http://a.test", "http://b.test"]


def test_fallback_policy_factory():
    assert isinstance(get_fallback_policy(FallbackMode.FAIL_CLOSED), FailClosedPolicy)
    assert get_fallback_policy(FallbackMode.FAIL_OPEN).mode == FallbackMode.FAIL_OPEN


def test_service_factories_share_state():
    reset_services()
    repository = get_repository()
    aggregator = get_aggregator()

    assert aggregator.repository is repository
    assert aggregator.cache is repository.cache
    assert get_repository() is repository

    reset_services()
    assert get_repository() is not repository
