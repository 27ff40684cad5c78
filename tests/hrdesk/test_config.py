"""Tests for settings and the collection registry."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from hrdesk.core.config import Settings, load_settings
from hrdesk.errors import ConfigError, UnknownCollectionError
from hrdesk.registry import COLLECTIONS, get_collection


def _clean_env() -> dict[str, str]:
    return {k: v for k, v in os.environ.items() if not k.startswith("HRDESK_")}


class TestLoadSettings:
    def test_defaults(self):
        with patch.dict(os.environ, _clean_env(), clear=True):
            settings = load_settings()
        assert settings == Settings()
        assert settings.default_page_size == 25
        assert settings.max_fallback_pages == 100
        assert settings.max_aggregate_pages == 50

    def test_overrides(self):
        env = _clean_env() | {
            "HRDESK_API_BASE_URL": "https://hr.example.com/api/",
            "HRDESK_API_TOKEN": "abc",
            "HRDESK_DEFAULT_PAGE_SIZE": "10",
            "HRDESK_HTTP_TIMEOUT": "5.5",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = load_settings()
        assert settings.api_base_url == "https://hr.example.com/api"
        assert settings.api_token == "abc"
        assert settings.default_page_size == 10
        assert settings.timeout == 5.5

    @pytest.mark.parametrize("value", ["ten", "0", "-3"])
    def test_bad_int_rejected(self, value):
        env = _clean_env() | {"HRDESK_MAX_FALLBACK_PAGES": value}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ConfigError):
                load_settings()

    def test_empty_token_is_none(self):
        env = _clean_env() | {"HRDESK_API_TOKEN": ""}
        with patch.dict(os.environ, env, clear=True):
            assert load_settings().api_token is None


class TestRegistry:
    def test_known_collections(self):
        assert get_collection("assets").path == "/assets"
        assert "assetRequests" in get_collection("asset-requests").entity_keys

    def test_audit_logs_counted_by_method(self):
        logs = get_collection("system-logs")
        assert logs.path == "/system/logs"
        assert logs.status_field == "method"

    def test_every_list_screen_registered(self):
        expected = {
            "assets",
            "asset-requests",
            "promotions",
            "performance-reviews",
            "system-logs",
            "timesheets",
        }
        assert expected <= set(COLLECTIONS)

    def test_unknown_collection(self):
        with pytest.raises(UnknownCollectionError, match="payroll"):
            get_collection("payroll")
