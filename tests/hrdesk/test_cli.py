"""Tests for CLI commands — backend mocked with httpx.MockTransport."""

from __future__ import annotations

import json
import logging
from unittest.mock import patch

import click
import httpx
import pytest
import structlog
from click.testing import CliRunner

from hrdesk.cli import _parse_filters, main
from hrdesk.core.api_client import ApiClient

ROWS = [
    {"id": 1, "status": "pending"},
    {"id": 2, "status": "approved"},
    {"id": 3, "status": "pending"},
]


def _handler(request: httpx.Request) -> httpx.Response:
    rows = ROWS
    status = request.url.params.get("status")
    if status:
        rows = [r for r in rows if r["status"] == status]
    return httpx.Response(
        200,
        json={"items": rows, "total": len(rows), "page": 1, "limit": 25, "totalPages": 1},
    )


def _mock_client(settings):
    return ApiClient(settings, transport=httpx.MockTransport(_handler))


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setenv("HRDESK_LOG_LEVEL", "ERROR")
    monkeypatch.setenv("HRDESK_API_TOKEN", "tok")
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


class TestParseFilters:
    def test_pairs(self):
        assert _parse_filters(("status=pending", "category = laptop")) == {
            "status": "pending",
            "category": "laptop",
        }

    def test_value_may_contain_equals(self):
        assert _parse_filters(("q=a=b",)) == {"q": "a=b"}

    def test_malformed(self):
        with pytest.raises(click.BadParameter):
            _parse_filters(("status",))


class TestCommands:
    def test_collections(self):
        result = CliRunner().invoke(main, ["collections"])
        assert result.exit_code == 0
        assert "asset-requests" in result.stdout
        assert "/system/logs" in result.stdout

    def test_list_with_status(self):
        with patch("hrdesk.cli._make_client", _mock_client):
            result = CliRunner().invoke(main, ["list", "asset-requests", "--status", "pending"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert [row["id"] for row in payload["data"]] == [1, 3]
        assert payload["meta"]["total"] == 2
        assert payload["meta"]["server_reported_totals"] is True

    def test_counts(self):
        with patch("hrdesk.cli._make_client", _mock_client):
            result = CliRunner().invoke(main, ["counts", "promotions"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["collection"] == "promotions"
        assert payload["counts"] == {"total": 3, "pending": 2, "approved": 1, "rejected": 0}

    def test_unknown_collection_exits_nonzero(self):
        result = CliRunner().invoke(main, ["list", "payroll"])
        assert result.exit_code == 1
        assert "unknown collection" in result.output

    def test_bad_config_exits_nonzero(self, monkeypatch):
        monkeypatch.setenv("HRDESK_DEFAULT_PAGE_SIZE", "lots")
        result = CliRunner().invoke(main, ["list", "assets"])
        assert result.exit_code == 1
        assert "HRDESK_DEFAULT_PAGE_SIZE" in result.output
