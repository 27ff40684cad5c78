"""Tests for logging setup."""

from __future__ import annotations

import logging
import sys

import pytest
import structlog

from hrdesk.core.logging import setup_logging


@pytest.fixture(autouse=True)
def _restore_logging(monkeypatch):
    monkeypatch.delenv("HRDESK_LOG_LEVEL", raising=False)
    monkeypatch.delenv("HRDESK_LOG_FORMAT", raising=False)
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


class TestSetupLogging:
    def test_defaults_to_info_on_stderr(self):
        setup_logging()
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert [h.stream for h in root.handlers] == [sys.stderr]
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_explicit_level_overrides_env(self, monkeypatch):
        monkeypatch.setenv("HRDESK_LOG_LEVEL", "ERROR")
        setup_logging("DEBUG")
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_json_format_renders_events(self, monkeypatch, capsys):
        monkeypatch.setenv("HRDESK_LOG_FORMAT", "json")
        setup_logging()
        structlog.get_logger("hrdesk.test").info("fetch.direct", page=2)
        err = capsys.readouterr().err
        assert '"event": "fetch.direct"' in err
        assert '"page": 2' in err
