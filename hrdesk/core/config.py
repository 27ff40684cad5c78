"""Runtime settings — read once from ``HRDESK_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from hrdesk.errors import ConfigError

DEFAULT_API_BASE_URL = "http://localhost:3001"
DEFAULT_PAGE_SIZE = 25
MAX_FALLBACK_PAGES = 100
MAX_AGGREGATE_PAGES = 50
WALK_PAGE_SIZE = 100
HTTP_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    """Client configuration shared by every list view."""

    api_base_url: str = DEFAULT_API_BASE_URL
    api_token: str | None = None
    default_page_size: int = DEFAULT_PAGE_SIZE
    max_fallback_pages: int = MAX_FALLBACK_PAGES
    # Separate, smaller bound for walks that pull a whole unrelated
    # collection for cross-referencing.
    max_aggregate_pages: int = MAX_AGGREGATE_PAGES
    walk_page_size: int = WALK_PAGE_SIZE
    timeout: float = HTTP_TIMEOUT


def _env_int(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ConfigError(f"{key} must be >= 1, got {value}")
    return value


def _env_float(key: str, default: float) -> float:
    raw = os.environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{key} must be > 0, got {value}")
    return value


def load_settings() -> Settings:
    """Build :class:`Settings` from the environment.

    Reads:
        HRDESK_API_BASE_URL        — backend root (default: http://localhost:3001)
        HRDESK_API_TOKEN           — bearer token, omitted when unset
        HRDESK_DEFAULT_PAGE_SIZE   — rows per page on every list (default: 25)
        HRDESK_MAX_FALLBACK_PAGES  — page-walk safety bound (default: 100)
        HRDESK_MAX_AGGREGATE_PAGES — cross-reference walk bound (default: 50)
        HRDESK_WALK_PAGE_SIZE      — page size used while walking (default: 100)
        HRDESK_HTTP_TIMEOUT        — transport timeout in seconds (default: 30)

    Raises ``ConfigError`` on malformed numeric values.
    """
    token = os.environ.get("HRDESK_API_TOKEN") or None
    return Settings(
        api_base_url=os.environ.get("HRDESK_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
        api_token=token,
        default_page_size=_env_int("HRDESK_DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        max_fallback_pages=_env_int("HRDESK_MAX_FALLBACK_PAGES", MAX_FALLBACK_PAGES),
        max_aggregate_pages=_env_int("HRDESK_MAX_AGGREGATE_PAGES", MAX_AGGREGATE_PAGES),
        walk_page_size=_env_int("HRDESK_WALK_PAGE_SIZE", WALK_PAGE_SIZE),
        timeout=_env_float("HRDESK_HTTP_TIMEOUT", HTTP_TIMEOUT),
    )
