"""Async REST client for the dashboard backend — auth header, retries, JSON."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx
import structlog

from hrdesk.core.config import Settings
from hrdesk.errors import AuthenticationError, TransportError

log = structlog.get_logger("hrdesk.api")

_MAX_RETRIES = 3
_RETRY_BASE_DELAY = 0.5  # seconds

PageFetcher = Callable[[int, int, Mapping[str, str]], Awaitable[Any]]


class ApiClient:
    """Thin async wrapper around the dashboard REST API.

    Every method returns parsed JSON (``None`` for an empty or non-JSON body)
    or raises :class:`TransportError`.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers: dict[str, str] = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if settings.api_token:
            headers["Authorization"] = f"Bearer {settings.api_token}"
        else:
            log.warning("api.no_token", base_url=settings.api_base_url)
        self._client = httpx.AsyncClient(
            base_url=settings.api_base_url,
            headers=headers,
            timeout=settings.timeout,
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self._request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self._request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self._request("DELETE", path)

    def page_fetcher(self, path: str) -> PageFetcher:
        """Return an ``async (page, limit, filters) -> raw`` callable for *path*.

        Query parameters are omitted when absent, so an unset filter never
        reaches the backend as ``status=``.
        """

        async def fetch_page(page: int, limit: int, filters: Mapping[str, str]) -> Any:
            params: dict[str, Any] = {"page": page, "limit": limit}
            for key, value in filters.items():
                if value is not None and value != "":
                    params[key] = value
            return await self.get(path, params=params)

        return fetch_page

    # ── internal ───────────────────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Send a request with exponential backoff on 5xx and timeouts.

        4xx responses are not retried. Exhausted retries raise the last
        failure as :class:`TransportError`.
        """
        last_exc: TransportError | None = None
        for attempt in range(_MAX_RETRIES):
            try:
                resp = await self._client.request(method, url, params=params, json=json)
            except httpx.TimeoutException as exc:
                log.warning(
                    "api.timeout",
                    method=method,
                    url=url,
                    attempt=attempt + 1,
                    max_retries=_MAX_RETRIES,
                )
                last_exc = TransportError(f"{method} {url} timed out", url=url)
                last_exc.__cause__ = exc
            except httpx.HTTPError as exc:
                raise TransportError(f"{method} {url} failed: {exc}", url=url) from exc
            else:
                if resp.status_code < 500:
                    return self._handle_response(method, url, resp)
                log.warning(
                    "api.server_error",
                    method=method,
                    url=url,
                    status=resp.status_code,
                    attempt=attempt + 1,
                    max_retries=_MAX_RETRIES,
                )
                last_exc = TransportError(
                    f"{method} {url} returned {resp.status_code}",
                    status_code=resp.status_code,
                    url=url,
                    detail=self._error_detail(resp),
                )

            if attempt < _MAX_RETRIES - 1:
                delay = _RETRY_BASE_DELAY * (2**attempt)
                await asyncio.sleep(delay)

        raise last_exc  # type: ignore[misc]

    def _handle_response(self, method: str, url: str, resp: httpx.Response) -> Any:
        if resp.status_code == 401:
            raise AuthenticationError(
                f"{method} {url} rejected: authentication failed",
                status_code=401,
                url=url,
                detail=self._error_detail(resp),
            )
        if resp.status_code >= 400:
            if resp.status_code == 403:
                log.warning("api.forbidden", method=method, url=url)
            raise TransportError(
                f"{method} {url} returned {resp.status_code}",
                status_code=resp.status_code,
                url=url,
                detail=self._error_detail(resp),
            )
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            log.warning("api.non_json_body", method=method, url=url, status=resp.status_code)
            return None

    @staticmethod
    def _error_detail(resp: httpx.Response) -> str | None:
        """Pull ``message``/``detail`` from an error body, if any."""
        try:
            body = resp.json()
        except ValueError:
            return resp.text or None
        if isinstance(body, dict):
            for key in ("message", "detail", "error"):
                value = body.get(key)
                if isinstance(value, str):
                    return value
        return None
