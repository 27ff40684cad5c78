"""Exception taxonomy for hrdesk."""

from __future__ import annotations


class HrdeskError(Exception):
    """Base exception for all hrdesk errors."""


class TransportError(HrdeskError):
    """The HTTP call failed (network error, 4xx, or 5xx after retries).

    The pagination core never catches this; it propagates to the caller
    unmodified.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
        detail: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.url = url
        self.detail = detail
        super().__init__(message)


class AuthenticationError(TransportError):
    """Backend rejected the access token (HTTP 401)."""


class ConfigError(HrdeskError):
    """An ``HRDESK_*`` environment variable has an invalid value."""


class UnknownCollectionError(HrdeskError):
    """Raised when a collection name is not in the registry."""

    def __init__(self, name: str, known: list[str]) -> None:
        self.name = name
        self.known = known
        super().__init__(f"unknown collection {name!r}; expected one of: {', '.join(known)}")
