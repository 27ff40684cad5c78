"""CLI entry point: hrdesk.

Subcommands:
    hrdesk collections                               # List known collections
    hrdesk list assets --status available --page 2   # Print one page as JSON
    hrdesk counts asset-requests                     # Print status counts
"""

from __future__ import annotations

import asyncio
from typing import Any

import click

from hrdesk.core.api_client import ApiClient
from hrdesk.core.config import Settings, load_settings
from hrdesk.core.logging import setup_logging
from hrdesk.errors import HrdeskError
from hrdesk.pagination.models import PageRequest, PageResult
from hrdesk.registry import COLLECTIONS, build_fetcher, get_collection
from hrdesk.schemas import PaginatedResponse, StatusCountsResponse


def _make_client(settings: Settings) -> ApiClient:
    return ApiClient(settings)


def _parse_filters(pairs: tuple[str, ...]) -> dict[str, str]:
    filters: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--filter")
        key, value = pair.split("=", 1)
        key = key.strip()
        if not key:
            raise click.BadParameter(f"empty filter key in {pair!r}", param_hint="--filter")
        filters[key] = value.strip()
    return filters


def _load_settings() -> Settings:
    try:
        return load_settings()
    except HrdeskError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """hrdesk: query the HR/asset dashboard's paginated lists."""
    setup_logging("DEBUG" if verbose else None)


@main.command("collections")
def list_collections() -> None:
    """Show the registered collections and their status values."""
    for name in sorted(COLLECTIONS):
        c = COLLECTIONS[name]
        statuses = ", ".join(c.statuses) if c.statuses else "-"
        click.echo(f"{name:<22}{c.path:<24}{statuses}")


@main.command("list")
@click.argument("collection")
@click.option("--page", default=1, show_default=True, type=click.IntRange(min=1))
@click.option("--limit", default=None, type=click.IntRange(min=1), help="Rows per page")
@click.option("--status", default=None, help="Shortcut for --filter <status_field>=<value>")
@click.option("filter_pairs", "--filter", multiple=True, help="key=value, repeatable")
def list_page(
    collection: str,
    page: int,
    limit: int | None,
    status: str | None,
    filter_pairs: tuple[str, ...],
) -> None:
    """Fetch one page of COLLECTION and print it as JSON."""
    settings = _load_settings()
    filters = _parse_filters(filter_pairs)
    try:
        coll = get_collection(collection)
        if status:
            filters[coll.status_field] = status
        request = PageRequest(page=page, limit=limit or settings.default_page_size, filters=filters)
        result = asyncio.run(_fetch_page(settings, coll.name, request))
    except HrdeskError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(PaginatedResponse.from_result(result).model_dump_json(indent=2))


@main.command("counts")
@click.argument("collection")
def counts(collection: str) -> None:
    """Print collection-wide status counts for COLLECTION."""
    settings = _load_settings()
    try:
        coll = get_collection(collection)
        result = asyncio.run(_fetch_counts(settings, coll.name))
    except HrdeskError as exc:
        raise click.ClickException(str(exc)) from exc
    payload = StatusCountsResponse(collection=coll.name, counts=result)
    click.echo(payload.model_dump_json(indent=2))


async def _fetch_page(settings: Settings, name: str, request: PageRequest) -> PageResult[Any]:
    async with _make_client(settings) as client:
        fetcher = build_fetcher(client, get_collection(name), settings)
        return await fetcher.fetch(request)


async def _fetch_counts(settings: Settings, name: str) -> dict[str, int]:
    async with _make_client(settings) as client:
        fetcher = build_fetcher(client, get_collection(name), settings)
        return await fetcher.fetch_counts()


if __name__ == "__main__":
    main()
