"""
HTTP client factory utilities for the eligibility report runner.

Centralizes construction of the shared `httpx.AsyncClient` and of the remote
record source bound to it. One client is opened per run and reused for every
request; it is closed when the run's context exits.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from eligibility.config import Settings, get_settings
from eligibility.sources.remote import RemoteRecordSource


def build_client(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Create an AsyncClient configured from settings.

    Parameters
    ----------
    settings : Settings, optional
        Effective settings; defaults to the cached process settings.
    transport : httpx.AsyncBaseTransport, optional
        Transport override (e.g. `httpx.MockTransport` in tests).

    Returns
    -------
    httpx.AsyncClient
        A new client; the caller owns and must close it.
    """
    settings = settings or get_settings()
    return httpx.AsyncClient(
        timeout=settings.http_timeout_seconds,
        headers={"Accept": "application/json"},
        transport=transport,
    )


def build_remote_source(client: httpx.AsyncClient, settings: Optional[Settings] = None) -> RemoteRecordSource:
    """Bind a RemoteRecordSource to `client` using the configured endpoints."""
    settings = settings or get_settings()
    return RemoteRecordSource(
        client,
        base_url=settings.source_base_url,
        school_code=settings.source_school_code,
        cert=settings.source_cert,
    )


@asynccontextmanager
async def remote_source(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[RemoteRecordSource]:
    """
    Context manager yielding a remote source whose client is closed on exit.

    Example
    -------
        async with remote_source() as source:
            record = await source.fetch(101)
    """
    client = build_client(settings, transport=transport)
    try:
        yield build_remote_source(client, settings)
    finally:
        await client.aclose()


__all__ = ["build_client", "build_remote_source", "remote_source"]
