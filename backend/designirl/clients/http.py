"""Shared httpx plumbing for the outbound clients."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from designirl.config import settings


@asynccontextmanager
async def borrow_client(client: httpx.AsyncClient | None = None) -> AsyncIterator[httpx.AsyncClient]:
    """Yield ``client`` if given, otherwise a short-lived AsyncClient."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=settings.http_timeout_s, follow_redirects=True) as owned:
        yield owned
