"""Pinterest keyword search through the Scrape Creators API."""

from __future__ import annotations

import logging

import httpx

from designirl.clients.http import borrow_client
from designirl.config import settings
from designirl.errors import CredentialInvalid, CredentialMissing, FetchFailure
from designirl.models.domain import ImageRecord, SearchPage

logger = logging.getLogger(__name__)

_AUTH_STATUSES = (401, 403)


def _parse_page(payload: dict) -> SearchPage:
    items: list[ImageRecord] = []
    for pin in payload.get("pins") or []:
        try:
            record = ImageRecord.from_pin(pin)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed pin: %s", e)
            continue
        if not record.image_url:
            logger.debug("Skipping pin %s without an image url", record.id)
            continue
        items.append(record)
    return SearchPage(items=items, continuation_token=payload.get("cursor") or None)


async def search_pins(
    query: str,
    api_key: str,
    cursor: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> SearchPage:
    """Fetch one page of pins matching ``query``.

    Raises CredentialInvalid on 401/403 and FetchFailure on any other
    unsuccessful response or transport error.
    """
    if not api_key:
        raise CredentialMissing("API key is required.")

    params = {"query": query, "trim": "true"}
    if cursor:
        params["cursor"] = cursor

    async with borrow_client(client) as http:
        try:
            response = await http.get(
                settings.search_api_url,
                params=params,
                headers={"x-api-key": api_key},
            )
        except httpx.HTTPError as e:
            logger.warning("Search request failed: %s", e)
            raise FetchFailure(f"Failed to fetch pins: {e}") from e

    if response.status_code in _AUTH_STATUSES:
        raise CredentialInvalid("Invalid API key. Please check and try again.")
    if not response.is_success:
        raise FetchFailure(f"Failed to fetch pins: {response.reason_phrase or response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        raise FetchFailure("Failed to fetch pins: malformed response") from e

    page = _parse_page(payload if isinstance(payload, dict) else {})
    logger.info("Search %r returned %d pins (more=%s)", query, len(page.items), page.continuation_token is not None)
    return page
