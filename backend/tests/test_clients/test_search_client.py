"""Tests for the Pinterest search client (httpx.MockTransport, no network)."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from designirl.clients.search import search_pins
from designirl.errors import CredentialInvalid, CredentialMissing, FetchFailure

PIN = {
    "id": 1234,
    "title": "Warm minimal lounge",
    "description": None,
    "images": {"orig": {"url": "https://i.pinimg.com/originals/aa/bb.jpg"}},
}


def _search(handler, query="boho bedroom", api_key="sc-key", cursor=None):
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await search_pins(query, api_key, cursor, client=client)

    return asyncio.run(run())


def test_request_shape_and_parsing():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        seen["key"] = request.headers.get("x-api-key")
        return httpx.Response(200, json={"pins": [PIN], "cursor": "next-page"})

    page = _search(handler)

    assert seen["params"] == {"query": "boho bedroom", "trim": "true"}
    assert seen["key"] == "sc-key"
    assert page.continuation_token == "next-page"
    assert len(page.items) == 1
    record = page.items[0]
    assert record.id == "1234"
    assert record.title == "Warm minimal lounge"
    assert record.description == ""
    assert record.image_url == "https://i.pinimg.com/originals/aa/bb.jpg"


def test_cursor_forwarded():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["cursor"] = request.url.params.get("cursor")
        return httpx.Response(200, json={"pins": []})

    page = _search(handler, cursor="abc")
    assert seen["cursor"] == "abc"
    assert page.items == []
    assert page.continuation_token is None


def test_pins_without_image_are_skipped():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"pins": [PIN, {"id": "x", "images": {}}, {"title": "no id"}]})

    page = _search(handler)
    assert [r.id for r in page.items] == ["1234"]


@pytest.mark.parametrize("status", [401, 403])
def test_auth_failure_maps_to_credential_invalid(status):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status)

    with pytest.raises(CredentialInvalid):
        _search(handler)


@pytest.mark.parametrize("status", [404, 429, 500, 502])
def test_other_failures_map_to_fetch_failure(status):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status)

    with pytest.raises(FetchFailure) as exc_info:
        _search(handler)
    assert exc_info.value.message.startswith("Failed to fetch pins")


def test_transport_error_maps_to_fetch_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchFailure):
        _search(handler)


def test_missing_key_checked_before_network():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(CredentialMissing):
        _search(handler, api_key="")
