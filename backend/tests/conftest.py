"""Shared test fixtures."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import pytest

from designirl.engine.orchestrator import WorkflowOrchestrator
from designirl.errors import FetchFailure
from designirl.models.domain import (
    AestheticDescription,
    EncodedImage,
    ImageRecord,
    Pathway,
    SearchPage,
    TasteProfile,
)


def make_record(n: int) -> ImageRecord:
    return ImageRecord(
        id=f"pin-{n}",
        title=f"Pin {n}",
        description=f"Inspiration {n}",
        image_url=f"https://i.pinimg.com/originals/{n}.jpg",
    )


RECORDS = [make_record(n) for n in range(1, 8)]

SCANDI = AestheticDescription(
    palette=["#F5F0E8", "#C8B8A6", "#2F2F2F"],
    materials=["oak wood", "linen"],
    layout="open",
    mood="calm",
)

JAPANDI = AestheticDescription(
    palette=["#F5F0E8", "#8A9A5B", "#2F2F2F"],
    materials=["linen", "paper", "ceramic"],
    layout="minimal",
    mood="calm",
)

MAXIMAL = AestheticDescription(
    palette=["#B22222", "#FFD700", "#2F2F2F"],
    materials=["velvet", "brass"],
    layout="layered",
    mood="energetic",
)


class FakeServices:
    """In-process stand-in for DesignServices.

    Images are "fetched" as their own URL bytes, so ``analyze`` can look up
    the scripted analysis for the URL it was given.
    """

    def __init__(self) -> None:
        self.pages: list[SearchPage] = [SearchPage(items=RECORDS[:5], continuation_token="cursor-2")]
        self.search_error: Exception | None = None
        self.failing_urls: set[str] = set()
        self.analyses: dict[str, AestheticDescription] = {}
        self.analysis_errors: dict[str, Exception] = {}
        self.generate_error: Exception | None = None
        self.edit_error: Exception | None = None
        self.try_on_error: Exception | None = None
        self.pages_by_query: dict[str, SearchPage] = {}
        self.gate: asyncio.Event | None = None
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[tuple] = []

    async def _hold(self, key: str, default: asyncio.Event | None = None) -> None:
        """Block until the gate registered for ``key`` (or ``default``) is set."""
        gate = self.gates.get(key, default)
        if gate is not None:
            await gate.wait()

    async def search(self, query: str, api_key: str, cursor: str | None = None) -> SearchPage:
        self.calls.append(("search", query, api_key, cursor))
        await self._hold(query)
        if self.search_error is not None:
            raise self.search_error
        if query in self.pages_by_query:
            return self.pages_by_query[query]
        return self.pages.pop(0) if len(self.pages) > 1 else self.pages[0]

    async def fetch_image(self, url: str) -> EncodedImage:
        self.calls.append(("fetch", url))
        if url in self.failing_urls:
            raise FetchFailure(f"Failed to fetch image via proxy: {url}")
        return EncodedImage(data=url.encode(), mime_type="image/jpeg")

    async def analyze(self, image: EncodedImage, api_key: str) -> AestheticDescription:
        url = image.data.decode()
        self.calls.append(("analyze", url))
        await self._hold(url)
        if url in self.analysis_errors:
            raise self.analysis_errors[url]
        return self.analyses.get(url, SCANDI)

    async def generate_room(self, profile: TasteProfile, room_description: str, api_key: str) -> EncodedImage:
        self.calls.append(("generate", room_description, api_key))
        await self._hold(room_description, self.gate)
        if self.generate_error is not None:
            raise self.generate_error
        return EncodedImage(data=b"room", mime_type="image/png")

    async def edit_image(self, image: EncodedImage, instruction: str, api_key: str) -> EncodedImage:
        self.calls.append(("edit", instruction))
        await self._hold(instruction)
        if self.edit_error is not None:
            raise self.edit_error
        return EncodedImage(data=image.data + b"+" + instruction.encode(), mime_type="image/png")

    async def virtual_try_on(
        self,
        user_image: EncodedImage,
        inspirations: Sequence[EncodedImage],
        prompt: str,
        api_key: str,
    ) -> EncodedImage:
        self.calls.append(("try_on", len(inspirations), prompt))
        await self._hold(prompt, self.gate)
        if self.try_on_error is not None:
            raise self.try_on_error
        return EncodedImage(data=b"try-on", mime_type="image/png")


def orchestrator_at_search(services: FakeServices, pathway: Pathway) -> WorkflowOrchestrator:
    """Walk a fresh orchestrator to the Search state and load one page of results."""
    orch = WorkflowOrchestrator(services)
    orch.begin()
    orch.submit_credentials("sc-key", "gemini-key")
    orch.choose_pathway(pathway)
    asyncio.run(orch.search("Scandinavian living room"))
    return orch


@pytest.fixture
def services() -> FakeServices:
    return FakeServices()


@pytest.fixture
def records() -> list[ImageRecord]:
    return list(RECORDS)
