"""Outbound service bundle used by the workflow orchestrator.

The orchestrator never imports the clients directly; it calls this object,
which keeps the I/O seam in one place and lets tests substitute a fake with
the same coroutine methods.
"""

from __future__ import annotations

from collections.abc import Sequence

from designirl.clients.image_fetch import fetch_encoded_image
from designirl.clients.search import search_pins
from designirl.llm import imagegen, vision
from designirl.models.domain import AestheticDescription, EncodedImage, SearchPage, TasteProfile


class DesignServices:
    """Live implementation backed by Scrape Creators, the image proxy and Gemini."""

    async def search(self, query: str, api_key: str, cursor: str | None = None) -> SearchPage:
        return await search_pins(query, api_key, cursor)

    async def fetch_image(self, url: str) -> EncodedImage:
        return await fetch_encoded_image(url)

    async def analyze(self, image: EncodedImage, api_key: str) -> AestheticDescription:
        return await vision.analyze_image(image, api_key)

    async def generate_room(self, profile: TasteProfile, room_description: str, api_key: str) -> EncodedImage:
        return await imagegen.generate_room(profile, room_description, api_key)

    async def edit_image(self, image: EncodedImage, instruction: str, api_key: str) -> EncodedImage:
        return await imagegen.edit_image(image, instruction, api_key)

    async def virtual_try_on(
        self,
        user_image: EncodedImage,
        inspirations: Sequence[EncodedImage],
        prompt: str,
        api_key: str,
    ) -> EncodedImage:
        return await imagegen.virtual_try_on(user_image, inspirations, prompt, api_key)
