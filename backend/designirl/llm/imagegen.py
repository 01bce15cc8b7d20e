"""Streamed image generation through the google-genai SDK.

All three operations (room generation, edit, virtual try-on) send a text
instruction plus zero or more reference images and take the first streamed
part that carries inline image data. A stream that ends without one is a
GenerationEmpty failure.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from typing import Any

from google import genai
from google.genai import types

from designirl.errors import CredentialMissing, GenerationEmpty
from designirl.llm.model_router import get_model_for_task
from designirl.llm.prompts import get_prompt_template
from designirl.models.domain import EncodedImage, TasteProfile

logger = logging.getLogger(__name__)

_DEFAULT_MIME = "image/png"


async def first_inline_image(stream: AsyncIterator[Any]) -> EncodedImage | None:
    """Return the first inline image in a generate_content stream, or None."""
    async for chunk in stream:
        candidates = getattr(chunk, "candidates", None)
        if not candidates:
            continue
        content = candidates[0].content
        if content is None or not content.parts:
            continue
        for part in content.parts:
            inline = getattr(part, "inline_data", None)
            if inline is not None and inline.data:
                return EncodedImage(data=inline.data, mime_type=inline.mime_type or _DEFAULT_MIME)
    return None


def _image_part(image: EncodedImage) -> types.Part:
    return types.Part.from_bytes(data=image.data, mime_type=image.mime_type)


async def _stream_image(api_key: str, task: str, parts: list[types.Part], failure: str) -> EncodedImage:
    if not api_key:
        raise CredentialMissing("Gemini API key is required.")

    client = genai.Client(api_key=api_key)
    stream = await client.aio.models.generate_content_stream(
        model=get_model_for_task(task),
        contents=[types.Content(role="user", parts=parts)],
        config=types.GenerateContentConfig(response_modalities=["IMAGE", "TEXT"]),
    )

    image = await first_inline_image(stream)
    if image is None:
        raise GenerationEmpty(failure)
    logger.info("%s produced %d bytes of %s", task, len(image.data), image.mime_type)
    return image


def build_room_prompt(profile: TasteProfile, room_function: str) -> str:
    return get_prompt_template("generate").format(
        room_function=room_function,
        colors=", ".join(profile.colors),
        textures=", ".join(profile.textures),
        moods=", ".join(profile.moods),
    )


async def generate_room(profile: TasteProfile, room_function: str, api_key: str) -> EncodedImage:
    """Synthesize a room that embodies ``profile`` for the described use."""
    parts = [types.Part.from_text(text=build_room_prompt(profile, room_function))]
    return await _stream_image(api_key, "generate", parts, "Image generation failed to produce an image.")


async def edit_image(image: EncodedImage, instruction: str, api_key: str) -> EncodedImage:
    prompt = get_prompt_template("edit").format(instruction=instruction)
    parts = [_image_part(image), types.Part.from_text(text=prompt)]
    return await _stream_image(api_key, "edit", parts, "Failed to edit image. No image was returned from the stream.")


async def virtual_try_on(
    user_image: EncodedImage,
    inspirations: Sequence[EncodedImage],
    prompt: str,
    api_key: str,
) -> EncodedImage:
    """Composite the inspiration styles onto the user's own photo."""
    parts = [_image_part(user_image)]
    parts.extend(_image_part(img) for img in inspirations)
    parts.append(types.Part.from_text(text=get_prompt_template("try_on").format(prompt=prompt)))
    return await _stream_image(api_key, "try_on", parts, "Virtual try-on failed. No image was returned from the stream.")
