"""Tests for streamed image generation."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from designirl.errors import CredentialMissing, GenerationEmpty
from designirl.llm import imagegen
from designirl.models.domain import EncodedImage, TasteProfile

PROFILE = TasteProfile(
    colors=["#F5F0E8", "#2F2F2F"],
    textures=["oak wood", "linen"],
    moods=["calm", "cozy"],
)


def _text_part(text: str):
    return SimpleNamespace(text=text, inline_data=None)


def _image_part(data: bytes, mime_type: str | None = "image/png"):
    return SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))


def _chunk(*parts):
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


async def _stream(*chunks):
    for chunk in chunks:
        yield chunk


def test_first_inline_image_skips_text_and_empty_chunks():
    stream = _stream(
        SimpleNamespace(candidates=None),
        SimpleNamespace(candidates=[SimpleNamespace(content=None)]),
        _chunk(_text_part("Here is your room")),
        _chunk(_image_part(b"first")),
        _chunk(_image_part(b"second")),
    )
    image = asyncio.run(imagegen.first_inline_image(stream))
    assert image == EncodedImage(data=b"first", mime_type="image/png")


def test_first_inline_image_default_mime():
    image = asyncio.run(imagegen.first_inline_image(_stream(_chunk(_image_part(b"x", None)))))
    assert image.mime_type == "image/png"


def test_first_inline_image_none_when_no_image():
    assert asyncio.run(imagegen.first_inline_image(_stream(_chunk(_text_part("sorry"))))) is None


def test_room_prompt_embeds_profile():
    prompt = imagegen.build_room_prompt(PROFILE, "Home office for 2 with a cat")
    assert "Home office for 2 with a cat" in prompt
    assert "Color Palette: #F5F0E8, #2F2F2F" in prompt
    assert "Materials/Textures: oak wood, linen" in prompt
    assert "Mood: calm, cozy" in prompt


class _FakeModels:
    def __init__(self, chunks):
        self.chunks = chunks
        self.calls = []

    async def generate_content_stream(self, model, contents, config):
        self.calls.append((model, contents, config))
        return _stream(*self.chunks)


def _install_fake_client(monkeypatch, chunks) -> _FakeModels:
    models = _FakeModels(chunks)

    class FakeClient:
        def __init__(self, api_key):
            assert api_key == "gemini-key"
            self.aio = SimpleNamespace(models=models)

    monkeypatch.setattr(imagegen.genai, "Client", FakeClient)
    return models


def test_generate_room_returns_first_image(monkeypatch):
    models = _install_fake_client(monkeypatch, [_chunk(_text_part("ok")), _chunk(_image_part(b"room", "image/jpeg"))])
    image = asyncio.run(imagegen.generate_room(PROFILE, "Reading nook", "gemini-key"))
    assert image == EncodedImage(data=b"room", mime_type="image/jpeg")
    model, contents, _ = models.calls[0]
    assert model == imagegen.get_model_for_task("generate")
    assert len(contents[0].parts) == 1


def test_virtual_try_on_sends_all_images(monkeypatch):
    models = _install_fake_client(monkeypatch, [_chunk(_image_part(b"composite"))])
    user = EncodedImage(data=b"me", mime_type="image/jpeg")
    inspirations = [EncodedImage(data=b"a", mime_type="image/jpeg"), EncodedImage(data=b"b", mime_type="image/png")]
    asyncio.run(imagegen.virtual_try_on(user, inspirations, "Put the jacket on me", "gemini-key"))
    _, contents, _ = models.calls[0]
    # user photo + 2 inspirations + instruction
    assert len(contents[0].parts) == 4


def test_edit_without_image_data_is_generation_empty(monkeypatch):
    _install_fake_client(monkeypatch, [_chunk(_text_part("I cannot do that"))])
    with pytest.raises(GenerationEmpty):
        asyncio.run(imagegen.edit_image(EncodedImage(data=b"x", mime_type="image/png"), "Add a rug", "gemini-key"))


def test_missing_key():
    with pytest.raises(CredentialMissing):
        asyncio.run(imagegen.generate_room(PROFILE, "Reading nook", ""))
