"""API request models."""

from __future__ import annotations

import base64
import binascii

from pydantic import BaseModel, Field, field_validator

from designirl.models.domain import EncodedImage, Pathway


class CredentialsRequest(BaseModel):
    search_api_key: str = Field("", description="Scrape Creators API key")
    gemini_api_key: str = Field("", description="Gemini API key")


class PathwayRequest(BaseModel):
    pathway: Pathway = Field(..., description="generate, edit or try-on")


class SearchRequest(BaseModel):
    query: str = Field("", description="Free-text search keywords")
    load_more: bool = Field(default=False, description="Append the next page instead of replacing results")


class ToggleRequest(BaseModel):
    image_id: str = Field(..., description="ID of the clicked image")


class MaxSelectionsRequest(BaseModel):
    value: int = Field(..., description="New selection bound (1-10)")


class GenerateRequest(BaseModel):
    room_description: str = Field("", description="Intended use of the room, e.g. 'Home office for 2 with a cat'")


class EditRequest(BaseModel):
    instruction: str = Field("", description="Edit instruction in natural language")


class UserImageRequest(BaseModel):
    data: str = Field(..., description="Base64-encoded image bytes (a data: URL is also accepted)")
    mime_type: str = Field(default="", description="Media type; taken from the data URL when omitted")

    @field_validator("data")
    @classmethod
    def _valid_base64(cls, value: str) -> str:
        payload = value.split(",", 1)[1] if value.startswith("data:") else value
        try:
            base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError("data must be base64 encoded") from e
        return value

    def to_image(self) -> EncodedImage:
        mime_type = self.mime_type
        payload = self.data
        if payload.startswith("data:"):
            header, payload = payload.split(",", 1)
            mime_type = mime_type or header[len("data:"):].split(";")[0]
        return EncodedImage.from_b64(payload, mime_type or "image/jpeg")


class TryOnRequest(BaseModel):
    prompt: str = Field("", description="What to apply, e.g. 'Put the leather jacket on me'")
