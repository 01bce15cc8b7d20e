"""Domain models shared by the clients, the taste engine and the orchestrator."""

from __future__ import annotations

import base64
import enum
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Maximum palette entries kept per analyzed image
PALETTE_SIZE = 3


class WorkflowState(str, enum.Enum):
    WELCOME = "welcome"
    CREDENTIAL_ENTRY = "credential_entry"
    PATHWAY_SELECTION = "pathway_selection"
    SEARCH = "search"
    ANALYZING = "analyzing"
    TRY_ON_SETUP = "try_on_setup"
    GENERATING = "generating"
    EDITING = "editing"


class Pathway(str, enum.Enum):
    GENERATE = "generate"
    EDIT = "edit"
    TRY_ON = "try-on"


class ImageRecord(BaseModel):
    """One image returned by the search backend. Identity is ``id``."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    description: str = ""
    image_url: str

    @classmethod
    def from_pin(cls, pin: dict[str, Any]) -> ImageRecord:
        """Build a record from a search backend pin object."""
        images = pin.get("images") or {}
        orig = images.get("orig") or {}
        return cls(
            id=str(pin["id"]),
            title=pin.get("title") or "",
            description=pin.get("description") or "",
            image_url=orig.get("url") or "",
        )


class SearchPage(BaseModel):
    items: list[ImageRecord] = Field(default_factory=list)
    continuation_token: str | None = None  # None = no further pages


class AestheticDescription(BaseModel):
    """Structured aesthetic read-out of a single image."""

    palette: list[str]  # colour codes, e.g. "#E8DCCB"
    materials: list[str]
    layout: str
    mood: str

    @field_validator("palette")
    @classmethod
    def _trim_palette(cls, value: list[str]) -> list[str]:
        return value[:PALETTE_SIZE]


class TasteProfile(BaseModel):
    """Consolidated aesthetic summary. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    colors: list[str] = Field(default_factory=list)
    textures: list[str] = Field(default_factory=list)
    moods: list[str] = Field(default_factory=list)


@dataclass(frozen=True)
class EncodedImage:
    """Binary image content plus its media type."""

    data: bytes
    mime_type: str

    @classmethod
    def from_b64(cls, b64: str, mime_type: str) -> EncodedImage:
        return cls(data=base64.b64decode(b64), mime_type=mime_type)

    @property
    def b64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.b64}"

    @property
    def extension(self) -> str:
        subtype = self.mime_type.split("/")[-1].lower()
        return "jpg" if subtype == "jpeg" else subtype


@dataclass(frozen=True)
class Credentials:
    """Per-session API keys. Only ever held in memory."""

    search_api_key: str
    gemini_api_key: str

    def __repr__(self) -> str:
        return "Credentials(search_api_key='***', gemini_api_key='***')"
