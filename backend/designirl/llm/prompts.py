"""Prompt templates per task: analysis, room generation, edit and try-on."""

from __future__ import annotations

_ANALYZE_TEMPLATE = """Analyze this interior design image. Extract: dominant color palette (3 hex codes), key materials/textures (e.g., 'oak wood', 'linen', 'matte metal'), layout style (e.g., 'open', 'cozy', 'symmetrical'), emotional mood (e.g., 'calm', 'energetic', 'luxurious'). Return as a JSON object."""

_GENERATE_TEMPLATE = """Generate a photorealistic image of a {room_function} that visually embodies this aesthetic profile: Color Palette: {colors}, Materials/Textures: {textures}, Mood: {moods}. Maintain consistent lighting, perspective, and spatial logic. Ensure the space is functional for the described use case."""

_EDIT_TEMPLATE = """Modify this image to: {instruction}. Preserve style, lighting, materials, and perspective."""

_TRY_ON_TEMPLATE = """The first image is a photo of the user. The images after it are style inspirations. {prompt}"""

# JSON schema the vision model is constrained to
ANALYSIS_SCHEMA = {
    "type": "object",
    "properties": {
        "palette": {"type": "array", "items": {"type": "string"}},
        "materials": {"type": "array", "items": {"type": "string"}},
        "layout": {"type": "string"},
        "mood": {"type": "string"},
    },
    "required": ["palette", "materials", "layout", "mood"],
}

_TEMPLATES = {
    "analyze": _ANALYZE_TEMPLATE,
    "generate": _GENERATE_TEMPLATE,
    "edit": _EDIT_TEMPLATE,
    "try_on": _TRY_ON_TEMPLATE,
}


def get_prompt_template(task: str) -> str:
    return _TEMPLATES[task]


def get_all_templates() -> dict[str, str]:
    """Return all prompt templates keyed by task name."""
    return dict(_TEMPLATES)
