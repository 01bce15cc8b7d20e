"""Task → model selection. Text model for analysis, image model for everything that returns pixels."""

from __future__ import annotations

from designirl.config import settings

_TASK_MODEL_MAP = {
    "analyze": "text",
    "generate": "image",
    "edit": "image",
    "try_on": "image",
}


def get_model_for_task(task: str) -> str:
    tier = _TASK_MODEL_MAP.get(task, "text")
    if tier == "image":
        return settings.model_image
    return settings.model_analysis
