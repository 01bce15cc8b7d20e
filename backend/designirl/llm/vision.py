"""LangChain ChatGoogleGenerativeAI wrapper for per-image aesthetic analysis."""

from __future__ import annotations

import logging
import re
from typing import Any

from pydantic import ValidationError

from designirl.errors import AnalysisParseFailure, CredentialMissing
from designirl.llm.model_router import get_model_for_task
from designirl.llm.prompts import ANALYSIS_SCHEMA, get_prompt_template
from designirl.models.domain import AestheticDescription, EncodedImage

logger = logging.getLogger(__name__)


def _content_text(content: Any) -> str:
    """Flatten a chat message content (str or list of blocks) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return str(content)


def parse_analysis(text: str) -> AestheticDescription:
    """Parse model output into an AestheticDescription or raise AnalysisParseFailure."""
    # Strip markdown fences if present
    cleaned = re.sub(r"^```(?:json)?\s*\n?", "", text.strip())
    cleaned = re.sub(r"\n?```\s*$", "", cleaned).strip()
    if not cleaned:
        raise AnalysisParseFailure("Empty analysis response")

    try:
        return AestheticDescription.model_validate_json(cleaned)
    except ValidationError as e:
        raise AnalysisParseFailure(f"Malformed analysis response: {e.error_count()} error(s)") from e


async def analyze_image(image: EncodedImage, api_key: str) -> AestheticDescription:
    """Ask the vision model for a structured aesthetic description of one image."""
    if not api_key:
        raise CredentialMissing("Gemini API key is required.")

    from langchain_core.messages import HumanMessage
    from langchain_google_genai import ChatGoogleGenerativeAI

    llm = ChatGoogleGenerativeAI(
        model=get_model_for_task("analyze"),
        google_api_key=api_key,
        response_mime_type="application/json",
        response_schema=ANALYSIS_SCHEMA,
    )

    message = HumanMessage(
        content=[
            {"type": "image_url", "image_url": {"url": image.data_url}},
            {"type": "text", "text": get_prompt_template("analyze")},
        ]
    )

    response = await llm.ainvoke([message])
    analysis = parse_analysis(_content_text(response.content))
    logger.debug("Analysis: mood=%s, %d colours, %d materials", analysis.mood, len(analysis.palette), len(analysis.materials))
    return analysis
