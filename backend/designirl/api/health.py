"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from designirl.models.responses import HealthResponse
from designirl.sessions import SessionStore, get_session_store

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(store: SessionStore = Depends(get_session_store)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        active_sessions=len(store),
    )


@router.get("/prompts")
async def prompts() -> dict[str, str]:
    from designirl.llm.prompts import get_all_templates

    return get_all_templates()
