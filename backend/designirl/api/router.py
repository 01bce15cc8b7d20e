"""Master API router that mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from designirl.api import analyze, health, sessions

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(sessions.router)
api_router.include_router(analyze.router)
