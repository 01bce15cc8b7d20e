"""FastAPI dependency injection."""

from __future__ import annotations

from fastapi import Depends, HTTPException

from designirl.engine.orchestrator import WorkflowOrchestrator
from designirl.services import DesignServices
from designirl.sessions import SessionStore, get_session_store



def get_services() -> DesignServices:
    return DesignServices()


def get_orchestrator(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> WorkflowOrchestrator:
    orchestrator = store.get(session_id)
    if orchestrator is None:
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
    return orchestrator
