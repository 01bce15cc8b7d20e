"""Session endpoints, one route per named workflow operation.

Every mutating route returns the session snapshot; user-input problems show
up as ``error`` on the snapshot, out-of-order calls as 409.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from designirl.dependencies import get_orchestrator, get_services
from designirl.engine.orchestrator import WorkflowOrchestrator
from designirl.models.requests import (
    CredentialsRequest,
    EditRequest,
    GenerateRequest,
    MaxSelectionsRequest,
    PathwayRequest,
    SearchRequest,
    ToggleRequest,
    TryOnRequest,
    UserImageRequest,
)
from designirl.models.responses import SessionSnapshot
from designirl.services import DesignServices
from designirl.sessions import SessionStore, get_session_store

router = APIRouter(prefix="/sessions")


def _snapshot(session_id: str, orch: WorkflowOrchestrator) -> SessionSnapshot:
    return SessionSnapshot.from_orchestrator(session_id, orch)


@router.post("", response_model=SessionSnapshot)
async def create_session(
    store: SessionStore = Depends(get_session_store),
    services: DesignServices = Depends(get_services),
) -> SessionSnapshot:
    session_id, orch = store.create(services)
    return _snapshot(session_id, orch)


@router.get("/{session_id}", response_model=SessionSnapshot)
async def get_session(session_id: str, orch: WorkflowOrchestrator = Depends(get_orchestrator)) -> SessionSnapshot:
    return _snapshot(session_id, orch)


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)) -> Response:
    if not store.drop(session_id):
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
    return Response(status_code=204)


# --- credentials & pathway ---------------------------------------------------


@router.post("/{session_id}/begin", response_model=SessionSnapshot)
async def begin(session_id: str, orch: WorkflowOrchestrator = Depends(get_orchestrator)) -> SessionSnapshot:
    orch.begin()
    return _snapshot(session_id, orch)


@router.post("/{session_id}/credentials", response_model=SessionSnapshot)
async def submit_credentials(
    session_id: str,
    req: CredentialsRequest,
    orch: WorkflowOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    orch.submit_credentials(req.search_api_key, req.gemini_api_key)
    return _snapshot(session_id, orch)


@router.post("/{session_id}/credentials/change", response_model=SessionSnapshot)
async def change_credentials(session_id: str, orch: WorkflowOrchestrator = Depends(get_orchestrator)) -> SessionSnapshot:
    orch.change_credentials()
    return _snapshot(session_id, orch)


@router.post("/{session_id}/pathway", response_model=SessionSnapshot)
async def choose_pathway(
    session_id: str,
    req: PathwayRequest,
    orch: WorkflowOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    orch.choose_pathway(req.pathway)
    return _snapshot(session_id, orch)


@router.post("/{session_id}/start-over", response_model=SessionSnapshot)
async def start_over(session_id: str, orch: WorkflowOrchestrator = Depends(get_orchestrator)) -> SessionSnapshot:
    orch.start_over()
    return _snapshot(session_id, orch)


# --- search & selection ------------------------------------------------------


@router.post("/{session_id}/search", response_model=SessionSnapshot)
async def search(
    session_id: str,
    req: SearchRequest,
    orch: WorkflowOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    await orch.search(req.query, load_more=req.load_more)
    return _snapshot(session_id, orch)


@router.post("/{session_id}/search/reset", response_model=SessionSnapshot)
async def reset_search(session_id: str, orch: WorkflowOrchestrator = Depends(get_orchestrator)) -> SessionSnapshot:
    orch.reset_search()
    return _snapshot(session_id, orch)


@router.post("/{session_id}/selection/toggle", response_model=SessionSnapshot)
async def toggle_selection(
    session_id: str,
    req: ToggleRequest,
    orch: WorkflowOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    orch.toggle_selection(req.image_id)
    return _snapshot(session_id, orch)


@router.post("/{session_id}/selection/max", response_model=SessionSnapshot)
async def set_max_selections(
    session_id: str,
    req: MaxSelectionsRequest,
    orch: WorkflowOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    orch.set_max_selections(req.value)
    return _snapshot(session_id, orch)


# --- generate / edit / try-on ------------------------------------------------


@router.post("/{session_id}/generate", response_model=SessionSnapshot)
async def generate_room(
    session_id: str,
    req: GenerateRequest,
    orch: WorkflowOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    await orch.generate_room(req.room_description)
    return _snapshot(session_id, orch)


@router.post("/{session_id}/edit/start", response_model=SessionSnapshot)
async def start_editing(session_id: str, orch: WorkflowOrchestrator = Depends(get_orchestrator)) -> SessionSnapshot:
    await orch.start_editing()
    return _snapshot(session_id, orch)


@router.post("/{session_id}/edit", response_model=SessionSnapshot)
async def edit_image(
    session_id: str,
    req: EditRequest,
    orch: WorkflowOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    await orch.edit_image(req.instruction)
    return _snapshot(session_id, orch)


@router.post("/{session_id}/try-on/setup", response_model=SessionSnapshot)
async def proceed_to_try_on(session_id: str, orch: WorkflowOrchestrator = Depends(get_orchestrator)) -> SessionSnapshot:
    orch.proceed_to_try_on()
    return _snapshot(session_id, orch)


@router.post("/{session_id}/try-on/add-inspiration", response_model=SessionSnapshot)
async def add_more_inspiration(session_id: str, orch: WorkflowOrchestrator = Depends(get_orchestrator)) -> SessionSnapshot:
    orch.add_more_inspiration()
    return _snapshot(session_id, orch)


@router.put("/{session_id}/try-on/photo", response_model=SessionSnapshot)
async def set_user_image(
    session_id: str,
    req: UserImageRequest,
    orch: WorkflowOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    orch.set_user_image(req.to_image())
    return _snapshot(session_id, orch)


@router.delete("/{session_id}/try-on/photo", response_model=SessionSnapshot)
async def clear_user_image(session_id: str, orch: WorkflowOrchestrator = Depends(get_orchestrator)) -> SessionSnapshot:
    orch.clear_user_image()
    return _snapshot(session_id, orch)


@router.post("/{session_id}/try-on", response_model=SessionSnapshot)
async def run_try_on(
    session_id: str,
    req: TryOnRequest,
    orch: WorkflowOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    await orch.run_try_on(req.prompt)
    return _snapshot(session_id, orch)


@router.get("/{session_id}/artifact")
async def download_artifact(orch: WorkflowOrchestrator = Depends(get_orchestrator)) -> Response:
    artifact = orch.artifact
    if artifact is None:
        raise HTTPException(status_code=404, detail="No image to download yet")
    return Response(
        content=artifact.data,
        media_type=artifact.mime_type,
        headers={"Content-Disposition": f'attachment; filename="design-irl-creation.{artifact.extension}"'},
    )
