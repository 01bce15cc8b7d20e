"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from designirl.engine.orchestrator import WorkflowOrchestrator
from designirl.models.domain import ImageRecord, Pathway, TasteProfile, WorkflowState


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    active_sessions: int = 0


class SessionSnapshot(BaseModel):
    """Everything the front-end needs to render the current screen. Never includes API keys."""

    session_id: str
    state: WorkflowState
    pathway: Pathway | None = None

    has_credentials: bool = False
    can_change_credentials: bool = False
    can_start_over: bool = False

    search_query: str = ""
    results: list[ImageRecord] = Field(default_factory=list)
    has_more: bool = False
    selection: list[ImageRecord] = Field(default_factory=list)
    max_selections: int = 5
    is_max_selected: bool = False
    can_select: bool = True

    profile: TasteProfile | None = None
    room_description: str = ""
    has_artifact: bool = False
    artifact_mime_type: str | None = None
    edit_prompt: str = ""
    has_user_image: bool = False
    try_on_prompt: str = ""

    error: str | None = None
    error_kind: str | None = None
    loading: bool = False
    loading_message: str = ""
    progress: tuple[int, int] | None = None

    @classmethod
    def from_orchestrator(cls, session_id: str, orch: WorkflowOrchestrator) -> SessionSnapshot:
        artifact = orch.artifact
        return cls(
            session_id=session_id,
            state=orch.state,
            pathway=orch.pathway,
            has_credentials=orch.has_credentials,
            can_change_credentials=orch.can_change_credentials,
            can_start_over=orch.can_start_over,
            search_query=orch.search_query,
            results=orch.results,
            has_more=orch.continuation_token is not None,
            selection=orch.selection,
            max_selections=orch.max_selections,
            is_max_selected=orch.is_max_selected,
            can_select=orch.can_select,
            profile=orch.profile,
            room_description=orch.room_description,
            has_artifact=artifact is not None,
            artifact_mime_type=artifact.mime_type if artifact else None,
            edit_prompt=orch.edit_prompt,
            has_user_image=orch.user_image is not None,
            try_on_prompt=orch.try_on_prompt,
            error=orch.error,
            error_kind=orch.error_kind,
            loading=orch.loading,
            loading_message=orch.loading_message,
            progress=orch.progress,
        )
