"""In-memory session store: one WorkflowOrchestrator per browser session.

Nothing here is ever written to disk; credentials live only as long as the
process holds the orchestrator.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from designirl.engine.orchestrator import WorkflowOrchestrator

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self) -> None:
        self._sessions: dict[str, WorkflowOrchestrator] = {}

    def create(self, services: Any) -> tuple[str, WorkflowOrchestrator]:
        session_id = uuid.uuid4().hex
        orchestrator = WorkflowOrchestrator(services)
        self._sessions[session_id] = orchestrator
        logger.info("Created session %s (%d active)", session_id, len(self._sessions))
        return session_id, orchestrator

    def get(self, session_id: str) -> WorkflowOrchestrator | None:
        return self._sessions.get(session_id)

    def drop(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)


_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get or create the process-wide session store."""
    global _store
    if _store is None:
        _store = SessionStore()
    return _store
