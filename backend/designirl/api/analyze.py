"""POST /api/sessions/{id}/analyze: taste analysis (standard + SSE progress stream)."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from designirl.dependencies import get_orchestrator
from designirl.engine.orchestrator import WorkflowOrchestrator
from designirl.errors import DesignIRLError
from designirl.models.responses import SessionSnapshot

router = APIRouter(prefix="/sessions")
logger = logging.getLogger(__name__)


def _sse(event: str, payload: dict) -> str:
    return f"event: {event}\ndata: {json.dumps(payload)}\n\n"


@router.post("/{session_id}/analyze", response_model=SessionSnapshot)
async def analyze(session_id: str, orch: WorkflowOrchestrator = Depends(get_orchestrator)) -> SessionSnapshot:
    await orch.analyze_taste()
    return SessionSnapshot.from_orchestrator(session_id, orch)


async def stream_analysis(session_id: str, orch: WorkflowOrchestrator) -> AsyncGenerator[str, None]:
    """Run the batch analysis, yielding one progress event per image and a final snapshot."""
    queue: asyncio.Queue[tuple[int, int]] = asyncio.Queue()
    task = asyncio.create_task(orch.analyze_taste(on_progress=lambda i, n: queue.put_nowait((i, n))))

    while True:
        getter = asyncio.ensure_future(queue.get())
        done, _ = await asyncio.wait({getter, task}, return_when=asyncio.FIRST_COMPLETED)
        if getter in done:
            index, total = getter.result()
            yield _sse("progress", {"type": "progress", "index": index, "total": total})
            continue
        getter.cancel()
        break

    while not queue.empty():
        index, total = queue.get_nowait()
        yield _sse("progress", {"type": "progress", "index": index, "total": total})

    try:
        task.result()
    except DesignIRLError as e:
        yield _sse("error", {"type": "error", "kind": e.kind, "content": e.message})
    except Exception as e:
        logger.error("Streamed analysis failed: %s", e)
        yield _sse("error", {"type": "error", "kind": "error", "content": str(e)})

    snapshot = SessionSnapshot.from_orchestrator(session_id, orch)
    yield _sse("done", {"type": "done", "session": snapshot.model_dump(mode="json")})


@router.post("/{session_id}/analyze/stream")
async def analyze_stream(session_id: str, orch: WorkflowOrchestrator = Depends(get_orchestrator)) -> StreamingResponse:
    return StreamingResponse(
        stream_analysis(session_id, orch),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
