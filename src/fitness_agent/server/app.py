"""FastAPI app factory.

Endpoints are thin wrappers over :class:`FitnessAgent`. Without an inline
human-input collaborator every question to the user, including the follow-up
for missing preferences, comes back as a suspended thread with an interrupt;
the client answers through the resume endpoint.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Response

from fitness_agent import __version__
from fitness_agent.core.agent import FitnessAgent, last_reply
from fitness_agent.graph import (
    Checkpoint,
    GraphError,
    InvalidResumeError,
    RunResult,
    ThreadSuspendedError,
)
from fitness_agent.server.models import ApiInterrupt, InvokeRequest, ResumeRequest, ThreadView

logger = logging.getLogger(__name__)


def _to_view(checkpoint: Checkpoint) -> ThreadView:
    state = checkpoint.state
    messages = list(state.get("messages") or [])
    pending = checkpoint.pending_interrupt
    return ThreadView(
        thread_id=checkpoint.thread_id,
        status=checkpoint.status,
        next_node=checkpoint.next_node,
        interrupt=ApiInterrupt.model_validate(pending.model_dump()) if pending else None,
        messages=messages,
        reply=last_reply(messages) if pending is None else None,
        diet_type=state.get("diet_type"),
        fitness_level=state.get("fitness_level"),
        step=checkpoint.step,
    )


def create_app(agent: FitnessAgent | None = None) -> FastAPI:
    app = FastAPI(
        title="Fitness Agent",
        version=__version__,
        description="REST API over the resumable diet-plan conversation.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    if agent is None:
        agent = FitnessAgent()
        agent.config.setup_logging()
    service: FitnessAgent = agent
    app.state.agent = service

    def _view_or_404(thread_id: str) -> ThreadView:
        checkpoint = service.get_state(thread_id)
        if checkpoint is None:
            raise HTTPException(status_code=404, detail="Thread not found")
        return _to_view(checkpoint)

    def _after_run(result: RunResult) -> ThreadView:
        return _view_or_404(result.thread_id)

    @app.get("/api/v1/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @app.get("/api/v1/threads/{thread_id}", response_model=ThreadView)
    def get_thread(thread_id: str) -> ThreadView:
        return _view_or_404(thread_id)

    @app.delete("/api/v1/threads/{thread_id}", status_code=204)
    def delete_thread(thread_id: str) -> Response:
        try:
            deleted = service.store.delete(thread_id)
        except GraphError as e:
            logger.error("Delete failed", extra={"thread_id": thread_id, "error": str(e)})
            raise HTTPException(status_code=500, detail=str(e)) from e
        if not deleted:
            raise HTTPException(status_code=404, detail="Thread not found")
        return Response(status_code=204)

    @app.post("/api/v1/threads/{thread_id}/invoke", response_model=ThreadView)
    async def invoke(thread_id: str, req: InvokeRequest) -> ThreadView:
        try:
            result = await service.send(req.message, thread_id)
        except ThreadSuspendedError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e
        except GraphError as e:
            logger.error("Invoke failed", extra={"thread_id": thread_id, "error": str(e)})
            raise HTTPException(status_code=500, detail=str(e)) from e
        return _after_run(result)

    @app.post("/api/v1/threads/{thread_id}/resume", response_model=ThreadView)
    async def resume(thread_id: str, req: ResumeRequest) -> ThreadView:
        if service.get_state(thread_id) is None:
            raise HTTPException(status_code=404, detail="Thread not found")
        try:
            result = await service.resume(req.value, thread_id)
        except InvalidResumeError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e
        except GraphError as e:
            logger.error("Resume failed", extra={"thread_id": thread_id, "error": str(e)})
            raise HTTPException(status_code=500, detail=str(e)) from e
        return _after_run(result)

    return app
