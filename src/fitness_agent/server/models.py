"""Pydantic models for the REST server."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from fitness_agent.graph import RunStatus


class InvokeRequest(BaseModel):
    message: str = Field(min_length=1)


class ResumeRequest(BaseModel):
    value: str


class ApiInterrupt(BaseModel):
    id: str
    node: str
    value: Any = None


class ThreadView(BaseModel):
    thread_id: str
    status: RunStatus
    next_node: str | None = None
    interrupt: ApiInterrupt | None = None
    messages: list[dict[str, Any]] = Field(default_factory=list)
    reply: str | None = None
    diet_type: str | None = None
    fitness_level: str | None = None
    step: int = 0
