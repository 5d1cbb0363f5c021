"""FastAPI server adapter for fitness-agent.

This module exposes a REST API over thread invoke/resume/inspect.

Design intent:
- Keep conversation logic in `fitness_agent.workflow` and `fitness_agent.graph`
- Keep server-specific concerns (routing, HTTP error mapping) here

Run with any ASGI server, e.g. ``uvicorn fitness_agent.server:create_app --factory``.
"""

from __future__ import annotations

__all__ = ["create_app"]

from fitness_agent.server.app import create_app
