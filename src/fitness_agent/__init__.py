"""Fitness Agent.

A diet-plan assistant built on a small resumable graph engine:
- a typed state with per-field reducers
- conditional routing between named nodes
- checkpoints per conversation thread
- suspension for human input and resumption from the same node
"""

__version__ = "0.1.0"

from fitness_agent.core.config import AgentConfig

__all__ = ["__version__", "AgentConfig"]
