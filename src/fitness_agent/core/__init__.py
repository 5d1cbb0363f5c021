"""Core package initialization.

The agent itself lives in :mod:`fitness_agent.core.agent`; it is not imported
here so that provider modules can depend on the configuration alone.
"""

from fitness_agent.core.config import AgentConfig, CheckpointConfig, LLMConfig, WorkflowConfig

__all__ = [
    "AgentConfig",
    "CheckpointConfig",
    "LLMConfig",
    "WorkflowConfig",
]
