"""Resumable graph execution engine.

A workflow is a graph of named nodes over a shared state with per-field
reducers. The executor runs one thread at a time, checkpoints after every
step, and can suspend a node to wait for external input.
"""

from fitness_agent.graph.builder import CompiledGraph, GraphBuilder
from fitness_agent.graph.checkpoint import (
    Checkpoint,
    CheckpointStore,
    InMemoryCheckpointStore,
    JsonFileCheckpointStore,
)
from fitness_agent.graph.errors import (
    CheckpointStoreError,
    GraphError,
    GraphValidationError,
    InvalidResumeError,
    InvalidRouteError,
    InvalidUpdateError,
    MissingInterruptError,
    MultipleInterruptsError,
    NodeExecutionError,
    StepLimitError,
    ThreadSuspendedError,
)
from fitness_agent.graph.executor import Executor
from fitness_agent.graph.interrupts import NodeContext, PendingInterrupt
from fitness_agent.graph.state import Accumulate, LastValue, State, StateSchema
from fitness_agent.graph.types import END, START, Command, RunResult, RunStatus

__all__ = [
    "END",
    "START",
    "Accumulate",
    "Checkpoint",
    "CheckpointStore",
    "CheckpointStoreError",
    "Command",
    "CompiledGraph",
    "Executor",
    "GraphBuilder",
    "GraphError",
    "GraphValidationError",
    "InMemoryCheckpointStore",
    "InvalidResumeError",
    "InvalidRouteError",
    "InvalidUpdateError",
    "JsonFileCheckpointStore",
    "LastValue",
    "MissingInterruptError",
    "MultipleInterruptsError",
    "NodeContext",
    "NodeExecutionError",
    "PendingInterrupt",
    "RunResult",
    "RunStatus",
    "State",
    "StateSchema",
    "StepLimitError",
    "ThreadSuspendedError",
]
