"""Exceptions raised by the graph engine.

Completion and suspension are normal outcomes of a run. Everything here aborts
the current call and leaves the last persisted checkpoint untouched.
"""

from __future__ import annotations


class GraphError(Exception):
    """Base class for graph engine errors."""


class GraphValidationError(GraphError):
    """The graph definition is malformed."""


class InvalidRouteError(GraphValidationError):
    """A router or command named a destination the graph does not allow."""


class InvalidUpdateError(GraphError):
    """A state update named a field the schema does not declare."""


class InvalidResumeError(GraphError):
    """Resume was requested for a thread that is not suspended."""


class ThreadSuspendedError(GraphError):
    """Invoke was requested for a thread that is waiting on an interrupt."""


class MissingInterruptError(GraphError):
    """A suspended thread has no interrupt recorded for its next node."""


class MultipleInterruptsError(GraphError):
    """A node requested a second interrupt within one execution attempt."""


class StepLimitError(GraphError):
    """A single call executed more node steps than allowed."""


class NodeExecutionError(GraphError):
    """A node raised an exception it did not recover from."""

    def __init__(self, node: str, cause: BaseException) -> None:
        super().__init__(f"Node {node!r} failed: {cause}")
        self.node = node
        self.cause = cause


class CheckpointStoreError(GraphError):
    """Persisted checkpoints could not be read back safely."""
