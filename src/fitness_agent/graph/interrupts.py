"""Suspension of a running node pending external input.

A node asks for input through :meth:`NodeContext.interrupt`. On a fresh
execution this unwinds the node with :class:`NodeInterrupt`, which only the
executor handles: it persists a :class:`PendingInterrupt` and reports the
thread as suspended. When the thread is resumed the same node runs again with
a broker primed with the resume value, and the same call returns it.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from .errors import MultipleInterruptsError

NO_RESUME: Any = object()


class PendingInterrupt(BaseModel):
    """An interrupt waiting for its resume value."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    node: str
    value: Any = None


class NodeInterrupt(Exception):
    """Raised inside a node to unwind it; converted to a suspension by the executor."""

    def __init__(self, node: str, value: Any) -> None:
        super().__init__(f"Node {node!r} requested an interrupt")
        self.node = node
        self.value = value


class InterruptBroker:
    """Per-attempt interrupt bookkeeping for a single node execution."""

    def __init__(self, node: str, resume_value: Any = NO_RESUME) -> None:
        self._node = node
        self._resume_value = resume_value
        self._calls = 0

    @property
    def resuming(self) -> bool:
        return self._resume_value is not NO_RESUME

    def interrupt(self, value: Any) -> Any:
        self._calls += 1
        if self._calls > 1:
            raise MultipleInterruptsError(
                f"Node {self._node!r} requested more than one interrupt in a single execution"
            )
        if self.resuming:
            return self._resume_value
        raise NodeInterrupt(self._node, value)


@dataclass(frozen=True, slots=True)
class NodeContext:
    """Execution context handed to nodes that accept a second argument."""

    thread_id: str
    node: str
    broker: InterruptBroker

    def interrupt(self, value: Any) -> Any:
        """Suspend with ``value``; returns the resume value once resumed."""

        return self.broker.interrupt(value)
