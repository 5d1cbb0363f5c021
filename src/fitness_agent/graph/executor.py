"""Step-by-step execution of a compiled graph for one thread at a time.

Every successful node step overwrites the thread's checkpoint, so a call that
fails part-way leaves the last good position behind. Suspension is an explicit
transition: the node that asked for input is recorded as the next node
together with its pending interrupt, and ``resume`` re-enters exactly it.
"""

from __future__ import annotations

import copy
import inspect
import logging
from collections.abc import Mapping
from typing import Any

from .builder import CompiledGraph
from .checkpoint import Checkpoint, CheckpointStore
from .errors import (
    GraphError,
    InvalidResumeError,
    MissingInterruptError,
    NodeExecutionError,
    StepLimitError,
    ThreadSuspendedError,
)
from .interrupts import NO_RESUME, InterruptBroker, NodeContext, NodeInterrupt, PendingInterrupt
from .state import State
from .types import END, Command, RunResult, RunStatus

logger = logging.getLogger(__name__)


class Executor:
    """Drives threads through ``graph``, persisting progress in ``store``."""

    def __init__(self, graph: CompiledGraph, store: CheckpointStore, max_steps: int = 50) -> None:
        if max_steps < 1:
            raise ValueError("max_steps must be at least 1")
        self.graph = graph
        self.store = store
        self.max_steps = max_steps

    def get_state(self, thread_id: str) -> Checkpoint | None:
        return self.store.get(thread_id)

    async def invoke(self, update: Mapping[str, Any] | None, thread_id: str) -> RunResult:
        """Merge ``update`` into the thread's state and run until done or suspended."""

        checkpoint = self.store.get(thread_id)
        schema = self.graph.schema

        if checkpoint is None:
            state = schema.initial()
            node = self.graph.entry
            step = 0
        elif checkpoint.status is RunStatus.SUSPENDED:
            raise ThreadSuspendedError(
                f"Thread {thread_id!r} is waiting on an interrupt at {checkpoint.next_node!r}; "
                "resume it instead"
            )
        else:
            state = schema.coerce(checkpoint.state)
            step = checkpoint.step
            # A finished thread starts a new pass; an aborted one retries its next node.
            node = self.graph.entry if checkpoint.status is RunStatus.DONE else checkpoint.next_node

        state = schema.merge(state, update)
        logger.info("Invoking thread", extra={"thread_id": thread_id, "node": node})
        return await self._run(thread_id, state, node, step, resume_value=NO_RESUME)

    async def resume(self, value: Any, thread_id: str) -> RunResult:
        """Re-enter the suspended node with ``value`` as its interrupt result."""

        checkpoint = self.store.get(thread_id)
        if checkpoint is None:
            raise InvalidResumeError(f"Unknown thread {thread_id!r}")
        if checkpoint.status is not RunStatus.SUSPENDED:
            raise InvalidResumeError(
                f"Thread {thread_id!r} is {checkpoint.status.value}, not suspended"
            )

        pending = checkpoint.pending_interrupt
        if pending is None or pending.node != checkpoint.next_node:
            raise MissingInterruptError(
                f"Thread {thread_id!r} is suspended at {checkpoint.next_node!r} "
                "without a matching interrupt"
            )

        logger.info(
            "Resuming thread",
            extra={"thread_id": thread_id, "node": pending.node, "interrupt_id": pending.id},
        )
        state = self.graph.schema.coerce(checkpoint.state)
        return await self._run(thread_id, state, pending.node, checkpoint.step, resume_value=value)

    async def _run(
        self, thread_id: str, state: State, node: str, step: int, *, resume_value: Any
    ) -> RunResult:
        executed = 0
        while node != END:
            if executed >= self.max_steps:
                raise StepLimitError(
                    f"Thread {thread_id!r} exceeded {self.max_steps} steps in one call"
                )

            broker = InterruptBroker(node, resume_value)
            resume_value = NO_RESUME
            try:
                result = await self._execute(thread_id, node, state, broker)
            except NodeInterrupt as signal:
                pending = PendingInterrupt(node=node, value=signal.value)
                self.store.put(
                    Checkpoint(
                        thread_id=thread_id,
                        status=RunStatus.SUSPENDED,
                        state=state,
                        next_node=node,
                        pending_interrupt=pending,
                        step=step,
                    )
                )
                logger.info(
                    "Thread suspended",
                    extra={"thread_id": thread_id, "node": node, "interrupt_id": pending.id},
                )
                return RunResult(thread_id=thread_id, status=RunStatus.SUSPENDED, interrupt=pending)

            if isinstance(result, Command):
                state = self.graph.schema.merge(state, result.update)
                next_node = self.graph.check_destination(result.goto, source=node)
            else:
                state = self.graph.schema.merge(state, result)
                next_node = self.graph.next_node(node, state)

            executed += 1
            step += 1
            status = RunStatus.DONE if next_node == END else RunStatus.RUNNING
            self.store.put(
                Checkpoint(
                    thread_id=thread_id,
                    status=status,
                    state=state,
                    next_node=next_node,
                    step=step,
                )
            )
            logger.debug(
                "Step complete",
                extra={"thread_id": thread_id, "node": node, "next": next_node, "step": step},
            )
            node = next_node

        logger.info("Thread done", extra={"thread_id": thread_id, "step": step})
        return RunResult(thread_id=thread_id, status=RunStatus.DONE, state=state)

    async def _execute(
        self, thread_id: str, key: str, state: State, broker: InterruptBroker
    ) -> Mapping[str, Any] | Command | None:
        node = self.graph.node(key)
        view = copy.deepcopy(state)
        try:
            if node.wants_context:
                result = node.fn(view, NodeContext(thread_id=thread_id, node=key, broker=broker))
            else:
                result = node.fn(view)
            if inspect.isawaitable(result):
                result = await result
        except (NodeInterrupt, GraphError):
            raise
        except Exception as e:
            logger.error(
                "Node failed",
                extra={"thread_id": thread_id, "node": key, "error": str(e)},
            )
            raise NodeExecutionError(key, e) from e

        if result is not None and not isinstance(result, (Mapping, Command)):
            raise NodeExecutionError(
                key, TypeError(f"expected a mapping, Command or None, got {type(result).__name__}")
            )
        return result
