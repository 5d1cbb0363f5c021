from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .interrupts import PendingInterrupt
from .state import State

START = "__start__"
END = "__end__"

NodeKey = str | Enum


def node_key(key: NodeKey) -> str:
    """Normalise a node key (plain string or str-valued enum) to its string form."""

    if isinstance(key, Enum):
        key = key.value
    if not isinstance(key, str) or not key:
        raise TypeError(f"Node keys must be non-empty strings, got {key!r}")
    return key


class RunStatus(str, Enum):
    RUNNING = "running"
    SUSPENDED = "suspended"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class Command:
    """Returned by a node to merge ``update`` and jump straight to ``goto``.

    The destination overrides any edge declared for the node.
    """

    goto: NodeKey
    update: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RunResult:
    """Outcome of one ``invoke``/``resume`` call.

    Exactly one of ``state`` (DONE) or ``interrupt`` (SUSPENDED) is set.
    """

    thread_id: str
    status: RunStatus
    state: State | None = None
    interrupt: PendingInterrupt | None = None

    @property
    def done(self) -> bool:
        return self.status is RunStatus.DONE

    @property
    def suspended(self) -> bool:
        return self.status is RunStatus.SUSPENDED

    @property
    def interrupt_value(self) -> Any:
        return self.interrupt.value if self.interrupt is not None else None
