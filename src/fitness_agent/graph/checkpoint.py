"""Per-thread checkpoint persistence.

The executor is the only writer. Callers must serialise calls for a given
thread id; different thread ids are independent.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from .errors import CheckpointStoreError
from .interrupts import PendingInterrupt
from .types import RunStatus

logger = logging.getLogger(__name__)


def _utc_iso_now() -> str:
    return datetime.now(tz=UTC).isoformat()


class Checkpoint(BaseModel):
    """Persisted progress of one thread."""

    thread_id: str
    status: RunStatus
    state: dict[str, Any] = Field(default_factory=dict)
    next_node: str
    pending_interrupt: PendingInterrupt | None = None
    step: int = 0
    updated_at: str = Field(default_factory=_utc_iso_now)


class CheckpointStore(ABC):
    """Key-value store of the latest checkpoint per thread id."""

    @abstractmethod
    def get(self, thread_id: str) -> Checkpoint | None:
        """Return a copy of the thread's checkpoint, or None if unknown."""

    @abstractmethod
    def put(self, checkpoint: Checkpoint) -> None:
        """Replace the thread's checkpoint."""

    @abstractmethod
    def delete(self, thread_id: str) -> bool:
        """Drop a thread. Returns False if it was unknown."""

    @abstractmethod
    def thread_ids(self) -> list[str]:
        """List known thread ids."""


class InMemoryCheckpointStore(CheckpointStore):
    """Process-local store; checkpoints are deep-copied in and out."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._checkpoints: dict[str, Checkpoint] = {}

    def get(self, thread_id: str) -> Checkpoint | None:
        with self._lock:
            found = self._checkpoints.get(thread_id)
            return found.model_copy(deep=True) if found is not None else None

    def put(self, checkpoint: Checkpoint) -> None:
        with self._lock:
            self._checkpoints[checkpoint.thread_id] = checkpoint.model_copy(deep=True)

    def delete(self, thread_id: str) -> bool:
        with self._lock:
            return self._checkpoints.pop(thread_id, None) is not None

    def thread_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._checkpoints)


class JsonFileCheckpointStore(CheckpointStore):
    """JSON-file backed store: one document mapping thread id to checkpoint."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = threading.Lock()

    def _read_unlocked(self) -> dict[str, Checkpoint]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                raise ValueError("expected an object keyed by thread id")
            return {key: Checkpoint.model_validate(value) for key, value in raw.items()}
        except ValueError as e:
            raise CheckpointStoreError(f"Checkpoint file {self.path} is unreadable: {e}") from e

    def _load_unlocked(self) -> dict[str, Checkpoint]:
        # Readers see an unreadable file as empty; writers must not replace it.
        try:
            return self._read_unlocked()
        except CheckpointStoreError:
            logger.warning(
                "Checkpoint file is unreadable; treating as empty",
                extra={"path": str(self.path)},
            )
            return {}

    def _save_unlocked(self, checkpoints: dict[str, Checkpoint]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {key: cp.model_dump(mode="json") for key, cp in sorted(checkpoints.items())}
        text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"

        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp.write(text)
            tmp_path = Path(tmp.name)
        try:
            os.replace(tmp_path, self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

    def get(self, thread_id: str) -> Checkpoint | None:
        with self._lock:
            return self._load_unlocked().get(thread_id)

    def put(self, checkpoint: Checkpoint) -> None:
        with self._lock:
            checkpoints = self._read_unlocked()
            checkpoints[checkpoint.thread_id] = checkpoint
            self._save_unlocked(checkpoints)

    def delete(self, thread_id: str) -> bool:
        with self._lock:
            checkpoints = self._read_unlocked()
            if checkpoints.pop(thread_id, None) is None:
                return False
            self._save_unlocked(checkpoints)
            return True

    def thread_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._load_unlocked())
