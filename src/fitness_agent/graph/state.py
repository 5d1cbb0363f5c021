"""Shared state with per-field reducers.

A state is a plain mapping. Each declared field owns a channel that knows its
default value and how to fold an update into the current value.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import InvalidUpdateError

State = dict[str, Any]


class Channel:
    """Reducer for a single state field."""

    def default(self) -> Any:
        raise NotImplementedError

    def reduce(self, current: Any, value: Any) -> Any:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class Accumulate(Channel):
    """Append-only list field. Prior elements are never dropped or reordered."""

    def default(self) -> list[Any]:
        return []

    def reduce(self, current: Any, value: Any) -> list[Any]:
        items = list(current or [])
        if isinstance(value, (list, tuple)):
            items.extend(copy.deepcopy(list(value)))
        else:
            items.append(copy.deepcopy(value))
        return items


@dataclass(frozen=True, slots=True)
class LastValue(Channel):
    """Scalar field: the most recently supplied value wins.

    Presence decides, not truthiness: an explicit ``None`` in an update replaces
    the current value.
    """

    initial: Any = None

    def default(self) -> Any:
        return copy.deepcopy(self.initial)

    def reduce(self, current: Any, value: Any) -> Any:
        _ = current
        return copy.deepcopy(value)


class StateSchema:
    """Declared fields of a graph state and their reducers."""

    def __init__(self, **channels: Channel) -> None:
        if not channels:
            raise ValueError("A state schema needs at least one field")
        self._channels: dict[str, Channel] = dict(channels)

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(self._channels)

    def initial(self) -> State:
        return {name: channel.default() for name, channel in self._channels.items()}

    def coerce(self, raw: Mapping[str, Any]) -> State:
        """Fill missing fields with defaults and drop nothing else.

        Used when loading persisted state written by an older schema.
        """

        state = self.initial()
        state.update(copy.deepcopy(dict(raw)))
        return state

    def merge(self, current: Mapping[str, Any], update: Mapping[str, Any] | None) -> State:
        """Fold ``update`` into ``current`` and return a new state.

        Fields absent from ``update`` pass through unchanged. Neither input is
        mutated.
        """

        merged: State = copy.deepcopy(dict(current))
        if not update:
            return merged

        unknown = [key for key in update if key not in self._channels]
        if unknown:
            raise InvalidUpdateError(f"Unknown state field(s): {', '.join(sorted(unknown))}")

        for key, value in update.items():
            channel = self._channels[key]
            present = merged[key] if key in merged else channel.default()
            merged[key] = channel.reduce(present, value)
        return merged
