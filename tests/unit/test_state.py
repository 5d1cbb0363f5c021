"""Unit tests for state reducers."""

from __future__ import annotations

import pytest

from fitness_agent.graph import Accumulate, InvalidUpdateError, LastValue, StateSchema


def _schema() -> StateSchema:
    return StateSchema(messages=Accumulate(), label=LastValue(), count=LastValue(initial=0))


def test_initial_state_uses_defaults() -> None:
    assert _schema().initial() == {"messages": [], "label": None, "count": 0}


def test_initial_state_is_fresh_each_time() -> None:
    schema = _schema()
    first = schema.initial()
    first["messages"].append("x")
    assert schema.initial()["messages"] == []


def test_accumulating_field_never_shrinks_and_keeps_order() -> None:
    schema = _schema()
    updates = [
        {"messages": ["a"]},
        {"count": 3},
        {"messages": ["b", "c"]},
        {"messages": []},
        {"label": "x", "messages": "d"},
    ]

    state = schema.initial()
    history: list[list[str]] = []
    for update in updates:
        previous = list(state["messages"])
        state = schema.merge(state, update)
        assert state["messages"][: len(previous)] == previous
        history.append(list(state["messages"]))

    assert state["messages"] == ["a", "b", "c", "d"]
    assert [len(h) for h in history] == sorted(len(h) for h in history)


def test_scalar_is_last_write_wins_regardless_of_granularity() -> None:
    schema = _schema()
    updates = [{"count": 1}, {"label": "a"}, {"count": 2}, {}, {"count": 5, "label": "b"}]

    stepwise = schema.initial()
    for update in updates:
        # Round-trip through a fresh copy as a checkpoint would.
        stepwise = dict(schema.merge(stepwise, update))

    folded = schema.initial()
    folded = schema.merge(folded, {"count": 1, "label": "a"})
    folded = schema.merge(folded, {"count": 5, "label": "b"})

    assert stepwise == folded
    assert stepwise["count"] == 5
    assert stepwise["label"] == "b"


def test_partial_update_leaves_other_fields_untouched() -> None:
    schema = _schema()
    state = schema.merge(schema.initial(), {"messages": ["a"], "label": "x", "count": 2})
    merged = schema.merge(state, {"count": 3})
    assert merged["messages"] == ["a"]
    assert merged["label"] == "x"


def test_explicit_none_replaces_scalar() -> None:
    schema = _schema()
    state = schema.merge(schema.initial(), {"label": "x"})
    assert schema.merge(state, {"label": None})["label"] is None


def test_merge_does_not_mutate_inputs() -> None:
    schema = _schema()
    current = schema.merge(schema.initial(), {"messages": [{"role": "user", "content": "hi"}]})
    update = {"messages": [{"role": "assistant", "content": "hello"}]}

    merged = schema.merge(current, update)
    merged["messages"][0]["content"] = "changed"

    assert current["messages"] == [{"role": "user", "content": "hi"}]
    assert update == {"messages": [{"role": "assistant", "content": "hello"}]}


def test_unknown_field_is_rejected() -> None:
    with pytest.raises(InvalidUpdateError):
        _schema().merge(_schema().initial(), {"unknown": 1})


def test_coerce_fills_missing_fields() -> None:
    assert _schema().coerce({"label": "x"}) == {"messages": [], "label": "x", "count": 0}


def test_schema_requires_fields() -> None:
    with pytest.raises(ValueError):
        StateSchema()
