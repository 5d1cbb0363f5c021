"""Graph definition: nodes, static edges and conditional routers.

Everything is validated in :meth:`GraphBuilder.build`; the resulting
:class:`CompiledGraph` is immutable and only resolves successors.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .errors import GraphValidationError, InvalidRouteError
from .state import State, StateSchema
from .types import END, START, NodeKey, node_key

logger = logging.getLogger(__name__)

NodeFn = Callable[..., Any]
Router = Callable[[State], NodeKey]


@dataclass(frozen=True, slots=True)
class Node:
    key: str
    fn: NodeFn
    wants_context: bool


@dataclass(frozen=True, slots=True)
class ConditionalEdge:
    router: Router
    destinations: frozenset[str] | None = None


def _wants_context(fn: NodeFn) -> bool:
    try:
        params = list(inspect.signature(fn).parameters.values())
    except (TypeError, ValueError):
        return False
    # Parameters with defaults never receive the context.
    positional = [
        p
        for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
        and p.default is inspect.Parameter.empty
    ]
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params):
        return True
    return len(positional) >= 2


class GraphBuilder:
    """Mutable registry used to assemble a graph before compiling it."""

    def __init__(self, schema: StateSchema) -> None:
        self._schema = schema
        self._nodes: dict[str, Node] = {}
        self._edges: dict[str, str] = {}
        self._conditional: dict[str, ConditionalEdge] = {}
        self._errors: list[str] = []

    def add_node(self, key: NodeKey, fn: NodeFn) -> GraphBuilder:
        name = node_key(key)
        if name in (START, END):
            self._errors.append(f"Node name {name!r} is reserved")
        elif name in self._nodes:
            self._errors.append(f"Duplicate node {name!r}")
        else:
            self._nodes[name] = Node(key=name, fn=fn, wants_context=_wants_context(fn))
        return self

    def add_edge(self, source: NodeKey, target: NodeKey) -> GraphBuilder:
        src, dst = node_key(source), node_key(target)
        if src in self._edges or src in self._conditional:
            self._errors.append(f"Node {src!r} already has an outgoing edge")
        else:
            self._edges[src] = dst
        return self

    def add_conditional_edge(
        self,
        source: NodeKey,
        router: Router,
        destinations: Iterable[NodeKey] | None = None,
    ) -> GraphBuilder:
        src = node_key(source)
        if src == START:
            self._errors.append("The start edge must be static")
        elif src in self._edges or src in self._conditional:
            self._errors.append(f"Node {src!r} already has an outgoing edge")
        else:
            allowed = None
            if destinations is not None:
                allowed = frozenset(node_key(d) for d in destinations)
            self._conditional[src] = ConditionalEdge(router=router, destinations=allowed)
        return self

    def build(self) -> CompiledGraph:
        errors = list(self._errors)
        known = set(self._nodes)

        for src, dst in self._edges.items():
            if src != START and src not in known:
                errors.append(f"Edge source {src!r} is not a node")
            if dst == START or (dst != END and dst not in known):
                errors.append(f"Edge target {dst!r} from {src!r} is not a node")

        for src, edge in self._conditional.items():
            if src not in known:
                errors.append(f"Conditional edge source {src!r} is not a node")
            for dst in sorted(edge.destinations or ()):
                if dst != END and dst not in known:
                    errors.append(f"Router of {src!r} declares unknown destination {dst!r}")

        entry = self._edges.get(START)
        if entry is None:
            errors.append("No edge from START")
        elif entry == END:
            errors.append("START must lead to a node")

        if errors:
            raise GraphValidationError("; ".join(errors))

        assert entry is not None
        logger.debug(
            "Graph compiled",
            extra={"nodes": sorted(known), "entry": entry},
        )
        return CompiledGraph(
            schema=self._schema,
            entry=entry,
            nodes=dict(self._nodes),
            edges={k: v for k, v in self._edges.items() if k != START},
            conditional=dict(self._conditional),
        )


class CompiledGraph:
    """Validated, read-only graph."""

    def __init__(
        self,
        *,
        schema: StateSchema,
        entry: str,
        nodes: Mapping[str, Node],
        edges: Mapping[str, str],
        conditional: Mapping[str, ConditionalEdge],
    ) -> None:
        self._schema = schema
        self._entry = entry
        self._nodes = MappingProxyType(dict(nodes))
        self._edges = MappingProxyType(dict(edges))
        self._conditional = MappingProxyType(dict(conditional))

    @property
    def schema(self) -> StateSchema:
        return self._schema

    @property
    def entry(self) -> str:
        return self._entry

    @property
    def nodes(self) -> tuple[str, ...]:
        return tuple(self._nodes)

    def node(self, key: NodeKey) -> Node:
        name = node_key(key)
        try:
            return self._nodes[name]
        except KeyError:
            raise InvalidRouteError(f"Unknown node {name!r}") from None

    def check_destination(self, key: NodeKey, *, source: str) -> str:
        """Return ``key`` normalised if it is a node or END."""

        try:
            name = node_key(key)
        except TypeError as e:
            raise InvalidRouteError(f"Invalid destination from {source!r}: {e}") from None
        if name != END and name not in self._nodes:
            raise InvalidRouteError(f"Destination {name!r} from {source!r} is not a node")
        return name

    def next_node(self, source: str, state: State) -> str:
        """Resolve the successor of ``source`` for the (post-update) ``state``."""

        if source in self._edges:
            return self._edges[source]

        edge = self._conditional.get(source)
        if edge is None:
            raise GraphValidationError(
                f"Node {source!r} has no outgoing edge and did not return a Command"
            )

        try:
            decision = edge.router(state)
        except Exception as e:
            raise InvalidRouteError(f"Router of {source!r} failed: {e}") from e
        if decision is None:
            raise InvalidRouteError(f"Router of {source!r} returned no destination")
        name = self.check_destination(decision, source=source)
        if edge.destinations is not None and name not in edge.destinations:
            raise InvalidRouteError(
                f"Router of {source!r} returned {name!r}, outside its declared destinations"
            )
        return name
