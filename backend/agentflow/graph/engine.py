"""Minimal state-graph engine.

Build a graph with ``StateGraph``, wire it with fixed and conditional edges,
then ``compile()`` it into a ``CompiledGraph`` and ``ainvoke()`` it::

    workflow = StateGraph(schema)
    workflow.add_node("agent", agent_node)
    workflow.add_node("tools", ToolNode(tools))
    workflow.set_entry_point("agent")
    workflow.add_conditional_edges("agent", tools_condition, ["tools", END])
    workflow.add_edge("tools", "agent")
    graph = workflow.compile()
    final_state = await graph.ainvoke({"messages": [...]})

Execution runs in steps.  Each step holds an ordered set of active nodes;
they are awaited one at a time against the same pre-step state and their
updates are merged afterwards.  Nothing runs concurrently with a node.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from agentflow.exceptions import (
    ExternalCallFailure,
    GraphConfigurationError,
    StepLimitExceeded,
)
from agentflow.graph.edges import (
    END,
    START,
    ConditionalEdge,
    Destinations,
    FixedEdge,
    Router,
    router_name,
)
from agentflow.graph.state import StateSchema

logger = logging.getLogger(__name__)

PartialState = Optional[Mapping[str, Any]]
NodeFunc = Callable[[Mapping[str, Any]], Union[PartialState, Awaitable[PartialState]]]


@dataclass(frozen=True)
class RetryPolicy:
    """Opt-in retry for nodes whose external calls may fail transiently.

    Only ``ExternalCallFailure`` is retried.  ``max_attempts`` counts the
    first try.
    """

    max_attempts: int = 3
    initial_interval: float = 0.5
    backoff_factor: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def delay_for(self, attempt: int) -> float:
        return self.initial_interval * (self.backoff_factor ** (attempt - 1))


@dataclass(frozen=True)
class Node:
    name: str
    func: NodeFunc
    is_async: bool
    retry: Optional[RetryPolicy] = None


def _is_async_callable(func: Any) -> bool:
    if inspect.iscoroutinefunction(func):
        return True
    call = getattr(func, "__call__", None)
    return inspect.iscoroutinefunction(call)


class StateGraph:
    """Builder for a graph over a fixed ``StateSchema``."""

    def __init__(self, schema: StateSchema) -> None:
        self.schema = schema
        self.nodes: dict[str, Node] = {}
        self.fixed_edges: list[FixedEdge] = []
        self.conditional_edges: dict[str, ConditionalEdge] = {}

    def add_node(self, name: str, func: NodeFunc, *, retry: Optional[RetryPolicy] = None) -> "StateGraph":
        if name in (START, END):
            raise GraphConfigurationError(f"'{name}' is reserved")
        if name in self.nodes:
            raise GraphConfigurationError(f"Node '{name}' already exists")
        if not callable(func):
            raise GraphConfigurationError(f"Node '{name}' must be callable")
        self.nodes[name] = Node(name, func, _is_async_callable(func), retry)
        return self

    def add_edge(self, source: str, destination: str) -> "StateGraph":
        if source == END:
            raise GraphConfigurationError("END cannot have outgoing edges")
        if destination == START:
            raise GraphConfigurationError("START cannot be a destination")
        self.fixed_edges.append(FixedEdge(source, destination))
        return self

    def add_conditional_edges(
        self,
        source: str,
        router: Router,
        destinations: Optional[Destinations] = None,
    ) -> "StateGraph":
        if source == END:
            raise GraphConfigurationError("END cannot have outgoing edges")
        if source in self.conditional_edges:
            raise GraphConfigurationError(f"'{source}' already has a conditional edge")
        self.conditional_edges[source] = ConditionalEdge.create(source, router, destinations)
        return self

    def set_entry_point(self, name: str) -> "StateGraph":
        return self.add_edge(START, name)

    def set_finish_point(self, name: str) -> "StateGraph":
        return self.add_edge(name, END)

    def compile(
        self,
        *,
        max_steps: Optional[int] = None,
        node_timeout: Optional[float] = None,
    ) -> "CompiledGraph":
        """Validate the wiring and return an executable graph.

        Args:
            max_steps: Optional cap on executed steps.  ``None`` leaves the
                graph unbounded, so an agent that never stops requesting
                tools will never finish.
            node_timeout: Optional seconds allowed per node call.

        Raises:
            GraphConfigurationError: The edge table references unknown nodes,
                a node has no way out, or START has no edge.
        """
        known = set(self.nodes) | {END}
        outgoing: dict[str, list[str]] = {}

        for edge in self.fixed_edges:
            if edge.source != START and edge.source not in self.nodes:
                raise GraphConfigurationError(f"Edge source '{edge.source}' is not a node")
            if edge.destination not in known:
                raise GraphConfigurationError(f"Edge destination '{edge.destination}' is not a node")
            targets = outgoing.setdefault(edge.source, [])
            if edge.destination not in targets:
                targets.append(edge.destination)

        conditional: dict[str, ConditionalEdge] = {}
        for source, edge in self.conditional_edges.items():
            if source != START and source not in self.nodes:
                raise GraphConfigurationError(f"Conditional edge source '{source}' is not a node")
            if source in outgoing:
                raise GraphConfigurationError(
                    f"'{source}' has both fixed and conditional edges"
                )
            path_map = edge.path_map
            if path_map is None:
                path_map = {name: name for name in [*self.nodes, END]}
            missing = [dest for dest in path_map.values() if dest not in known]
            if missing:
                raise GraphConfigurationError(
                    f"Router '{router_name(edge.router)}' on '{source}' declares unknown "
                    f"destination(s) {missing}"
                )
            conditional[source] = ConditionalEdge(source, edge.router, dict(path_map))

        if START not in outgoing and START not in conditional:
            raise GraphConfigurationError("Graph has no entry point; add an edge from START")
        dead_ends = [name for name in self.nodes if name not in outgoing and name not in conditional]
        if dead_ends:
            raise GraphConfigurationError(f"Node(s) {dead_ends} have no outgoing edge")
        if max_steps is not None and max_steps < 1:
            raise GraphConfigurationError("max_steps must be at least 1")

        compiled = CompiledGraph(
            schema=self.schema,
            nodes=dict(self.nodes),
            fixed=outgoing,
            conditional=conditional,
            max_steps=max_steps,
            node_timeout=node_timeout,
        )
        logger.info(
            "Graph compiled with %d node(s): %s",
            len(self.nodes),
            list(self.nodes),
        )
        return compiled


class CompiledGraph:
    """Executable produced by ``StateGraph.compile``.

    Holds no per-invocation state, so one instance can serve many
    invocations, including concurrent ones on the same event loop.
    """

    def __init__(
        self,
        schema: StateSchema,
        nodes: dict[str, Node],
        fixed: dict[str, list[str]],
        conditional: dict[str, ConditionalEdge],
        max_steps: Optional[int] = None,
        node_timeout: Optional[float] = None,
    ) -> None:
        self.schema = schema
        self.nodes = nodes
        self.fixed = fixed
        self.conditional = conditional
        self.max_steps = max_steps
        self.node_timeout = node_timeout

    def next_nodes(self, source: str, state: Mapping[str, Any]) -> list[str]:
        """Destinations leaving ``source`` for the given state (END included)."""
        if source in self.conditional:
            return [self.conditional[source].resolve(state)]
        return list(self.fixed.get(source, []))

    async def ainvoke(self, input: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
        """Run the graph from START until every branch has reached END."""
        state = self.schema.merge(self.schema.initial_state(), input or {})
        active = [name for name in self.next_nodes(START, state) if name != END]
        steps = 0

        while active:
            if self.max_steps is not None and steps >= self.max_steps:
                logger.error("Step limit of %d reached with %s still active", self.max_steps, active)
                raise StepLimitExceeded(self.max_steps)
            steps += 1
            logger.debug("Step %d: running %s", steps, active)

            updates = []
            for name in active:
                updates.append((name, await self._run_node(self.nodes[name], state)))
            state = self.schema.merge_many(state, updates)

            following: list[str] = []
            for name in active:
                for destination in self.next_nodes(name, state):
                    if destination != END and destination not in following:
                        following.append(destination)
            active = following

        logger.debug("Graph reached END after %d step(s)", steps)
        return state

    def invoke(self, input: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
        """Blocking wrapper around ``ainvoke`` for callers without a loop."""
        return asyncio.run(self.ainvoke(input))

    async def _run_node(self, node: Node, state: Mapping[str, Any]) -> PartialState:
        attempts = node.retry.max_attempts if node.retry else 1
        for attempt in range(1, attempts + 1):
            try:
                return await self._call_node(node, state)
            except ExternalCallFailure as exc:
                if attempt >= attempts:
                    logger.error("Node '%s' failed: %s", node.name, exc)
                    raise
                delay = node.retry.delay_for(attempt)
                logger.warning(
                    "Node '%s' failed (attempt %d/%d), retrying in %.2fs: %s",
                    node.name,
                    attempt,
                    attempts,
                    delay,
                    exc,
                )
                await asyncio.sleep(delay)
            except Exception as exc:
                logger.error("Node '%s' failed: %s", node.name, exc)
                raise
        return None

    async def _call_node(self, node: Node, state: Mapping[str, Any]) -> PartialState:
        # Lists are copied too, so in-place edits never reach the shared state.
        view = {name: list(value) if isinstance(value, list) else value for name, value in state.items()}
        if not node.is_async:
            result = node.func(view)
            if inspect.isawaitable(result):
                result = await self._await(node, result)
            return result
        return await self._await(node, node.func(view))

    async def _await(self, node: Node, awaitable: Awaitable[PartialState]) -> PartialState:
        if self.node_timeout is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout=self.node_timeout)
        except asyncio.TimeoutError as exc:
            raise ExternalCallFailure(
                f"node '{node.name}'",
                f"timed out after {self.node_timeout}s",
                timeout=self.node_timeout,
            ) from exc
