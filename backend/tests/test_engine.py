import asyncio

import pytest

from agentflow.exceptions import (
    ExternalCallFailure,
    GraphConfigurationError,
    RoutingError,
    SchemaViolation,
    StepLimitExceeded,
)
from agentflow.graph import END, START, RetryPolicy, StateField, StateGraph, StateSchema, append_field

SCHEMA = StateSchema(
    {
        "value": StateField(int),
        "trail": append_field(),
        "left": StateField(str),
        "right": StateField(str),
    }
)


def make_step(name, delta=0):
    async def step(state):
        return {"value": (state["value"] or 0) + delta, "trail": [name]}

    return step


class TestLinearGraphs:

    def test_fixed_chain(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("a", make_step("a", 1))
        workflow.add_node("b", make_step("b", 10))
        workflow.set_entry_point("a")
        workflow.add_edge("a", "b")
        workflow.set_finish_point("b")

        result = asyncio.run(workflow.compile().ainvoke({"value": 0}))

        assert result["value"] == 11
        assert result["trail"] == ["a", "b"]

    def test_sync_node_and_blocking_invoke(self):
        def double(state):
            return {"value": state["value"] * 2}

        workflow = StateGraph(SCHEMA)
        workflow.add_node("double", double)
        workflow.set_entry_point("double")
        workflow.add_edge("double", END)

        assert workflow.compile().invoke({"value": 4})["value"] == 8

    def test_node_returning_none_leaves_state(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("noop", lambda state: None)
        workflow.set_entry_point("noop")
        workflow.add_edge("noop", END)

        assert workflow.compile().invoke({"value": 3})["value"] == 3

    def test_input_not_mutated(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("a", make_step("a", 1))
        workflow.set_entry_point("a")
        workflow.add_edge("a", END)
        payload = {"value": 1, "trail": ["start"]}

        result = workflow.compile().invoke(payload)

        assert payload == {"value": 1, "trail": ["start"]}
        assert result["trail"] == ["start", "a"]

    def test_compiled_graph_is_reusable(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("a", make_step("a", 1))
        workflow.set_entry_point("a")
        workflow.add_edge("a", END)
        graph = workflow.compile()

        assert graph.invoke({"value": 1})["value"] == 2
        assert graph.invoke({"value": 5})["value"] == 6

    def test_unknown_input_field(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("a", make_step("a"))
        workflow.set_entry_point("a")
        workflow.add_edge("a", END)

        with pytest.raises(SchemaViolation):
            workflow.compile().invoke({"nope": 1})


class TestConditionalEdges:

    def build_loop(self, router, destinations, **compile_kwargs):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("dec", make_step("dec", -1))
        workflow.set_entry_point("dec")
        workflow.add_conditional_edges("dec", router, destinations)
        return workflow.compile(**compile_kwargs)

    def test_loop_until_end(self):
        graph = self.build_loop(lambda s: "dec" if s["value"] > 0 else END, ["dec", END])
        result = graph.invoke({"value": 3})
        assert result["value"] == 0
        assert result["trail"] == ["dec", "dec", "dec"]

    def test_path_map(self):
        graph = self.build_loop(
            lambda s: "again" if s["value"] > 0 else "stop",
            {"again": "dec", "stop": END},
        )
        assert graph.invoke({"value": 2})["value"] == 0

    def test_undeclared_destination_raises(self):
        graph = self.build_loop(lambda s: "elsewhere", ["dec", END])
        with pytest.raises(RoutingError) as exc_info:
            graph.invoke({"value": 2})
        assert exc_info.value.source == "dec"
        assert exc_info.value.destination == "elsewhere"

    def test_omitted_destinations_allow_any_node(self):
        graph = self.build_loop(lambda s: "dec" if s["value"] > 0 else END, None)
        assert graph.invoke({"value": 2})["value"] == 0

    def test_omitted_destinations_still_checked(self):
        graph = self.build_loop(lambda s: "ghost", None)
        with pytest.raises(RoutingError):
            graph.invoke({"value": 2})

    def test_conditional_from_start(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("dec", make_step("dec", -1))
        workflow.add_conditional_edges(START, lambda s: "dec" if s["value"] > 0 else END, ["dec", END])
        workflow.add_edge("dec", END)
        graph = workflow.compile()

        assert graph.invoke({"value": 0}) == {"value": 0, "trail": [], "left": None, "right": None}
        assert graph.invoke({"value": 1})["trail"] == ["dec"]

    def test_step_limit(self):
        graph = self.build_loop(lambda s: "dec", ["dec", END], max_steps=5)
        with pytest.raises(StepLimitExceeded) as exc_info:
            graph.invoke({"value": 100})
        assert exc_info.value.max_steps == 5

    def test_step_limit_not_hit_when_ending_in_time(self):
        graph = self.build_loop(lambda s: "dec" if s["value"] > 0 else END, ["dec", END], max_steps=3)
        assert graph.invoke({"value": 3})["value"] == 0


class TestFanOut:

    def test_parallel_branches_merge_disjoint_fields(self):
        order = []

        def writer(field, tag):
            async def node(state):
                order.append(tag)
                return {field: tag}

            return node

        workflow = StateGraph(SCHEMA)
        workflow.add_node("left1", writer("left", "l1"))
        workflow.add_node("right1", writer("right", "r1"))
        workflow.add_node("left2", writer("left", "l2"))
        workflow.add_node("right2", writer("right", "r2"))
        workflow.add_edge(START, "left1")
        workflow.add_edge(START, "right1")
        workflow.add_edge("left1", "left2")
        workflow.add_edge("right1", "right2")
        workflow.add_edge("left2", END)
        workflow.add_edge("right2", END)

        result = workflow.compile().invoke({})

        assert result["left"] == "l2"
        assert result["right"] == "r2"
        assert order == ["l1", "r1", "l2", "r2"]

    def test_branches_see_pre_step_state(self):
        seen = []

        async def bump(state):
            return {"value": 1}

        async def peek(state):
            seen.append(state["value"])
            return {"trail": ["peek"]}

        workflow = StateGraph(SCHEMA)
        workflow.add_node("bump", bump)
        workflow.add_node("peek", peek)
        workflow.add_edge(START, "bump")
        workflow.add_edge(START, "peek")
        workflow.add_edge("bump", END)
        workflow.add_edge("peek", END)

        result = workflow.compile().invoke({"value": 0})

        assert seen == [0]
        assert result["value"] == 1

    def test_conflicting_writes_in_one_step(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("a", make_step("a", 1))
        workflow.add_node("b", make_step("b", 2))
        workflow.add_edge(START, "a")
        workflow.add_edge(START, "b")
        workflow.add_edge("a", END)
        workflow.add_edge("b", END)

        with pytest.raises(SchemaViolation):
            workflow.compile().invoke({"value": 0})

    def test_in_place_edits_do_not_leak(self):
        async def meddle(state):
            state["trail"].append("meddled")
            state["value"] = 42
            return None

        workflow = StateGraph(SCHEMA)
        workflow.add_node("first", make_step("first", 1))
        workflow.add_node("meddle", meddle)
        workflow.set_entry_point("first")
        workflow.add_edge("first", "meddle")
        workflow.add_edge("meddle", END)

        result = workflow.compile().invoke({"value": 0})

        assert result["trail"] == ["first"]
        assert result["value"] == 1

    def test_branches_appending_to_same_field(self):
        workflow = StateGraph(StateSchema({"items": append_field()}))
        workflow.add_node("a", lambda s: {"items": ["a"]})
        workflow.add_node("b", lambda s: {"items": ["b"]})
        workflow.add_edge(START, "a")
        workflow.add_edge(START, "b")
        workflow.add_edge("a", END)
        workflow.add_edge("b", END)

        with pytest.raises(SchemaViolation) as exc_info:
            workflow.compile().invoke({})
        assert exc_info.value.fields == ["items"]

    def test_shared_destination_runs_once(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("a", lambda s: {"left": "a"})
        workflow.add_node("b", lambda s: {"right": "b"})
        workflow.add_node("join", lambda s: {"trail": ["join"]})
        workflow.add_edge(START, "a")
        workflow.add_edge(START, "b")
        workflow.add_edge("a", "join")
        workflow.add_edge("b", "join")
        workflow.add_edge("join", END)

        assert workflow.compile().invoke({})["trail"] == ["join"]


class TestNodeFailures:

    def test_undeclared_field_aborts_run(self):
        seen = []

        async def bad(state):
            return {"value": 99, "unexpected": 1}

        async def after(state):
            seen.append(state)
            return None

        workflow = StateGraph(SCHEMA)
        workflow.add_node("first", make_step("first", 1))
        workflow.add_node("bad", bad)
        workflow.add_node("after", after)
        workflow.set_entry_point("first")
        workflow.add_edge("first", "bad")
        workflow.add_edge("bad", "after")
        workflow.add_edge("after", END)

        with pytest.raises(SchemaViolation):
            workflow.compile().invoke({"value": 0})
        assert seen == []

    def test_node_exception_propagates(self):
        async def boom(state):
            raise RuntimeError("boom")

        workflow = StateGraph(SCHEMA)
        workflow.add_node("boom", boom)
        workflow.set_entry_point("boom")
        workflow.add_edge("boom", END)

        with pytest.raises(RuntimeError, match="boom"):
            workflow.compile().invoke({})

    def test_node_timeout(self):
        async def slow(state):
            await asyncio.sleep(1)
            return {"value": 1}

        workflow = StateGraph(SCHEMA)
        workflow.add_node("slow", slow)
        workflow.set_entry_point("slow")
        workflow.add_edge("slow", END)

        with pytest.raises(ExternalCallFailure) as exc_info:
            workflow.compile(node_timeout=0.01).invoke({})
        assert exc_info.value.timeout == 0.01

    def test_retry_policy_retries_external_failures(self):
        attempts = []

        async def flaky(state):
            attempts.append(1)
            if len(attempts) < 3:
                raise ExternalCallFailure("model", "unavailable")
            return {"value": len(attempts)}

        workflow = StateGraph(SCHEMA)
        workflow.add_node("flaky", flaky, retry=RetryPolicy(max_attempts=3, initial_interval=0))
        workflow.set_entry_point("flaky")
        workflow.add_edge("flaky", END)

        assert workflow.compile().invoke({})["value"] == 3

    def test_retry_gives_up(self):
        async def down(state):
            raise ExternalCallFailure("search", "down")

        workflow = StateGraph(SCHEMA)
        workflow.add_node("down", down, retry=RetryPolicy(max_attempts=2, initial_interval=0))
        workflow.set_entry_point("down")
        workflow.add_edge("down", END)

        with pytest.raises(ExternalCallFailure):
            workflow.compile().invoke({})

    def test_no_retry_without_policy(self):
        attempts = []

        async def flaky(state):
            attempts.append(1)
            raise ExternalCallFailure("model", "unavailable")

        workflow = StateGraph(SCHEMA)
        workflow.add_node("flaky", flaky)
        workflow.set_entry_point("flaky")
        workflow.add_edge("flaky", END)

        with pytest.raises(ExternalCallFailure):
            workflow.compile().invoke({})
        assert len(attempts) == 1

    def test_retry_policy_backoff(self):
        policy = RetryPolicy(max_attempts=4, initial_interval=0.5, backoff_factor=2)
        assert [policy.delay_for(n) for n in (1, 2, 3)] == [0.5, 1.0, 2.0]
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)


class TestCompileValidation:

    def test_duplicate_node(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("a", make_step("a"))
        with pytest.raises(GraphConfigurationError):
            workflow.add_node("a", make_step("a"))

    @pytest.mark.parametrize("name", [START, END])
    def test_reserved_names(self, name):
        with pytest.raises(GraphConfigurationError):
            StateGraph(SCHEMA).add_node(name, make_step("x"))

    def test_unknown_destination(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("a", make_step("a"))
        workflow.set_entry_point("a")
        workflow.add_edge("a", "missing")
        with pytest.raises(GraphConfigurationError):
            workflow.compile()

    def test_unknown_conditional_destination(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("a", make_step("a"))
        workflow.set_entry_point("a")
        workflow.add_conditional_edges("a", lambda s: END, ["missing", END])
        with pytest.raises(GraphConfigurationError):
            workflow.compile()

    def test_missing_entry_point(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("a", make_step("a"))
        workflow.add_edge("a", END)
        with pytest.raises(GraphConfigurationError):
            workflow.compile()

    def test_dead_end_node(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("a", make_step("a"))
        workflow.add_node("b", make_step("b"))
        workflow.set_entry_point("a")
        workflow.add_edge("a", "b")
        with pytest.raises(GraphConfigurationError):
            workflow.compile()

    def test_mixed_edge_kinds(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("a", make_step("a"))
        workflow.set_entry_point("a")
        workflow.add_edge("a", END)
        workflow.add_conditional_edges("a", lambda s: END, [END])
        with pytest.raises(GraphConfigurationError):
            workflow.compile()

    def test_end_has_no_outgoing_edges(self):
        with pytest.raises(GraphConfigurationError):
            StateGraph(SCHEMA).add_edge(END, "a")

    def test_invalid_max_steps(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("a", make_step("a"))
        workflow.set_entry_point("a")
        workflow.add_edge("a", END)
        with pytest.raises(GraphConfigurationError):
            workflow.compile(max_steps=0)

    def test_async_flag(self):
        workflow = StateGraph(SCHEMA)
        workflow.add_node("async_node", make_step("a"))
        workflow.add_node("sync_node", lambda s: None)
        assert workflow.nodes["async_node"].is_async
        assert not workflow.nodes["sync_node"].is_async
