"""End-to-end tests of the diet conversation on the graph executor."""

from __future__ import annotations

import pytest
from conftest import FakeLLM, ScriptedHumanInput, preferences

from fitness_agent.graph import RunResult, RunStatus
from fitness_agent.workflow import Nodes, prompts
from fitness_agent.workflow.nodes import parse_preferences

THREAD = "conversation-1"


@pytest.mark.asyncio
async def test_preferences_given_upfront_generate_plan_directly(make_agent) -> None:
    llm = FakeLLM([preferences("vegan", "beginner")], plan="Eat plants.")
    human = ScriptedHumanInput([])
    agent = make_agent(llm, human)

    result = await agent.send("I'm a vegan beginner", THREAD)

    assert result.status is RunStatus.DONE
    assert result.state is not None
    assert result.state["diet_type"] == "vegan"
    assert result.state["fitness_level"] == "beginner"
    assert result.state["ask_count"] == 0
    assert result.state["messages"][-1] == {"role": "assistant", "content": "Eat plants."}
    assert human.prompts == []

    checkpoint = agent.get_state(THREAD)
    assert checkpoint is not None
    # extract_preferences + generate_diet
    assert checkpoint.step == 2
    assert llm.plan_requests == [prompts.generation_prompt("vegan", "beginner")]


async def _suspend_for_review(agent) -> RunResult:
    result = await agent.send("hello", THREAD)
    assert result.status is RunStatus.SUSPENDED
    assert result.interrupt.node == Nodes.REVIEW_BY_HUMAN.value
    return result


@pytest.mark.asyncio
async def test_missing_preferences_are_asked_twice_then_reviewed(make_agent) -> None:
    human = ScriptedHumanInput(["no idea", "still no idea"])
    agent = make_agent(FakeLLM(), human)

    result = await _suspend_for_review(agent)

    assert human.prompts == [prompts.FOLLOWUP_QUESTION, prompts.FOLLOWUP_QUESTION]
    assert result.interrupt_value == prompts.review_prompt(None, None)

    checkpoint = agent.get_state(THREAD)
    assert checkpoint is not None
    assert checkpoint.status is RunStatus.SUSPENDED
    assert checkpoint.next_node == Nodes.REVIEW_BY_HUMAN.value
    assert checkpoint.state["ask_count"] == 2
    assert [m["role"] for m in checkpoint.state["messages"]] == [
        "user",
        "assistant",
        "user",
        "assistant",
        "user",
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("approval", ["y", "Yes", " YES "])
async def test_approved_review_generates_random_plan(make_agent, approval: str) -> None:
    llm = FakeLLM(plan="Random plan.")
    agent = make_agent(llm, ScriptedHumanInput(["?", "?"]))
    await _suspend_for_review(agent)

    result = await agent.resume(approval, THREAD)

    assert result.status is RunStatus.DONE
    assert result.state is not None
    assert result.state["diet_type"] == "random"
    assert result.state["fitness_level"] == "unknown"
    assert result.state["messages"][-1]["content"] == "Random plan."
    assert llm.plan_requests == [prompts.generation_prompt("random", "unknown")]


@pytest.mark.asyncio
async def test_rejected_review_resets_counter_and_asks_again(make_agent) -> None:
    llm = FakeLLM(
        [
            preferences(None, None),
            preferences(None, None),
            preferences(None, None),
            preferences("keto", "advanced"),
        ]
    )
    human = ScriptedHumanInput(["?", "?", "keto please, I'm advanced"])
    agent = make_agent(llm, human)
    await _suspend_for_review(agent)

    result = await agent.resume("n", THREAD)

    assert result.status is RunStatus.DONE
    assert len(human.prompts) == 3
    assert result.state is not None
    # Reset to 0 by the review, then incremented once by the follow-up question.
    assert result.state["ask_count"] == 1
    assert result.state["diet_type"] == "keto"
    assert result.state["fitness_level"] == "advanced"


@pytest.mark.asyncio
async def test_rejected_review_can_cycle_back_to_review(make_agent) -> None:
    agent = make_agent(FakeLLM(), ScriptedHumanInput(["?", "?", "?", "?"]))
    await _suspend_for_review(agent)

    again = await agent.resume("no", THREAD)

    assert again.status is RunStatus.SUSPENDED
    assert again.interrupt is not None
    assert again.interrupt.node == Nodes.REVIEW_BY_HUMAN.value
    checkpoint = agent.get_state(THREAD)
    assert checkpoint is not None and checkpoint.state["ask_count"] == 2


@pytest.mark.asyncio
async def test_followup_question_interrupts_without_human_input(make_agent) -> None:
    llm = FakeLLM([preferences(None, None), preferences("paleo", "intermediate")])
    agent = make_agent(llm)

    first = await agent.send("hi", THREAD)
    assert first.status is RunStatus.SUSPENDED
    assert first.interrupt is not None
    assert first.interrupt.node == Nodes.ASK_FOR_PREFERENCES.value
    assert first.interrupt_value == prompts.FOLLOWUP_QUESTION

    done = await agent.resume("paleo, intermediate", THREAD)

    assert done.status is RunStatus.DONE
    assert done.state is not None
    assert done.state["diet_type"] == "paleo"
    assert done.state["messages"][1:3] == [
        {"role": "assistant", "content": prompts.FOLLOWUP_QUESTION},
        {"role": "user", "content": "paleo, intermediate"},
    ]
    assert done.state["ask_count"] == 1


@pytest.mark.asyncio
async def test_extraction_failure_falls_back_to_asking(make_agent) -> None:
    llm = FakeLLM(["not json at all", RuntimeError("timeout"), preferences("vegan", "pro")])
    human = ScriptedHumanInput(["vegan", "pro"])
    agent = make_agent(llm, human)

    result = await agent.send("hi", THREAD)

    assert result.status is RunStatus.DONE
    assert result.state is not None
    assert result.state["diet_type"] == "vegan"
    assert len(human.prompts) == 2


@pytest.mark.asyncio
async def test_generation_failure_returns_apology(make_agent) -> None:
    llm = FakeLLM([preferences("vegan", "pro")])
    llm.plan = RuntimeError("rate limited")
    agent = make_agent(llm)

    result = await agent.send("vegan pro", THREAD)

    assert result.status is RunStatus.DONE
    assert result.state is not None
    assert result.state["messages"][-1]["content"] == prompts.GENERATION_FAILED_REPLY


@pytest.mark.asyncio
async def test_known_preferences_survive_partial_extraction(make_agent) -> None:
    llm = FakeLLM([preferences("vegan", None), preferences(None, "beginner")])
    agent = make_agent(llm, ScriptedHumanInput(["beginner"]))

    result = await agent.send("vegan", THREAD)

    assert result.state is not None
    assert result.state["diet_type"] == "vegan"
    assert result.state["fitness_level"] == "beginner"


@pytest.mark.asyncio
async def test_second_turn_keeps_history(make_agent) -> None:
    llm = FakeLLM([preferences("vegan", "pro"), preferences(None, None)], plan="P")
    agent = make_agent(llm)

    await agent.send("vegan pro", THREAD)
    second = await agent.send("thanks, another one", THREAD)

    # Preferences are retained, so the new pass goes straight to generation.
    assert second.status is RunStatus.DONE
    assert second.state is not None
    contents = [m["content"] for m in second.state["messages"]]
    assert contents[0] == "vegan pro"
    assert "thanks, another one" in contents
    assert contents.count("P") == 2


def test_parse_preferences_accepts_code_fence() -> None:
    parsed = parse_preferences('```json\n{"dietType": "keto", "fitnessLevel": null}\n```')
    assert parsed.diet_type == "keto"
    assert parsed.fitness_level is None


def test_router_is_deterministic() -> None:
    from fitness_agent.workflow.nodes import DietWorkflow

    workflow = DietWorkflow(FakeLLM(), max_preference_requests=2)
    base = {"messages": [], "diet_type": None, "fitness_level": None}

    assert workflow.ask_or_generate({**base, "ask_count": 0}) is Nodes.ASK_FOR_PREFERENCES
    assert workflow.ask_or_generate({**base, "ask_count": 2}) is Nodes.REVIEW_BY_HUMAN
    assert workflow.ask_or_generate({**base, "ask_count": 2}) is Nodes.REVIEW_BY_HUMAN
    full = {**base, "diet_type": "keto", "fitness_level": "pro", "ask_count": 2}
    assert workflow.ask_or_generate(full) is Nodes.GENERATE_DIET


@pytest.mark.asyncio
async def test_extraction_requests_stay_out_of_the_transcript(make_agent) -> None:
    llm = FakeLLM([preferences("vegan", None), preferences(None, "beginner")], plan="P")
    agent = make_agent(llm, ScriptedHumanInput(["beginner"]))

    result = await agent.send("vegan", THREAD)

    assert result.state is not None
    assert [m["content"] for m in result.state["messages"]] == [
        "vegan",
        prompts.FOLLOWUP_QUESTION,
        "beginner",
        "P",
    ]
    assert sum(m[-1]["content"].startswith("Extract") for m in llm.calls) == 2
