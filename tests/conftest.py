"""Test configuration and fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from fitness_agent.core.agent import FitnessAgent
from fitness_agent.core.config import AgentConfig, CheckpointConfig, LLMConfig, WorkflowConfig
from fitness_agent.graph import InMemoryCheckpointStore
from fitness_agent.llm.provider import LLMProvider

NO_PREFERENCES = json.dumps({"dietType": None, "fitnessLevel": None})


def preferences(diet_type: str | None, fitness_level: str | None) -> str:
    return json.dumps({"dietType": diet_type, "fitnessLevel": fitness_level})


class FakeLLM(LLMProvider):
    """Scripted provider.

    Extraction requests pop from ``extractions`` (falling back to an empty
    preference object); plan requests return ``plan``. Queue items that are
    exceptions are raised instead of returned.
    """

    def __init__(self, extractions: list[str | Exception] | None = None, plan: str = "PLAN"):
        self.extractions = list(extractions or [])
        self.plan: str | Exception = plan
        self.calls: list[list[dict[str, str]]] = []

    async def chat(
        self,
        messages: list[dict[str, str]],
        max_tokens: int | None = None,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> str:
        self.calls.append(messages)
        if messages[-1]["content"].startswith("Extract"):
            reply = self.extractions.pop(0) if self.extractions else NO_PREFERENCES
        else:
            reply = self.plan
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def plan_requests(self) -> list[str]:
        return [m[-1]["content"] for m in self.calls if m[-1]["content"].startswith("Please")]


class ScriptedHumanInput:
    def __init__(self, replies: list[str]) -> None:
        self.replies = list(replies)
        self.prompts: list[str] = []

    async def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.replies.pop(0)


@pytest.fixture
def agent_config(tmp_path: Path) -> AgentConfig:
    """Provide a test agent configuration."""
    return AgentConfig(
        log_level="DEBUG",
        debug=True,
        llm=LLMConfig(openai_api_key="test-key"),
        checkpoint=CheckpointConfig(backend="memory", path=tmp_path / "checkpoints.json"),
        workflow=WorkflowConfig(max_preference_requests=2, max_steps=50),
    )


@pytest.fixture
def make_agent(agent_config: AgentConfig) -> Callable[..., FitnessAgent]:
    """Build an agent around a fake provider and an in-memory store."""

    def _make(
        llm: LLMProvider | None = None, human_input: ScriptedHumanInput | None = None
    ) -> FitnessAgent:
        return FitnessAgent(
            agent_config,
            llm=llm or FakeLLM(),
            store=InMemoryCheckpointStore(),
            human_input=human_input,
        )

    return _make
