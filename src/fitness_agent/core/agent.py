"""Main agent implementation."""

import logging
from typing import Any

from fitness_agent.core.config import AgentConfig, CheckpointConfig
from fitness_agent.graph import (
    Checkpoint,
    CheckpointStore,
    Executor,
    InMemoryCheckpointStore,
    JsonFileCheckpointStore,
    RunResult,
)
from fitness_agent.llm.factory import LLMFactory
from fitness_agent.llm.provider import LLMProvider
from fitness_agent.workflow import HumanInput, build_diet_graph

logger = logging.getLogger(__name__)


def build_checkpoint_store(config: CheckpointConfig) -> CheckpointStore:
    if config.backend == "json":
        return JsonFileCheckpointStore(config.path)
    return InMemoryCheckpointStore()


class FitnessAgent:
    """Diet-plan assistant running on the graph executor.

    The LLM provider, checkpoint store and graph are built once here and
    injected into the executor; nothing is re-initialised per call.
    """

    def __init__(
        self,
        config: AgentConfig | None = None,
        *,
        llm: LLMProvider | None = None,
        store: CheckpointStore | None = None,
        human_input: HumanInput | None = None,
    ) -> None:
        """Initialize the agent.

        Args:
            config: Configuration object. If None, loads from environment.
            llm: Provider override; defaults to the configured provider.
            store: Checkpoint store override; defaults to the configured backend.
            human_input: Answers follow-up questions inline. Without it they
                surface as interrupts.
        """
        self.config = config or AgentConfig()

        logger.info("Initializing fitness agent")

        self.llm: LLMProvider = llm or LLMFactory.create(self.config.llm)
        self.store: CheckpointStore = store or build_checkpoint_store(self.config.checkpoint)
        self.graph = build_diet_graph(
            self.llm,
            human_input=human_input,
            max_preference_requests=self.config.workflow.max_preference_requests,
        )
        self.executor = Executor(self.graph, self.store, max_steps=self.config.workflow.max_steps)

        logger.info("Fitness agent initialized successfully")

    async def send(self, text: str, thread_id: str) -> RunResult:
        """Add a user message to the thread and run the workflow."""
        return await self.executor.invoke(
            {"messages": [{"role": "user", "content": text}]}, thread_id
        )

    async def invoke(self, update: dict[str, Any] | None, thread_id: str) -> RunResult:
        return await self.executor.invoke(update, thread_id)

    async def resume(self, value: Any, thread_id: str) -> RunResult:
        return await self.executor.resume(value, thread_id)

    def get_state(self, thread_id: str) -> Checkpoint | None:
        return self.executor.get_state(thread_id)

    async def aclose(self) -> None:
        await self.llm.aclose()


def last_reply(messages: list[dict[str, Any]]) -> str | None:
    """Content of the last message in a transcript, if any."""
    if not messages:
        return None
    content = messages[-1].get("content")
    return str(content) if content else None
