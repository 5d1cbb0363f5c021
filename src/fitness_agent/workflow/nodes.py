"""Nodes and router of the diet-plan conversation.

The workflow extracts the user's diet type and fitness level, asks for them a
limited number of times, and hands over to a human reviewer when the user
still has not provided them.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fitness_agent.graph import Accumulate, Command, LastValue, NodeContext, State, StateSchema
from fitness_agent.llm.provider import LLMProvider
from fitness_agent.workflow import prompts

logger = logging.getLogger(__name__)

APPROVALS = frozenset({"y", "yes"})
RANDOM_DIET_TYPE = "random"
UNKNOWN_FITNESS_LEVEL = "unknown"


class Nodes(str, Enum):
    GENERATE_DIET = "generate_diet"
    ASK_FOR_PREFERENCES = "ask_for_preferences"
    EXTRACT_PREFERENCES = "extract_preferences"
    REVIEW_BY_HUMAN = "review_by_human"


AGENT_STATE = StateSchema(
    messages=Accumulate(),
    diet_type=LastValue(),
    fitness_level=LastValue(),
    ask_count=LastValue(initial=0),
)


class HumanInput(Protocol):
    """Presents a prompt to a person and returns their raw reply."""

    async def ask(self, prompt: str) -> str: ...


class Preferences(BaseModel):
    """Preferences as returned by the extraction prompt."""

    model_config = ConfigDict(populate_by_name=True)

    diet_type: str | None = Field(default=None, alias="dietType")
    fitness_level: str | None = Field(default=None, alias="fitnessLevel")


def message(role: str, content: str) -> dict[str, str]:
    return {"role": role, "content": content}


def last_user_message(messages: list[dict[str, Any]]) -> str:
    for item in reversed(messages):
        if item.get("role") == "user":
            return str(item.get("content") or "")
    return ""


def parse_preferences(text: str) -> Preferences:
    """Parse the model's JSON reply, tolerating a surrounding code fence."""

    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`")
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
    return Preferences.model_validate_json(cleaned.strip())


class DietWorkflow:
    """Node implementations bound to their collaborators.

    ``human_input`` answers the follow-up question directly when given;
    without it the question is surfaced as an interrupt and the user's reply
    arrives through ``resume``.
    """

    def __init__(
        self,
        llm: LLMProvider,
        human_input: HumanInput | None = None,
        max_preference_requests: int = 2,
    ) -> None:
        if max_preference_requests < 1:
            raise ValueError("max_preference_requests must be at least 1")
        self.llm = llm
        self.human_input = human_input
        self.max_preference_requests = max_preference_requests

    async def extract_preferences(self, state: State) -> dict[str, Any]:
        # The extraction exchange is a side request; it never enters the transcript.
        request = [
            message("system", prompts.SYSTEM_PROMPT),
            message("user", prompts.extraction_prompt(last_user_message(state["messages"]))),
        ]
        try:
            reply = await self.llm.chat(request)
            preferences = parse_preferences(reply)
        except ValidationError as e:
            logger.error(f"Error parsing a JSON returned from the model: {e}")
            return {}
        except Exception:
            logger.exception("Preference extraction failed")
            return {}

        # A null from the model means "not mentioned": known values are kept.
        update: dict[str, Any] = {}
        if preferences.diet_type:
            update["diet_type"] = preferences.diet_type
        if preferences.fitness_level:
            update["fitness_level"] = preferences.fitness_level
        logger.debug("Preferences extracted", extra={"fields": sorted(update)})
        return update

    async def ask_for_preferences(self, state: State, ctx: NodeContext) -> dict[str, Any]:
        if self.human_input is not None:
            reply = await self.human_input.ask(prompts.FOLLOWUP_QUESTION)
        else:
            reply = ctx.interrupt(prompts.FOLLOWUP_QUESTION)

        return {
            "messages": [
                message("assistant", prompts.FOLLOWUP_QUESTION),
                message("user", str(reply)),
            ],
            "ask_count": state["ask_count"] + 1,
        }

    async def generate_diet(self, state: State) -> dict[str, Any]:
        request = message(
            "user", prompts.generation_prompt(state["diet_type"], state["fitness_level"])
        )
        try:
            plan = await self.llm.chat([request])
        except Exception:
            logger.exception("Diet plan generation failed")
            plan = prompts.GENERATION_FAILED_REPLY
        return {"messages": [request, message("assistant", plan)]}

    def review_by_human(self, state: State, ctx: NodeContext) -> Command:
        answer = ctx.interrupt(prompts.review_prompt(state["diet_type"], state["fitness_level"]))

        if str(answer).strip().lower() in APPROVALS:
            return Command(
                goto=Nodes.GENERATE_DIET,
                update={"diet_type": RANDOM_DIET_TYPE, "fitness_level": UNKNOWN_FITNESS_LEVEL},
            )

        return Command(goto=Nodes.ASK_FOR_PREFERENCES, update={"ask_count": 0})

    def ask_or_generate(self, state: State) -> Nodes:
        """Router run after extraction."""

        if state["diet_type"] and state["fitness_level"]:
            return Nodes.GENERATE_DIET
        if state["ask_count"] < self.max_preference_requests:
            return Nodes.ASK_FOR_PREFERENCES
        return Nodes.REVIEW_BY_HUMAN
