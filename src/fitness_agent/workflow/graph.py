from __future__ import annotations

from fitness_agent.graph import END, START, CompiledGraph, GraphBuilder
from fitness_agent.llm.provider import LLMProvider
from fitness_agent.workflow.nodes import AGENT_STATE, DietWorkflow, HumanInput, Nodes


def build_diet_graph(
    llm: LLMProvider,
    human_input: HumanInput | None = None,
    max_preference_requests: int = 2,
) -> CompiledGraph:
    """Assemble the diet conversation graph.

    START -> extract_preferences -> {generate_diet | ask_for_preferences | review_by_human}
    ask_for_preferences -> extract_preferences
    generate_diet -> END
    review_by_human jumps via Command to generate_diet or ask_for_preferences.
    """

    workflow = DietWorkflow(
        llm, human_input=human_input, max_preference_requests=max_preference_requests
    )
    return (
        GraphBuilder(AGENT_STATE)
        .add_node(Nodes.GENERATE_DIET, workflow.generate_diet)
        .add_node(Nodes.ASK_FOR_PREFERENCES, workflow.ask_for_preferences)
        .add_node(Nodes.EXTRACT_PREFERENCES, workflow.extract_preferences)
        .add_node(Nodes.REVIEW_BY_HUMAN, workflow.review_by_human)
        .add_edge(START, Nodes.EXTRACT_PREFERENCES)
        .add_edge(Nodes.ASK_FOR_PREFERENCES, Nodes.EXTRACT_PREFERENCES)
        .add_conditional_edge(
            Nodes.EXTRACT_PREFERENCES,
            workflow.ask_or_generate,
            destinations=[
                Nodes.GENERATE_DIET,
                Nodes.ASK_FOR_PREFERENCES,
                Nodes.REVIEW_BY_HUMAN,
            ],
        )
        .add_edge(Nodes.GENERATE_DIET, END)
        .build()
    )
