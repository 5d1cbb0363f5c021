"""Diet-plan conversation built on the graph engine."""

from fitness_agent.workflow.graph import build_diet_graph
from fitness_agent.workflow.nodes import AGENT_STATE, DietWorkflow, HumanInput, Nodes

__all__ = [
    "AGENT_STATE",
    "DietWorkflow",
    "HumanInput",
    "Nodes",
    "build_diet_graph",
]
