"""LangGraph workflow definition for the claim triage pipeline."""

import logging
from typing import Any

from langgraph.graph import END, START, StateGraph

from claim_triage.config import ScoringWeights, load_scoring_weights
from claim_triage.engine.models import RuleSets
from claim_triage.graph.nodes.aggregator import aggregator_node
from claim_triage.graph.nodes.analysis import analysis_node
from claim_triage.graph.nodes.discovery import discovery_node
from claim_triage.graph.nodes.loader import loader_node
from claim_triage.graph.state import TriageState

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Graph construction
# ---------------------------------------------------------------------------

graph_builder = StateGraph(TriageState)

# Nodes
graph_builder.add_node("loader", loader_node)
graph_builder.add_node("analyzer", analysis_node)
graph_builder.add_node("rule_discovery", discovery_node)
graph_builder.add_node("aggregator", aggregator_node)

# Edges
graph_builder.add_edge(START, "loader")
graph_builder.add_edge("loader", "analyzer")
graph_builder.add_edge("loader", "rule_discovery")
graph_builder.add_edge("analyzer", "aggregator")
graph_builder.add_edge("rule_discovery", "aggregator")
graph_builder.add_edge("aggregator", END)

# Compile once at module level
workflow = graph_builder.compile()

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def run_triage_workflow(
    client_id: str,
    file_path: str,
    mapping: dict[str, str],
    rule_sets: RuleSets,
    weights: ScoringWeights | None = None,
) -> dict[str, Any]:
    """Execute the full triage graph for one uploaded spreadsheet.

    Args:
        client_id: Client the spreadsheet belongs to.
        file_path: Path to the spreadsheet on disk.
        mapping: The client's column mapping.
        rule_sets: The client's edit and note rules.
        weights: Scoring constants; read from the environment when omitted.

    Returns:
        The ``final_output`` dict produced by the aggregator node.

    Raises:
        ValueError: If the spreadsheet cannot be parsed.
    """
    initial_state: TriageState = {
        "client_id": client_id,
        "file_path": file_path,
        "mapping": mapping,
        "rule_sets": rule_sets,
        "weights": weights or load_scoring_weights(),
        "rows": [],
        "analysis": None,
        "discovery": None,
        "final_output": {},
    }

    logger.info("Workflow started — client_id=%s file=%s", client_id, file_path)
    result = workflow.invoke(initial_state)
    logger.info("Workflow completed — client_id=%s", client_id)

    return result["final_output"]
