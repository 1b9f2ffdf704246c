"""Analysis node — classifies and scores every parsed row."""

import logging
from typing import Any

from claim_triage.engine.analyzer import analyze
from claim_triage.graph.state import TriageState

logger = logging.getLogger(__name__)


def analysis_node(state: TriageState) -> dict[str, Any]:
    """Run the batch analyzer over the loaded rows.

    Args:
        state: Current graph state with rows, mapping and rule sets.

    Returns:
        A dict with the ``analysis`` key to merge into state.
    """
    result = analyze(state["rows"], state["mapping"], state["rule_sets"], state["weights"])
    logger.info(
        "Analysis — client_id=%s total_claims=%d total_net_payment=%.2f",
        state["client_id"],
        result.metrics.total_claims,
        result.metrics.total_net_payment,
    )
    return {"analysis": result}
