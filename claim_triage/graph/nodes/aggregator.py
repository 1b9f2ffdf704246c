"""Aggregator node — combines analysis and discovery into a final result."""

import logging
from datetime import datetime, timezone
from typing import Any

from claim_triage.engine.analyzer import queue_categories, work_queue
from claim_triage.graph.state import TriageState

logger = logging.getLogger(__name__)


def aggregator_node(state: TriageState) -> dict[str, Any]:
    """Serialise claims, metrics, the work queue and the triage queue.

    Includes processing metadata with row counts and an ISO-8601 timestamp.

    Args:
        state: Current graph state with analysis and discovery populated.

    Returns:
        A dict with the ``final_output`` key to merge into state.
    """
    analysis = state["analysis"]
    discovery = state["discovery"]
    claims = analysis.claims if analysis is not None else []
    queue = work_queue(claims)

    final_output: dict[str, Any] = {
        "client_id": state["client_id"],
        "claims": [claim.to_dict() for claim in claims],
        "metrics": analysis.metrics.to_dict() if analysis is not None else {},
        "work_queue": [claim.claim_id for claim in queue],
        "queue_categories": queue_categories(claims),
        "uncategorized": {
            "edits": [item.to_dict() for item in discovery.edits] if discovery else [],
            "notes": [item.to_dict() for item in discovery.notes] if discovery else [],
        },
        "processing_metadata": {
            "total_rows": len(state.get("rows", [])),
            "actionable_claims": len(queue),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }

    logger.info(
        "Aggregator — client_id=%s total_rows=%d actionable=%d",
        state["client_id"],
        final_output["processing_metadata"]["total_rows"],
        final_output["processing_metadata"]["actionable_claims"],
    )
    return {"final_output": final_output}
