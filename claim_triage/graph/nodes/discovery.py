"""Discovery node — queues uncovered edit and note values for triage."""

import logging
from typing import Any

from claim_triage.engine.discovery import discover
from claim_triage.graph.state import TriageState

logger = logging.getLogger(__name__)


def discovery_node(state: TriageState) -> dict[str, Any]:
    """Find edit codes and notes of actionable claims that no rule covers.

    Args:
        state: Current graph state with rows, mapping and rule sets.

    Returns:
        A dict with the ``discovery`` key to merge into state.
    """
    rule_sets = state["rule_sets"]
    result = discover(
        state["rows"],
        state["mapping"],
        {rule.text for rule in rule_sets.edit_rules},
        {rule.text for rule in rule_sets.note_rules},
        actionable_only=True,
    )
    logger.info(
        "Discovery — client_id=%s new_edits=%d new_notes=%d",
        state["client_id"],
        len(result.edits),
        len(result.notes),
    )
    return {"discovery": result}
