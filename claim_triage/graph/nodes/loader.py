"""Loader node — parses the uploaded spreadsheet into raw rows."""

import logging
from typing import Any

from claim_triage.graph.state import TriageState
from claim_triage.services.spreadsheet_parser import parse_spreadsheet

logger = logging.getLogger(__name__)


def loader_node(state: TriageState) -> dict[str, Any]:
    """Read the spreadsheet at ``file_path``.

    Parse failures propagate so the caller can report them.

    Args:
        state: Current graph state with the uploaded file path.

    Returns:
        A dict with the ``rows`` key to merge into state.
    """
    rows = parse_spreadsheet(state["file_path"])
    logger.info("Loader — client_id=%s rows=%d", state["client_id"], len(rows))
    return {"rows": rows}
