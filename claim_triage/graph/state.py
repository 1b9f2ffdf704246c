"""Shared state definition for the claim triage LangGraph workflow."""

from typing import Any, TypedDict

from claim_triage.config import ScoringWeights
from claim_triage.engine.models import AnalysisResult, DiscoveryResult, RuleSets


class TriageState(TypedDict):
    """Typed state passed through every node in the triage graph.

    Attributes:
        client_id: Client whose spreadsheet is being processed.
        file_path: Path to the uploaded spreadsheet on disk.
        mapping: Logical field → spreadsheet header for the client.
        rule_sets: The client's edit and note rules.
        weights: Priority scoring constants.
        rows: Header-keyed rows parsed from the spreadsheet.
        analysis: Classified and scored claims with metrics.
        discovery: Edit and note values not covered by any rule.
        final_output: Aggregated, serialisable result.
    """

    client_id: str
    file_path: str
    mapping: dict[str, str]
    rule_sets: RuleSets
    weights: ScoringWeights
    rows: list[dict[str, Any]]
    analysis: AnalysisResult | None
    discovery: DiscoveryResult | None
    final_output: dict[str, Any]
