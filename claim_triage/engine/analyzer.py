"""Batch analyzer — maps, classifies and scores every row of a dataset."""

import logging
from dataclasses import replace
from typing import Sequence

from claim_triage.config import ACTIONABLE_STATES, ScoringWeights
from claim_triage.engine.classifier import classify
from claim_triage.engine.column_mapper import (
    get_value,
    normalize_code,
    to_float,
    to_int,
    to_text,
)
from claim_triage.engine.models import (
    NOT_APPLICABLE,
    AnalysisResult,
    ColumnMapping,
    Metrics,
    ProcessedClaim,
    RawRow,
    RuleSets,
)
from claim_triage.engine.rules import build_edit_index, sort_note_rules
from claim_triage.engine.scorer import score

logger = logging.getLogger(__name__)

UNKNOWN = "UNKNOWN"


def _map_row(raw_row: RawRow, mapping: ColumnMapping) -> tuple[ProcessedClaim, float | None]:
    """Build the non-actionable form of a claim plus its parsed net payment."""
    net_payment = to_float(get_value(raw_row, "netPayment", mapping))
    state = normalize_code(get_value(raw_row, "state", mapping), UNKNOWN)
    claim = ProcessedClaim(
        claim_id=to_text(get_value(raw_row, "claimId", mapping), NOT_APPLICABLE),
        state=state,
        status=normalize_code(get_value(raw_row, "status", mapping), UNKNOWN),
        age=to_int(get_value(raw_row, "age", mapping)) or 0,
        net_payment=net_payment if net_payment is not None else 0.0,
        provider_name=to_text(get_value(raw_row, "providerName", mapping), "Unknown"),
        is_actionable=state in ACTIONABLE_STATES,
        category=NOT_APPLICABLE,
        team_name=NOT_APPLICABLE,
        category_source=NOT_APPLICABLE,
        priority_score=-1,
        send_to_l1_monitor=False,
        category_id=None,
        original=raw_row,
    )
    return claim, net_payment


def analyze(
    raw_rows: Sequence[RawRow],
    mapping: ColumnMapping,
    rule_sets: RuleSets,
    weights: ScoringWeights | None = None,
) -> AnalysisResult:
    """Analyze a full dataset in one pass.

    Args:
        raw_rows: Spreadsheet rows in input order.
        mapping: Client column mapping.
        rule_sets: The client's edit and note rules.
        weights: Optional scoring constants.

    Returns:
        One ``ProcessedClaim`` per row, in input order, and the aggregated
        metrics. An empty dataset yields no claims and zeroed metrics.
    """
    edit_index = build_edit_index(rule_sets.edit_rules)
    sorted_note_rules = sort_note_rules(rule_sets.note_rules)

    claims: list[ProcessedClaim] = []
    total_net_payment = 0.0
    claims_by_status: dict[str, int] = {}

    for raw_row in raw_rows:
        claim, net_payment = _map_row(raw_row, mapping)

        if net_payment is not None:
            total_net_payment += net_payment
        claims_by_status[claim.status] = claims_by_status.get(claim.status, 0) + 1

        if claim.is_actionable:
            result = classify(raw_row, mapping, edit_index, sorted_note_rules)
            claim = replace(
                claim,
                category=result.category,
                team_name=result.team_name,
                category_source=result.category_source,
                send_to_l1_monitor=result.send_to_l1_monitor,
                category_id=result.category_id,
                priority_score=score(claim, mapping, weights),
            )

        claims.append(claim)

    metrics = Metrics(
        total_claims=len(claims),
        total_net_payment=total_net_payment,
        claims_by_status=claims_by_status,
    )
    logger.info(
        "Analyzed %d claim(s) — actionable=%d edit_rules=%d note_rules=%d",
        metrics.total_claims,
        sum(1 for c in claims if c.is_actionable),
        len(edit_index),
        len(sorted_note_rules),
    )
    return AnalysisResult(claims=claims, metrics=metrics)


def work_queue(claims: Sequence[ProcessedClaim], category: str | None = None) -> list[ProcessedClaim]:
    """Actionable claims ordered by priority score, highest first.

    Args:
        claims: Output of ``analyze``.
        category: When given, keep only claims in this category.

    Returns:
        The ordered queue; ties keep their input order.
    """
    queue = [c for c in claims if c.is_actionable]
    if category is not None:
        queue = [c for c in queue if c.category == category]
    return sorted(queue, key=lambda c: c.priority_score, reverse=True)


def queue_categories(claims: Sequence[ProcessedClaim]) -> list[str]:
    """Distinct categories of actionable claims, sorted by name."""
    return sorted({c.category for c in claims if c.is_actionable})
