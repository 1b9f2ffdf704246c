"""Priority scorer — ranks actionable claims for the work queue.

The score blends financial exposure (total charges), staleness (age) and
denial severity. It only orders the queue and carries no monetary meaning.
"""

import math

from claim_triage.config import ScoringWeights
from claim_triage.engine.column_mapper import get_value, to_float
from claim_triage.engine.models import ColumnMapping, ProcessedClaim

_DEFAULT_WEIGHTS = ScoringWeights()


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (``2.5 -> 3``)."""
    return math.floor(value + 0.5)


def score(
    claim: ProcessedClaim,
    mapping: ColumnMapping,
    weights: ScoringWeights | None = None,
) -> int:
    """Compute the priority score for a processed claim.

    Args:
        claim: Claim with normalized ``age`` and ``status``; total charges
            are read from ``claim.original`` through ``mapping``.
        mapping: Client column mapping.
        weights: Scoring constants; defaults to ``ScoringWeights()``.

    Returns:
        ``round(charges / divisor + age * age_weight)``, plus the deny bonus
        when the status is the deny status.
    """
    weights = weights or _DEFAULT_WEIGHTS
    total_charges = to_float(get_value(claim.original, "totalCharges", mapping)) or 0.0
    age = claim.age or 0

    raw = total_charges / weights.charges_divisor + age * weights.age_weight
    if claim.status == weights.deny_status:
        raw += weights.deny_bonus
    return round_half_up(raw)
