"""Runtime configuration for the claim triage service."""

import os
from typing import Final

from pydantic import BaseModel, field_validator

ACTIONABLE_STATES: Final[frozenset[str]] = frozenset({"PEND", "ONHOLD", "MANAGEMENTREVIEW"})

DEFAULT_PORT: Final[int] = 8000


class ScoringWeights(BaseModel):
    """Business constants blended into a claim's priority score."""

    charges_divisor: float = 500.0
    age_weight: float = 1.5
    deny_bonus: float = 100.0
    deny_status: str = "DENY"

    @field_validator("charges_divisor")
    @classmethod
    def validate_charges_divisor(cls, v: float) -> float:
        """Reject divisors that would blow up or invert the charge term."""
        if v <= 0:
            raise ValueError("charges_divisor must be greater than 0")
        return v

    @field_validator("deny_status")
    @classmethod
    def normalize_deny_status(cls, v: str) -> str:
        return v.strip().upper()


def load_scoring_weights() -> ScoringWeights:
    """Build scoring weights from ``PRIORITY_*`` environment variables.

    Unset variables keep the model defaults.
    """
    overrides: dict[str, str] = {}
    for field_name, env_name in (
        ("charges_divisor", "PRIORITY_CHARGES_DIVISOR"),
        ("age_weight", "PRIORITY_AGE_WEIGHT"),
        ("deny_bonus", "PRIORITY_DENY_BONUS"),
        ("deny_status", "PRIORITY_DENY_STATUS"),
    ):
        value = os.getenv(env_name)
        if value is not None and value.strip():
            overrides[field_name] = value
    return ScoringWeights(**overrides)
