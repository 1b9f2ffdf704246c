"""Request and response models for the triage API."""

from typing import Any

from pydantic import BaseModel, Field

from claim_triage.engine.models import Rule


class RuleIn(BaseModel):
    """A triaged value to persist as a rule."""

    text: str = Field(min_length=1)
    category_id: int = Field(gt=0)


class RuleDelete(BaseModel):
    text: str = Field(min_length=1)


class RulePayload(BaseModel):
    """A rule joined with its category, as returned by the rule endpoints."""

    text: str
    category_id: int | None = None
    category_name: str
    team_name: str | None = None
    send_to_l1_monitor: bool = False

    def to_rule(self) -> Rule:
        return Rule(**self.model_dump())

    @classmethod
    def from_rule(cls, rule: Rule) -> "RulePayload":
        return cls(
            text=rule.text,
            category_id=rule.category_id,
            category_name=rule.category_name,
            team_name=rule.team_name,
            send_to_l1_monitor=rule.send_to_l1_monitor,
        )


class AnalyzeRequest(BaseModel):
    rows: list[dict[str, Any]]
    mapping: dict[str, str]
    edit_rules: list[RulePayload] = Field(default_factory=list)
    note_rules: list[RulePayload] = Field(default_factory=list)


class DiscoverRequest(BaseModel):
    rows: list[dict[str, Any]]
    mapping: dict[str, str]
    existing_edit_texts: list[str] = Field(default_factory=list)
    existing_note_texts: list[str] = Field(default_factory=list)
    actionable_only: bool = False
