"""Record types produced and consumed by the triage engine."""

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

EDIT_RULE = "Edit Rule"
NOTE_RULE = "Note Rule"
DEFAULT_SOURCE = "Default"
NOT_APPLICABLE = "N/A"

DEFAULT_CATEGORY = "Needs Triage"
DEFAULT_TEAM = "Needs Assignment"

ColumnMapping = Mapping[str, str]
RawRow = Mapping[str, Any]


@dataclass(frozen=True)
class Rule:
    """A rule joined with its category and team.

    Attributes:
        text: Exact edit code, or a lower-case keyword for note rules.
        category_id: Identifier of the target category.
        category_name: Display name of the target category.
        team_name: Team owning the category, if any.
        send_to_l1_monitor: Whether the category is routed to L1 monitoring.
    """

    text: str
    category_id: int | None
    category_name: str
    team_name: str | None = None
    send_to_l1_monitor: bool = False


@dataclass(frozen=True)
class RuleSets:
    """Edit and note rules for one client."""

    edit_rules: list[Rule] = field(default_factory=list)
    note_rules: list[Rule] = field(default_factory=list)


@dataclass(frozen=True)
class CategoryResult:
    category: str
    team_name: str | None
    category_source: str
    send_to_l1_monitor: bool = False
    category_id: int | None = None


@dataclass(frozen=True)
class ProcessedClaim:
    """One spreadsheet row after mapping, classification and scoring."""

    claim_id: Any
    state: str
    status: str
    age: int
    net_payment: float
    provider_name: Any
    is_actionable: bool
    category: str
    team_name: str | None
    category_source: str
    priority_score: int
    send_to_l1_monitor: bool
    category_id: int | None
    original: RawRow

    def to_dict(self) -> dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["original"] = dict(self.original)
        return data


@dataclass(frozen=True)
class Metrics:
    total_claims: int
    total_net_payment: float
    claims_by_status: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_claims": self.total_claims,
            "total_net_payment": self.total_net_payment,
            "claims_by_status": dict(self.claims_by_status),
        }


@dataclass(frozen=True)
class AnalysisResult:
    claims: list[ProcessedClaim]
    metrics: Metrics


@dataclass
class UncategorizedItem:
    """A spreadsheet value not covered by any rule, awaiting triage."""

    text: str
    proposed_category_id: int | None = None

    def assign(self, category_id: int | None) -> None:
        self.proposed_category_id = category_id

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "proposed_category_id": self.proposed_category_id}


@dataclass(frozen=True)
class DiscoveryResult:
    edits: list[UncategorizedItem]
    notes: list[UncategorizedItem]
