"""Unit tests for the batch analyzer and work-queue helpers."""

from typing import Any

import pytest

from claim_triage.engine.analyzer import analyze, queue_categories, work_queue
from claim_triage.engine.models import Rule, RuleSets

MAPPING = {
    "claimId": "CLAIM",
    "state": "STATE",
    "status": "STATUS",
    "age": "AGE",
    "netPayment": "NET",
    "totalCharges": "CHARGES",
    "providerName": "PROVIDER",
    "notes": "NOTES",
    "edit": "EDIT",
}

RULES = RuleSets(
    edit_rules=[Rule(text="E100", category_id=1, category_name="Billing Error", team_name="Billing")],
    note_rules=[
        Rule(text="urgent", category_id=2, category_name="Escalation", team_name="Escalations", send_to_l1_monitor=True),
        Rule(text="hold", category_id=3, category_name="Generic Hold", team_name="Ops"),
        Rule(text="management hold", category_id=4, category_name="Management Review", team_name="Leads"),
    ],
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _row(**overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "CLAIM": "C-1",
        "STATE": "PEND",
        "STATUS": "open",
        "AGE": "10",
        "NET": "50.25",
        "CHARGES": "1000",
        "PROVIDER": "Acme Clinic",
        "NOTES": "",
        "EDIT": "",
    }
    row.update(overrides)
    return {k: v for k, v in row.items() if v is not None}


DATASET = [
    _row(CLAIM="C-1", EDIT="E100", NOTES="urgent review needed"),
    _row(CLAIM="C-2", NOTES="Urgent callback", AGE="2", CHARGES="0"),
    _row(CLAIM="C-3", STATE="paid", STATUS="PAID", NET="100"),
    _row(CLAIM="C-4", STATE=" onhold ", STATUS="deny", AGE="0", CHARGES="0"),
    _row(CLAIM="C-5", STATE="ManagementReview", NOTES="on management hold", NET="n/a"),
]


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

class TestAnalyzeScenarios:
    def test_edit_rule_scenario(self) -> None:
        row = {"EDIT": "E100", "NOTES": "urgent review needed", "STATE": "PEND", "AGE": "10", "CHARGES": "1000"}
        mapping = {"edit": "EDIT", "notes": "NOTES", "state": "STATE", "age": "AGE", "totalCharges": "CHARGES"}
        rules = RuleSets(edit_rules=[Rule(text="E100", category_id=1, category_name="Billing Error")])

        claim = analyze([row], mapping, rules).claims[0]
        assert claim.category == "Billing Error"
        assert claim.category_source == "Edit Rule"
        assert claim.priority_score == 17

    def test_note_rule_scenario(self) -> None:
        row = {"EDIT": "E100", "NOTES": "urgent review needed", "STATE": "PEND", "AGE": "10", "CHARGES": "1000"}
        mapping = {"edit": "EDIT", "notes": "NOTES", "state": "STATE", "age": "AGE", "totalCharges": "CHARGES"}
        rules = RuleSets(note_rules=[Rule(text="urgent", category_id=2, category_name="Escalation")])

        claim = analyze([row], mapping, rules).claims[0]
        assert claim.category == "Escalation"
        assert claim.category_source == "Note Rule"

    def test_deny_scenario(self) -> None:
        row = {"STATE": "PEND", "STATUS": "DENY", "AGE": "0", "CHARGES": "0"}
        mapping = {"state": "STATE", "status": "STATUS", "age": "AGE", "totalCharges": "CHARGES"}
        assert analyze([row], mapping, RuleSets()).claims[0].priority_score == 100


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

class TestAnalyzeProperties:
    def test_output_preserves_input_order(self) -> None:
        result = analyze(DATASET, MAPPING, RULES)
        assert [c.claim_id for c in result.claims] == ["C-1", "C-2", "C-3", "C-4", "C-5"]

    def test_actionable_iff_state_in_actionable_set(self) -> None:
        result = analyze(DATASET, MAPPING, RULES)
        for claim in result.claims:
            assert claim.is_actionable == (claim.state in {"PEND", "ONHOLD", "MANAGEMENTREVIEW"})
        assert [c.is_actionable for c in result.claims] == [True, True, False, True, True]

    def test_non_actionable_defaults(self) -> None:
        claim = analyze(DATASET, MAPPING, RULES).claims[2]
        assert claim.category == "N/A"
        assert claim.team_name == "N/A"
        assert claim.category_source == "N/A"
        assert claim.priority_score == -1

    def test_metrics_totals(self) -> None:
        metrics = analyze(DATASET, MAPPING, RULES).metrics
        assert metrics.total_claims == len(DATASET)
        assert sum(metrics.claims_by_status.values()) == len(DATASET)
        assert metrics.claims_by_status == {"OPEN": 3, "PAID": 1, "DENY": 1}
        # C-5 has an unparseable net payment and contributes nothing
        assert metrics.total_net_payment == pytest.approx(50.25 * 3 + 100)

    def test_deterministic(self) -> None:
        first = analyze(DATASET, MAPPING, RULES)
        second = analyze(DATASET, MAPPING, RULES)
        assert [c.to_dict() for c in first.claims] == [c.to_dict() for c in second.claims]
        assert first.metrics == second.metrics

    def test_classification_per_row(self) -> None:
        claims = analyze(DATASET, MAPPING, RULES).claims
        assert [(c.category, c.category_source) for c in claims] == [
            ("Billing Error", "Edit Rule"),
            ("Escalation", "Note Rule"),
            ("N/A", "N/A"),
            ("Needs Triage", "Default"),
            ("Management Review", "Note Rule"),
        ]
        assert claims[1].send_to_l1_monitor is True

    def test_normalizes_state_and_status(self) -> None:
        claim = analyze(DATASET, MAPPING, RULES).claims[3]
        assert claim.state == "ONHOLD"
        assert claim.status == "DENY"
        assert claim.priority_score == 100

    def test_original_row_is_kept(self) -> None:
        claims = analyze(DATASET, MAPPING, RULES).claims
        assert claims[0].original is DATASET[0]


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------

class TestAnalyzeEdgeCases:
    def test_empty_dataset(self) -> None:
        result = analyze([], MAPPING, RULES)
        assert result.claims == []
        assert result.metrics.total_claims == 0
        assert result.metrics.total_net_payment == 0.0
        assert result.metrics.claims_by_status == {}

    def test_missing_fields_degrade_to_defaults(self) -> None:
        claim = analyze([{}], MAPPING, RULES).claims[0]
        assert claim.claim_id == "N/A"
        assert claim.state == "UNKNOWN"
        assert claim.status == "UNKNOWN"
        assert claim.age == 0
        assert claim.net_payment == 0.0
        assert claim.provider_name == "Unknown"
        assert claim.is_actionable is False

    def test_garbage_numbers_do_not_fail(self) -> None:
        row = _row(AGE="soon", CHARGES="lots", NET="???")
        claim = analyze([row], MAPPING, RuleSets()).claims[0]
        assert claim.age == 0
        assert claim.net_payment == 0.0
        assert claim.priority_score == 0


# ---------------------------------------------------------------------------
# Work queue
# ---------------------------------------------------------------------------

class TestWorkQueue:
    def test_orders_by_priority_descending(self) -> None:
        claims = analyze(DATASET, MAPPING, RULES).claims
        queue = work_queue(claims)
        scores = [c.priority_score for c in queue]
        assert scores == sorted(scores, reverse=True)
        assert "C-3" not in [c.claim_id for c in queue]
        assert queue[0].claim_id == "C-4"

    def test_filters_by_category(self) -> None:
        claims = analyze(DATASET, MAPPING, RULES).claims
        assert [c.claim_id for c in work_queue(claims, "Escalation")] == ["C-2"]

    def test_queue_categories(self) -> None:
        claims = analyze(DATASET, MAPPING, RULES).claims
        assert queue_categories(claims) == ["Billing Error", "Escalation", "Management Review", "Needs Triage"]
