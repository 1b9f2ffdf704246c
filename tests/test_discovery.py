"""Unit tests for rule discovery."""

from claim_triage.engine.discovery import discover

MAPPING = {"edit": "EDIT", "notes": "NOTES", "state": "STATE"}


def _texts(items) -> list[str]:
    return [item.text for item in items]


class TestDiscoverEdits:
    def test_excludes_existing_and_deduplicates(self) -> None:
        rows = [{"EDIT": "E100"}, {"EDIT": "E200"}, {"EDIT": "E200"}]
        result = discover(rows, MAPPING, {"E100"}, set())
        assert _texts(result.edits) == ["E200"]

    def test_sorted_and_trimmed(self) -> None:
        rows = [{"EDIT": " Z9 "}, {"EDIT": "A1"}, {"EDIT": "M5"}, {"EDIT": "Z9"}]
        result = discover(rows, MAPPING, set(), set())
        assert _texts(result.edits) == ["A1", "M5", "Z9"]

    def test_existing_edit_match_is_exact(self) -> None:
        result = discover([{"EDIT": "e100"}], MAPPING, {"E100"}, set())
        assert _texts(result.edits) == ["e100"]

    def test_numeric_edit_cells_are_stringified(self) -> None:
        result = discover([{"EDIT": 300.0}, {"EDIT": 300}], MAPPING, set(), set())
        assert _texts(result.edits) == ["300"]

    def test_items_start_without_category(self) -> None:
        result = discover([{"EDIT": "E200"}], MAPPING, set(), set())
        assert result.edits[0].proposed_category_id is None


class TestDiscoverNotes:
    def test_collects_new_notes(self) -> None:
        rows = [{"NOTES": "waiting on records"}, {"NOTES": "urgent"}, {"NOTES": "  waiting on records "}]
        result = discover(rows, MAPPING, set(), {"urgent"})
        assert _texts(result.notes) == ["waiting on records"]

    def test_existing_keywords_compare_case_insensitively(self) -> None:
        result = discover([{"NOTES": "Urgent"}], MAPPING, set(), {"urgent"})
        assert result.notes == []

    def test_blank_values_ignored(self) -> None:
        rows = [{"EDIT": "", "NOTES": "   "}, {"EDIT": None}, {}]
        result = discover(rows, MAPPING, set(), set())
        assert result.edits == []
        assert result.notes == []


class TestDiscoverActionableOnly:
    ROWS = [
        {"STATE": "pend", "EDIT": "E1", "NOTES": "needs review"},
        {"STATE": "PAID", "EDIT": "E2", "NOTES": "closed out"},
        {"EDIT": "E3"},
    ]

    def test_all_rows_by_default(self) -> None:
        result = discover(self.ROWS, MAPPING, set(), set())
        assert _texts(result.edits) == ["E1", "E2", "E3"]

    def test_skips_non_actionable_rows(self) -> None:
        result = discover(self.ROWS, MAPPING, set(), set(), actionable_only=True)
        assert _texts(result.edits) == ["E1"]
        assert _texts(result.notes) == ["needs review"]


class TestUncategorizedItem:
    def test_assign_sets_proposal(self) -> None:
        item = discover([{"EDIT": "E200"}], MAPPING, set(), set()).edits[0]
        item.assign(7)
        assert item.to_dict() == {"text": "E200", "proposed_category_id": 7}
