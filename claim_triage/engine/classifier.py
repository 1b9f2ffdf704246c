"""Classifier — assigns a category to a claim from its edit code and notes."""

import logging
from typing import Mapping

from claim_triage.engine.column_mapper import get_value, to_text
from claim_triage.engine.models import (
    DEFAULT_CATEGORY,
    DEFAULT_SOURCE,
    DEFAULT_TEAM,
    EDIT_RULE,
    NOTE_RULE,
    CategoryResult,
    ColumnMapping,
    RawRow,
    Rule,
)
from claim_triage.engine.rules import NoteRuleList

logger = logging.getLogger(__name__)

DEFAULT_RESULT = CategoryResult(
    category=DEFAULT_CATEGORY,
    team_name=DEFAULT_TEAM,
    category_source=DEFAULT_SOURCE,
    send_to_l1_monitor=False,
)


def _from_rule(rule: Rule, source: str) -> CategoryResult:
    return CategoryResult(
        category=rule.category_name,
        team_name=rule.team_name,
        category_source=source,
        send_to_l1_monitor=rule.send_to_l1_monitor,
        category_id=rule.category_id,
    )


def classify(
    raw_row: RawRow,
    mapping: ColumnMapping,
    edit_index: Mapping[str, Rule],
    sorted_note_rules: NoteRuleList,
) -> CategoryResult:
    """Determine a claim's category; the first matching tier wins.

    1. The edit code, matched exactly (case-sensitive) against ``edit_index``.
    2. The notes, lower-cased, searched for each keyword of
       ``sorted_note_rules`` in order (longest keyword first).
    3. The default "Needs Triage" category.

    Args:
        raw_row: Raw spreadsheet row.
        mapping: Client column mapping.
        edit_index: Edit code → rule, from ``build_edit_index``.
        sorted_note_rules: ``(keyword, rule)`` pairs from ``sort_note_rules``.

    Returns:
        The matched category with its source tier.
    """
    edit = to_text(get_value(raw_row, "edit", mapping)).strip()
    if edit:
        rule = edit_index.get(edit)
        if rule is not None:
            return _from_rule(rule, EDIT_RULE)

    notes = to_text(get_value(raw_row, "notes", mapping)).lower()
    if notes:
        for keyword, rule in sorted_note_rules:
            if keyword in notes:
                return _from_rule(rule, NOTE_RULE)

    logger.debug("No rule matched edit=%r — defaulting to '%s'", edit, DEFAULT_CATEGORY)
    return DEFAULT_RESULT
