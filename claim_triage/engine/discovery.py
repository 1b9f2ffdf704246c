"""Rule discovery — surfaces edit codes and notes that no rule covers yet."""

import logging
from typing import AbstractSet, Sequence

from claim_triage.config import ACTIONABLE_STATES
from claim_triage.engine.column_mapper import get_value, normalize_code, to_text
from claim_triage.engine.models import (
    ColumnMapping,
    DiscoveryResult,
    RawRow,
    UncategorizedItem,
)

logger = logging.getLogger(__name__)


def discover(
    raw_rows: Sequence[RawRow],
    mapping: ColumnMapping,
    existing_edit_texts: AbstractSet[str],
    existing_note_texts: AbstractSet[str],
    actionable_only: bool = False,
) -> DiscoveryResult:
    """Collect unseen edit and note values for human triage.

    Values are trimmed; blanks are ignored. Edit codes are compared exactly
    against ``existing_edit_texts``. Notes are compared case-insensitively
    against ``existing_note_texts`` since note keywords are stored lower-case.

    Args:
        raw_rows: Spreadsheet rows.
        mapping: Client column mapping.
        existing_edit_texts: Edit codes that already have a rule.
        existing_note_texts: Note keywords that already have a rule.
        actionable_only: Skip rows whose state is not actionable.

    Returns:
        Distinct new values, each list sorted, with no proposed category.
    """
    known_notes = {text.lower() for text in existing_note_texts}
    new_edits: set[str] = set()
    new_notes: set[str] = set()

    for raw_row in raw_rows:
        if actionable_only:
            state = normalize_code(get_value(raw_row, "state", mapping), "")
            if state not in ACTIONABLE_STATES:
                continue

        edit = to_text(get_value(raw_row, "edit", mapping)).strip()
        if edit and edit not in existing_edit_texts:
            new_edits.add(edit)

        notes = to_text(get_value(raw_row, "notes", mapping)).strip()
        if notes and notes.lower() not in known_notes:
            new_notes.add(notes)

    logger.info(
        "Discovery found %d new edit(s) and %d new note(s) across %d row(s)",
        len(new_edits),
        len(new_notes),
        len(raw_rows),
    )
    return DiscoveryResult(
        edits=[UncategorizedItem(text=text) for text in sorted(new_edits)],
        notes=[UncategorizedItem(text=text) for text in sorted(new_notes)],
    )
