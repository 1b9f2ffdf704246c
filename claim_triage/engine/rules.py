"""Lookup structures built from a client's rule sets."""

import logging
from typing import Iterable

from claim_triage.engine.models import Rule

logger = logging.getLogger(__name__)

NoteRuleList = list[tuple[str, Rule]]


def build_edit_index(rules: Iterable[Rule]) -> dict[str, Rule]:
    """Index edit rules by their exact text.

    Later rules overwrite earlier ones with the same text. When the
    overwrite changes the category, the collision is logged.
    """
    index: dict[str, Rule] = {}
    for rule in rules:
        previous = index.get(rule.text)
        if previous is not None and previous.category_name != rule.category_name:
            logger.warning(
                "Edit rule collision on '%s': '%s' replaced by '%s'",
                rule.text,
                previous.category_name,
                rule.category_name,
            )
        index[rule.text] = rule
    return index


def sort_note_rules(rules: Iterable[Rule]) -> NoteRuleList:
    """Pair note rules with lower-cased keywords, longest keyword first.

    Equal-length keywords keep their input order. Blank keywords are dropped
    since they would match every note.
    """
    pairs: NoteRuleList = []
    for rule in rules:
        keyword = rule.text.lower()
        if not keyword.strip():
            logger.debug("Skipping blank note keyword for category '%s'", rule.category_name)
            continue
        pairs.append((keyword, rule))
    return sorted(pairs, key=lambda pair: len(pair[0]), reverse=True)
