"""Rule store adapter — client mappings, categories and rules.

The adapter owns no connection of its own: callers inject a key-value
handle (any ``MutableMapping``) at construction, and every record is read
from and written to that handle.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Literal, Mapping, MutableMapping

from claim_triage.engine.models import Rule, RuleSets, UncategorizedItem

logger = logging.getLogger(__name__)

RuleType = Literal["edit", "note"]
RULE_TYPES: tuple[str, ...] = ("edit", "note")

_TEAMS_KEY = "teams"
_CATEGORIES_KEY = "categories"


class RuleStoreError(RuntimeError):
    """Raised when the rule store cannot satisfy a request."""


class ClientNotFoundError(RuleStoreError):
    """Raised when a client has no stored configuration."""


class RuleNotFoundError(RuleStoreError):
    """Raised when deleting a rule that does not exist."""


@dataclass(frozen=True)
class Category:
    category_id: int
    category_name: str
    team_id: int | None = None
    send_to_l1_monitor: bool = False


def _mapping_key(client_id: str) -> str:
    return f"client:{client_id}:mapping"


def _rules_key(client_id: str, rule_type: str) -> str:
    return f"client:{client_id}:{rule_type}_rules"


def _check_rule_type(rule_type: str) -> None:
    if rule_type not in RULE_TYPES:
        raise RuleStoreError(f"Unknown rule type '{rule_type}'. Expected one of {RULE_TYPES}.")


class RuleStore:
    """Reads and writes triage configuration through an injected handle."""

    def __init__(self, handle: MutableMapping[str, Any]) -> None:
        self._handle = handle

    # ------------------------------------------------------------------
    # Column mappings
    # ------------------------------------------------------------------

    def save_column_mapping(self, client_id: str, mapping: Mapping[str, str]) -> None:
        self._handle[_mapping_key(client_id)] = dict(mapping)
        logger.info("Saved column mapping for client=%s (%d field(s))", client_id, len(mapping))

    def fetch_column_mapping(self, client_id: str) -> dict[str, str]:
        """Return the client's logical field → header mapping.

        Raises:
            ClientNotFoundError: If no mapping was saved for the client.
        """
        mapping = self._handle.get(_mapping_key(client_id))
        if mapping is None:
            raise ClientNotFoundError(f"No column mapping configured for client '{client_id}'.")
        return dict(mapping)

    # ------------------------------------------------------------------
    # Teams and categories
    # ------------------------------------------------------------------

    def put_team(self, team_id: int, team_name: str) -> None:
        teams = dict(self._handle.get(_TEAMS_KEY, {}))
        teams[team_id] = team_name
        self._handle[_TEAMS_KEY] = teams

    def put_category(
        self,
        category_id: int,
        category_name: str,
        team_id: int | None = None,
        send_to_l1_monitor: bool = False,
    ) -> Category:
        category = Category(category_id, category_name, team_id, send_to_l1_monitor)
        categories = dict(self._handle.get(_CATEGORIES_KEY, {}))
        categories[category_id] = category
        self._handle[_CATEGORIES_KEY] = categories
        return category

    def list_categories(self) -> list[Category]:
        categories = self._handle.get(_CATEGORIES_KEY, {})
        return sorted(categories.values(), key=lambda c: c.category_name)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _list_rules(self, client_id: str, rule_type: str) -> list[Rule]:
        _check_rule_type(rule_type)
        stored: Mapping[str, int] = self._handle.get(_rules_key(client_id, rule_type), {})
        categories: Mapping[int, Category] = self._handle.get(_CATEGORIES_KEY, {})
        teams: Mapping[int, str] = self._handle.get(_TEAMS_KEY, {})

        rules: list[Rule] = []
        for text, category_id in stored.items():
            category = categories.get(category_id)
            if category is None:
                logger.warning(
                    "Dropping %s rule '%s' for client=%s — unknown category %s",
                    rule_type,
                    text,
                    client_id,
                    category_id,
                )
                continue
            rules.append(
                Rule(
                    text=text,
                    category_id=category.category_id,
                    category_name=category.category_name,
                    team_name=teams.get(category.team_id) if category.team_id is not None else None,
                    send_to_l1_monitor=category.send_to_l1_monitor,
                )
            )
        return rules

    def list_edit_rules(self, client_id: str) -> list[Rule]:
        return self._list_rules(client_id, "edit")

    def list_note_rules(self, client_id: str) -> list[Rule]:
        return self._list_rules(client_id, "note")

    def fetch_rule_sets(self, client_id: str) -> RuleSets:
        """Load both rule sets for a client, joined with categories and teams."""
        rule_sets = RuleSets(
            edit_rules=self.list_edit_rules(client_id),
            note_rules=self.list_note_rules(client_id),
        )
        logger.info(
            "Fetched rules for client=%s — edit=%d note=%d",
            client_id,
            len(rule_sets.edit_rules),
            len(rule_sets.note_rules),
        )
        return rule_sets

    def persist_rules(
        self,
        client_id: str,
        rule_type: RuleType,
        items: Iterable[UncategorizedItem | Mapping[str, Any]],
    ) -> int:
        """Upsert triaged items as rules keyed by (client, text).

        Items without a category are skipped. Note keywords are stored
        lower-case. Nothing is written if any item names an unknown category.

        Args:
            client_id: Client the rules belong to.
            rule_type: ``"edit"`` or ``"note"``.
            items: ``UncategorizedItem`` objects or ``{"text", "category_id"}``
                mappings.

        Returns:
            The number of rules written.

        Raises:
            RuleStoreError: On an unknown rule type or category.
        """
        _check_rule_type(rule_type)
        categories: Mapping[int, Category] = self._handle.get(_CATEGORIES_KEY, {})

        pending: dict[str, int] = {}
        for item in items:
            if isinstance(item, UncategorizedItem):
                text, category_id = item.text, item.proposed_category_id
            else:
                text, category_id = item.get("text"), item.get("category_id")
            text = (text or "").strip()
            if not text or category_id is None:
                continue
            if category_id not in categories:
                raise RuleStoreError(f"Unknown category id {category_id} for rule '{text}'.")
            pending[text.lower() if rule_type == "note" else text] = category_id

        key = _rules_key(client_id, rule_type)
        stored = dict(self._handle.get(key, {}))
        stored.update(pending)
        self._handle[key] = stored
        logger.info("Persisted %d %s rule(s) for client=%s", len(pending), rule_type, client_id)
        return len(pending)

    def delete_rule(self, client_id: str, rule_type: RuleType, text: str) -> None:
        """Remove one rule.

        Raises:
            RuleNotFoundError: If the client has no rule with that text.
        """
        _check_rule_type(rule_type)
        key = _rules_key(client_id, rule_type)
        stored = dict(self._handle.get(key, {}))
        if rule_type == "note":
            text = text.lower()
        if text not in stored:
            raise RuleNotFoundError(f"Rule '{text}' not found for client '{client_id}'.")
        del stored[text]
        self._handle[key] = stored
        logger.info("Deleted %s rule '%s' for client=%s", rule_type, text, client_id)
