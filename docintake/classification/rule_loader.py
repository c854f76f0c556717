"""Loads and validates category rule tables."""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from docintake.classification.exceptions import RuleTableError
from docintake.classification.models import UNCLASSIFIED, CategoryRule, RuleTable

_DEFAULT_RULES_PATH = Path(__file__).parent / "rules" / "category_rules.json"
_LIST_FIELDS = ("filename_keywords", "text_phrases", "keywords", "key_phrases")


class RuleTableBuilder:
    """Accumulates category rules in declaration order and freezes them."""

    def __init__(self, version: str = "custom") -> None:
        self._version = version
        self._rules: dict[str, CategoryRule] = {}

    def add_category(
        self,
        name: str,
        *,
        filename_keywords: Iterable[str] = (),
        text_phrases: Iterable[str] = (),
        keywords: Iterable[str] = (),
        key_phrases: Iterable[str] = (),
    ) -> "RuleTableBuilder":
        """Register a category. Trigger words are lower-cased and de-duplicated.

        Raises:
            RuleTableError: on an empty, reserved or duplicate category name.
        """
        name = name.strip()
        if not name:
            raise RuleTableError("Category name must be a non-empty string")
        if name == UNCLASSIFIED:
            raise RuleTableError(f"'{UNCLASSIFIED}' is reserved and cannot be configured")
        if name in self._rules:
            raise RuleTableError(f"Duplicate category: {name}")
        self._rules[name] = CategoryRule(
            name=name,
            filename_keywords=_normalize_terms(filename_keywords),
            text_phrases=_normalize_terms(text_phrases),
            keywords=_normalize_terms(keywords),
            key_phrases=_normalize_terms(key_phrases),
        )
        return self

    def build(self) -> RuleTable:
        return RuleTable(version=self._version, categories=tuple(self._rules.values()))


def load_rule_table(path: Path | None = None) -> RuleTable:
    """Load a rule table from a JSON file.

    Args:
        path: Path to the rules file.
              Defaults to the bundled category_rules.json.

    Raises:
        RuleTableError: if the file cannot be read or fails validation.
    """
    if path is None:
        path = _DEFAULT_RULES_PATH
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RuleTableError(f"Failed to load rule table: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise RuleTableError(f"Rule table is not valid JSON: {exc}") from exc
    return build_rule_table(raw)


def build_rule_table(data: Any) -> RuleTable:
    """Validate a parsed rules document and build a RuleTable.

    Raises:
        RuleTableError: on any validation failure.
    """
    if not isinstance(data, dict):
        raise RuleTableError("Rule table must be a JSON object")
    categories = data.get("categories")
    if not isinstance(categories, list):
        raise RuleTableError("'categories' must be a list")

    builder = RuleTableBuilder(version=str(data.get("version", "unversioned")))
    for i, item in enumerate(categories):
        if not isinstance(item, dict):
            raise RuleTableError(f"categories[{i}] must be an object")
        name = item.get("name")
        if not isinstance(name, str):
            raise RuleTableError(f"categories[{i}].name must be a string")
        lists = {field: _require_string_list(item, field, i) for field in _LIST_FIELDS}
        builder.add_category(name, **lists)
    return builder.build()


def _require_string_list(item: dict[str, Any], field: str, index: int) -> list[str]:
    value = item.get(field, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise RuleTableError(f"categories[{index}].{field} must be a list of strings")
    return value


def _normalize_terms(terms: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for term in terms:
        cleaned = term.strip().lower()
        if cleaned:
            seen.setdefault(cleaned, None)
    return tuple(seen)
