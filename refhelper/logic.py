"""Search and category filtering over loaded reference records.

Nothing here touches the terminal or the filesystem, so the session, the CLI
and the tests all share the same predicate.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence

IDENTITY_FIELDS = ("element", "command", "property")
SEARCH_FIELDS = ("purpose", "example", "tips")
UNKNOWN_NAME = "Unknown"


def _field_text(record: Mapping[str, Any], name: str) -> str:
    value = record.get(name)
    if not value:
        return ""
    return str(value)


def get_command_name(record: Mapping[str, Any]) -> str:
    """Display name of a record: element, then command, then property."""

    for name in IDENTITY_FIELDS:
        value = record.get(name)
        if value:
            return str(value)
    return UNKNOWN_NAME


def normalize_term(search_term: Optional[str]) -> str:
    return search_term.strip().lower() if search_term else ""


def matches(record: Mapping[str, Any], term: str, category: Optional[str]) -> bool:
    if term:
        haystacks = [get_command_name(record).lower()]
        haystacks.extend(_field_text(record, name).lower() for name in SEARCH_FIELDS)
        if not any(term in text for text in haystacks):
            return False
    if category:
        return record.get("category") == category
    return True


def filter_commands(
    commands: Sequence[Mapping[str, Any]],
    search_term: Optional[str],
    category: Optional[str],
) -> List[Mapping[str, Any]]:
    """Return the records matching ``search_term`` and ``category``, in order.

    The search term is trimmed and compared case-insensitively against the
    display name, purpose, example and tips. The category, when given, must
    match exactly.
    """

    term = normalize_term(search_term)
    return [record for record in commands if matches(record, term, category)]


def list_categories(commands: Iterable[Mapping[str, Any]]) -> List[str]:
    seen: List[str] = []
    for record in commands:
        category = _field_text(record, "category")
        if category and category not in seen:
            seen.append(category)
    return seen
