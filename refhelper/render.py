from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Optional, Set

from rich.style import Style
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from refhelper.logic import get_command_name

COLUMNS = ("Element", "Category", "Example", "Purpose", "Tips", "Docs")
COLLAPSED_TIPS = "expand to view"
NO_RESULTS = "No results found."

THEMES = {
    "light": Theme(
        {
            "highlight": "bold black on yellow",
            "category": "blue",
            "example": "magenta",
            "docs": "underline blue",
            "status.info": "cyan",
            "status.error": "bold red",
            "status.success": "green",
        }
    ),
    "dark": Theme(
        {
            "highlight": "bold black on bright_yellow",
            "category": "bright_cyan",
            "example": "bright_magenta",
            "docs": "underline bright_blue",
            "status.info": "bright_cyan",
            "status.error": "bold bright_red",
            "status.success": "bright_green",
        }
    ),
}


def next_theme(theme: str) -> str:
    return "light" if theme == "dark" else "dark"


def highlight_text(text: Any, search_term: Optional[str]) -> Text:
    """Style every case-insensitive occurrence of ``search_term`` in ``text``.

    The term is matched literally, so regex metacharacters in user input are
    harmless.
    """

    if not isinstance(text, str):
        return Text(str(text) if text else "")
    rendered = Text(text)
    if not search_term:
        return rendered
    for match in re.finditer(re.escape(search_term), text, flags=re.IGNORECASE):
        rendered.stylize("highlight", match.start(), match.end())
    return rendered


class ExpansionState:
    """Expanded rows, keyed by display name so they survive re-filtering."""

    def __init__(self) -> None:
        self._expanded: Set[str] = set()

    def toggle(self, name: str) -> bool:
        if name in self._expanded:
            self._expanded.discard(name)
            return False
        self._expanded.add(name)
        return True

    def expand(self, name: str) -> None:
        self._expanded.add(name)

    def is_expanded(self, name: str) -> bool:
        return name in self._expanded

    def clear(self) -> None:
        self._expanded.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._expanded

    def __len__(self) -> int:
        return len(self._expanded)


def build_table(
    records: Iterable[Mapping[str, Any]],
    search_term: Optional[str] = "",
    expanded: Optional[ExpansionState] = None,
    title: Optional[str] = None,
) -> Table:
    expanded = expanded or ExpansionState()
    table = Table(title=title, show_lines=True)
    for column in COLUMNS:
        table.add_column(column, justify="left", overflow="fold")

    row_count = 0
    for record in records:
        name = get_command_name(record)
        if expanded.is_expanded(name):
            tips = highlight_text(record.get("tips"), search_term)
        else:
            tips = Text(COLLAPSED_TIPS, style="dim")
        docs = Text(str(record.get("docs") or ""), style="docs")
        if docs.plain:
            docs.stylize(Style(link=docs.plain))
        table.add_row(
            highlight_text(name, search_term),
            Text(str(record.get("category") or ""), style="category"),
            highlight_text(record.get("example"), search_term),
            highlight_text(record.get("purpose"), search_term),
            tips,
            docs,
        )
        row_count += 1

    if row_count == 0:
        table.add_row(Text(NO_RESULTS, style="italic"), *([""] * (len(COLUMNS) - 1)))
    return table


def render_status(message: str, kind: str = "info") -> Text:
    return Text(message, style=f"status.{kind}")
