from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import httpx
from rich.table import Table

from refhelper.loader import load_commands
from refhelper.logic import filter_commands, get_command_name, list_categories
from refhelper.render import ExpansionState, build_table, next_theme
from refhelper.utils.config import load_config
from refhelper.utils.types import CommandRecord, LoadResult

LOADING_STATUS = "Loading data..."


class ReferenceSession:
    """In-memory state of one browsing session.

    Holds the loaded records, the active search term and category, the set of
    expanded rows and the theme. Loading a language replaces the records; the
    other state is kept so a language switch behaves like the web page did.
    """

    def __init__(
        self,
        source: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.config = config or load_config()
        data_cfg = self.config.get("data", {})
        self.source = source or str(data_cfg.get("source", "datasets"))
        self.transport = transport
        self.language = str(data_cfg.get("default_language", "html"))
        self.theme = str(self.config.get("ui", {}).get("theme", "light"))
        self.commands: List[CommandRecord] = []
        self.search_term = ""
        self.category = ""
        self.status = ""
        self.status_kind = "info"
        self.expanded = ExpansionState()

    def _set_status(self, message: str, kind: str = "info") -> None:
        self.status = message
        self.status_kind = kind

    def load(self, language: str) -> LoadResult:
        self.language = language
        self.commands = []
        self._set_status(LOADING_STATUS)
        result = load_commands(
            language,
            self.source,
            http_settings=self.config.get("http", {}),
            transport=self.transport,
        )
        if result.ok:
            self.commands = result.commands
            self._set_status("")
        else:
            self._set_status(result.status, "error")
        return result

    def set_search(self, search_term: str) -> None:
        self.search_term = search_term

    def set_category(self, category: str) -> None:
        self.category = category

    def categories(self) -> List[str]:
        return list_categories(self.commands)

    def visible(self) -> List[Mapping[str, Any]]:
        return filter_commands(self.commands, self.search_term, self.category)

    def find(self, name: str) -> Optional[Mapping[str, Any]]:
        wanted = name.strip().lower()
        for record in self.commands:
            if get_command_name(record).lower() == wanted:
                return record
        return None

    def toggle(self, name: str) -> Optional[bool]:
        """Flip the expansion of the row named ``name``; ``None`` if no such row."""

        record = self.find(name)
        if record is None:
            return None
        return self.expanded.toggle(get_command_name(record))

    def toggle_theme(self) -> str:
        self.theme = next_theme(self.theme)
        return self.theme

    def render(self) -> Table:
        return build_table(
            self.visible(),
            search_term=self.search_term.strip(),
            expanded=self.expanded,
            title=f"{self.language} reference",
        )
