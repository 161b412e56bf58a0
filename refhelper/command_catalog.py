from __future__ import annotations

from typing import List, Tuple


def get_command_catalog() -> List[str]:
    return [
        "search",
        "categories",
        "languages",
        "validate",
        "browse",
    ]


def get_browse_commands() -> List[Tuple[str, str]]:
    return [
        (":lang LANGUAGE", "Load another language dataset."),
        (":cat CATEGORY", "Filter by category; ':cat' alone clears it."),
        (":open NAME", "Expand or collapse the tips row of NAME."),
        (":theme", "Switch between the light and dark theme."),
        (":help", "Show this help."),
        (":quit", "Leave the browser."),
        ("TEXT", "Any other input becomes the search term; empty input clears it."),
    ]
