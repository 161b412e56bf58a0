from __future__ import annotations

import io
import unittest

from rich.console import Console
from rich.text import Text

from refhelper.render import (
    COLLAPSED_TIPS,
    NO_RESULTS,
    THEMES,
    ExpansionState,
    build_table,
    highlight_text,
    next_theme,
)


RECORDS = [
    {"command": "ls", "category": "Beginner", "purpose": "List files", "example": "ls -la", "tips": "Use -a for hidden", "docs": "https://man7.org/ls"},
    {"element": "div", "category": "Intermediate", "purpose": "Container", "example": "<div></div>", "tips": "Block level", "docs": "https://mdn/div"},
]


def _cells(table, index: int) -> list:
    return [cell.plain if isinstance(cell, Text) else str(cell) for cell in table.columns[index].cells]


class HighlightTests(unittest.TestCase):
    def test_highlights_every_match_case_insensitively(self) -> None:
        text = highlight_text("List lists", "LIST")
        spans = [(span.start, span.end, span.style) for span in text.spans]
        self.assertEqual(spans, [(0, 4, "highlight"), (5, 9, "highlight")])
        self.assertEqual(text.plain, "List lists")

    def test_regex_characters_are_literal(self) -> None:
        text = highlight_text("a.b axb (c)", "(c)")
        self.assertEqual([(span.start, span.end) for span in text.spans], [(8, 11)])
        self.assertEqual(highlight_text("axb", "a.b").spans, [])

    def test_empty_term_and_missing_text(self) -> None:
        self.assertEqual(highlight_text("plain", "").spans, [])
        self.assertEqual(highlight_text(None, "x").plain, "")


class ExpansionStateTests(unittest.TestCase):
    def test_toggle_adds_and_removes(self) -> None:
        state = ExpansionState()
        self.assertTrue(state.toggle("ls"))
        self.assertIn("ls", state)
        self.assertFalse(state.toggle("ls"))
        self.assertFalse(state.is_expanded("ls"))

    def test_clear(self) -> None:
        state = ExpansionState()
        state.expand("a")
        state.expand("b")
        self.assertEqual(len(state), 2)
        state.clear()
        self.assertEqual(len(state), 0)


class TableTests(unittest.TestCase):
    def test_rows_follow_record_order(self) -> None:
        table = build_table(RECORDS, search_term="")
        self.assertEqual(table.row_count, 2)
        self.assertEqual(_cells(table, 0), ["ls", "div"])
        self.assertEqual(_cells(table, 1), ["Beginner", "Intermediate"])
        self.assertEqual(_cells(table, 4), [COLLAPSED_TIPS, COLLAPSED_TIPS])

    def test_expanded_rows_show_tips(self) -> None:
        expanded = ExpansionState()
        expanded.expand("div")
        table = build_table(RECORDS, search_term="block", expanded=expanded)
        tips = list(table.columns[4].cells)
        self.assertEqual(tips[0].plain, COLLAPSED_TIPS)
        self.assertEqual(tips[1].plain, "Block level")
        self.assertEqual([(span.start, span.end) for span in tips[1].spans], [(0, 5)])

    def test_empty_result_shows_placeholder_row(self) -> None:
        table = build_table([], search_term="zzz")
        self.assertEqual(table.row_count, 1)
        self.assertEqual(_cells(table, 0), [NO_RESULTS])

    def test_table_renders_with_both_themes(self) -> None:
        for theme in ("light", "dark"):
            console = Console(theme=THEMES[theme], width=120, record=True, file=io.StringIO())
            console.print(build_table(RECORDS, search_term="ls"))
            output = console.export_text()
            self.assertIn("Container", output)
            self.assertIn("Beginner", output)

    def test_next_theme(self) -> None:
        self.assertEqual(next_theme("light"), "dark")
        self.assertEqual(next_theme("dark"), "light")


if __name__ == "__main__":
    unittest.main()
