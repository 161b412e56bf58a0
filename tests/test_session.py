from __future__ import annotations

import unittest

import httpx

from refhelper.logic import get_command_name
from refhelper.session import ReferenceSession
from refhelper.utils.config import DEFAULT_CONFIG


class SessionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.session = ReferenceSession(source="datasets", config=DEFAULT_CONFIG)

    def test_load_then_filter(self) -> None:
        result = self.session.load("shell")
        self.assertTrue(result.ok)
        self.assertEqual(self.session.status, "")

        self.session.set_search("LIST")
        self.assertEqual([get_command_name(item) for item in self.session.visible()], ["ls"])

        self.session.set_search("")
        self.session.set_category("Advanced")
        self.assertEqual([get_command_name(item) for item in self.session.visible()], ["xargs"])

    def test_failed_load_clears_records_and_sets_error_status(self) -> None:
        self.session.load("shell")
        with self.assertLogs("refhelper.loader", level="ERROR"):
            result = self.session.load("cobol")
        self.assertFalse(result.ok)
        self.assertEqual(self.session.commands, [])
        self.assertEqual(self.session.status_kind, "error")
        self.assertIn("Error loading data for cobol", self.session.status)

    def test_expansion_survives_refiltering(self) -> None:
        self.session.load("css")
        self.assertTrue(self.session.toggle("COLOR"))
        self.session.set_search("margin")
        self.session.set_search("")
        self.assertTrue(self.session.expanded.is_expanded("color"))
        self.assertFalse(self.session.toggle("color"))
        self.assertIsNone(self.session.toggle("no-such-property"))

    def test_categories_and_theme(self) -> None:
        self.session.load("sql")
        self.assertEqual(self.session.categories(), ["Beginner", "Intermediate", "Advanced"])
        self.assertEqual(self.session.theme, "light")
        self.assertEqual(self.session.toggle_theme(), "dark")
        self.assertEqual(self.session.toggle_theme(), "light")

    def test_render_builds_table_for_visible_rows(self) -> None:
        self.session.load("python")
        self.session.set_category("Beginner")
        table = self.session.render()
        self.assertEqual(table.row_count, 2)

    def test_remote_source(self) -> None:
        payload = [{"command": "ls", "category": "Beginner", "purpose": "List files"}]
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=payload))
        session = ReferenceSession(source="https://refs.example.com", config=DEFAULT_CONFIG, transport=transport)
        self.assertTrue(session.load("shell").ok)
        self.assertEqual(session.commands, payload)


if __name__ == "__main__":
    unittest.main()
