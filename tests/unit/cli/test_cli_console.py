"""Unit tests for CLI console helpers."""

from rich.console import Console
from rich.table import Table

import cli.console as console_module
from cli.console import create_table, print_error, print_info, print_panel, print_success


def _capture(monkeypatch) -> Console:
    recorder = Console(record=True, width=80)
    monkeypatch.setattr(console_module, "console", recorder)
    return recorder


class TestConsole:
    """Tests for the shared console and message helpers."""

    def test_console_is_rich_console(self):
        assert isinstance(console_module.console, Console)

    def test_create_table_with_title(self):
        table = create_table("Installed docsets")

        assert isinstance(table, Table)
        assert table.title == "Installed docsets"

    def test_create_table_without_title(self):
        assert create_table().title is None

    def test_messages_carry_symbols(self, monkeypatch):
        recorder = _capture(monkeypatch)

        print_success("Activated Redis")
        print_error("Docset not found: Foo")
        print_info("No results")

        text = recorder.export_text()
        assert "✓ Activated Redis" in text
        assert "✗ Docset not found: Foo" in text
        assert "ℹ No results" in text

    def test_print_panel(self, monkeypatch):
        recorder = _capture(monkeypatch)

        print_panel("Installed Redis", "Location: /tmp/docsets")

        text = recorder.export_text()
        assert "Installed Redis" in text
        assert "Location: /tmp/docsets" in text
