"""Tests for output formatters."""

import json

from dailyvault.utils.ui.formatters import (
    TASK_COLUMNS,
    format_error,
    format_output,
    format_table,
)


def test_json_output(capsys):
    format_output([{"title": "Café", "decrypt_errors": []}], "json")
    assert json.loads(capsys.readouterr().out) == [{"title": "Café", "decrypt_errors": []}]


def test_table_shows_placeholder_literally(capsys):
    format_table(
        [{"task_id": 1, "title": "[unable to decrypt]", "decrypt_errors": ["title"]}],
        TASK_COLUMNS,
    )
    out = capsys.readouterr().out
    assert "[unable to decrypt]" in out
    assert "Title" in out


def test_table_joins_lists(capsys):
    format_table([{"tags": ["work", "home"]}])
    assert "work, home" in capsys.readouterr().out


def test_empty_table(capsys):
    format_table([])
    assert "No items found" in capsys.readouterr().out


def test_error(capsys):
    format_error("Unable to decrypt data")
    assert "Error: Unable to decrypt data" in capsys.readouterr().out
