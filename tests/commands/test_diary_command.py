"""Tests for the encrypted diary commands."""

import json
from unittest.mock import patch

import httpx
import pytest
from typer.testing import CliRunner

from dailyvault.api.client import APIClient
from dailyvault.main import app
from dailyvault.services.vault_service import VaultService

runner = CliRunner()


@pytest.fixture
def server(config_service, codec):
    state = {"requests": [], "entries": [], "entry": None, "stats": [], "missing": []}

    def handler(request):
        body = json.loads(request.content) if request.content else None
        state["requests"].append((request.method, request.url, body))
        path = request.url.path
        if request.method == "GET" and path == "/api/diary/moods/stats":
            return httpx.Response(200, json={"stats": state["stats"]})
        if request.method == "GET" and path == "/api/diary/missing":
            return httpx.Response(200, json={"missing": state["missing"]})
        if request.method == "GET" and path.startswith("/api/diary/") and path[-1].isdigit():
            return httpx.Response(200, json={"entry": state["entry"]})
        if request.method in ("PUT", "DELETE"):
            return httpx.Response(200, json={"message": "ok"})
        if request.method == "GET":
            return httpx.Response(200, json={"entries": state["entries"]})
        return httpx.Response(201, json={"id": 1})

    def factory(secret):
        client = APIClient(config_service, transport=httpx.MockTransport(handler))
        return VaultService(client, "42", codec=codec)

    def client_factory(service=None):
        return APIClient(service, transport=httpx.MockTransport(handler))

    with patch("dailyvault.commands.diary_command.get_vault_service", side_effect=factory):
        with patch("dailyvault.commands.diary_command.get_client", side_effect=client_factory):
            yield state


def entry(codec, entry_id, content, title=None, tags=None):
    record = {"entry_id": entry_id, "content_encrypted": codec.seal("42", content)}
    if title:
        record["title_encrypted"] = codec.seal("42", title)
    if tags:
        record["tags_encrypted"] = codec.seal("42", tags)
    return record


def test_add_entry(server, codec):
    result = runner.invoke(
        app,
        ["diary", "add", "Dear diary", "-t", "Monday", "--tag", "work", "--tag", "home", "--mood", "calm"],
    )

    assert result.exit_code == 0, result.output
    method, url, body = server["requests"][0]
    assert (method, url.path) == ("POST", "/api/diary")
    assert codec.open("42", body["content_encrypted"]) == "Dear diary"
    assert codec.open("42", body["tags_encrypted"]) == "work, home"
    assert body["mood"] == "calm"


def test_add_entry_bad_visibility(server):
    result = runner.invoke(app, ["diary", "add", "x", "--visibility", "friends"])
    assert result.exit_code == 5


def test_list_pages_by_offset(server, codec):
    server["entries"] = [entry(codec, 1, "hello")]
    result = runner.invoke(app, ["diary", "list", "--page", "2", "--output", "json"])

    assert result.exit_code == 0, result.output
    _, url, _ = server["requests"][0]
    assert url.params["limit"] == "5"
    assert url.params["offset"] == "10"
    assert json.loads(result.output)[0]["content"] == "hello"


def test_search_matches_locally(server, codec):
    server["entries"] = [
        entry(codec, 1, "Walk in the park", tags=["outdoors"]),
        entry(codec, 2, "Read a book", tags=["home"]),
    ]
    result = runner.invoke(app, ["diary", "search", "PARK", "--output", "json"])

    assert result.exit_code == 0, result.output
    assert [e["entry_id"] for e in json.loads(result.output)] == [1]
    _, url, _ = server["requests"][0]
    assert url.path == "/api/diary/search"


def test_search_by_tag(server, codec):
    server["entries"] = [
        entry(codec, 1, "a", tags=["outdoors"]),
        entry(codec, 2, "b", tags=["home"]),
    ]
    result = runner.invoke(app, ["diary", "search", "--tag", "home", "--output", "json"])
    assert [e["entry_id"] for e in json.loads(result.output)] == [2]


def test_search_by_tag_in_web_written_entry(server, codec):
    server["entries"] = [
        entry(codec, 1, "Picnic", tags="outdoors, park"),
        entry(codec, 2, "Desk day", tags="work"),
    ]
    result = runner.invoke(app, ["diary", "search", "--tag", "park", "--output", "json"])

    assert result.exit_code == 0, result.output
    assert [e["entry_id"] for e in json.loads(result.output)] == [1]


def test_show_entry(server, codec):
    server["entry"] = entry(codec, 4, "Long walk", title="Sunday", tags="outdoors")
    result = runner.invoke(app, ["diary", "show", "4"])

    assert result.exit_code == 0, result.output
    assert "Sunday" in result.output
    assert "Long walk" in result.output
    assert server["requests"][0][1].path == "/api/diary/4"


def test_show_missing_entry(server):
    result = runner.invoke(app, ["diary", "show", "4"])
    assert result.exit_code == 5


def test_edit_entry(server, codec):
    result = runner.invoke(
        app, ["diary", "edit", "4", "--content", "Rewritten", "--tag", "a", "--mood", "sad"]
    )

    assert result.exit_code == 0, result.output
    method, url, body = server["requests"][0]
    assert (method, url.path) == ("PUT", "/api/diary/4")
    assert set(body) == {"content_encrypted", "tags_encrypted", "mood"}
    assert codec.open("42", body["content_encrypted"]) == "Rewritten"
    assert codec.open("42", body["tags_encrypted"]) == "a"


def test_edit_entry_without_changes(server):
    result = runner.invoke(app, ["diary", "edit", "4"])
    assert result.exit_code == 5
    assert server["requests"] == []


def test_delete_entry(server):
    result = runner.invoke(app, ["diary", "delete", "4", "--yes"])

    assert result.exit_code == 0, result.output
    method, url, _ = server["requests"][0]
    assert (method, url.path) == ("DELETE", "/api/diary/4")


def test_delete_entry_aborted(server):
    result = runner.invoke(app, ["diary", "delete", "4"], input="n\n")
    assert "Aborted" in result.output
    assert server["requests"] == []


def test_moods(server):
    server["stats"] = [{"mood": "happy", "count": 3}, {"mood": "sad", "count": 1}]
    result = runner.invoke(
        app, ["diary", "moods", "--since", "2025-01-01", "--output", "json"]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == server["stats"]
    _, url, _ = server["requests"][0]
    assert url.path == "/api/diary/moods/stats"
    assert url.params["since"] == "2025-01-01"
    assert "until" not in url.params


def test_moods_table(server):
    server["stats"] = [{"mood": "happy", "count": 3}]
    result = runner.invoke(app, ["diary", "moods"])

    assert result.exit_code == 0, result.output
    assert "happy" in result.output


def test_moods_need_no_secret(server, monkeypatch):
    monkeypatch.delenv("DAILYVAULT_SECRET", raising=False)
    result = runner.invoke(app, ["diary", "moods", "--output", "json"])
    assert result.exit_code == 0, result.output


def test_missing_days(server):
    server["missing"] = ["2025-01-02", "2025-01-03"]
    result = runner.invoke(app, ["diary", "missing"])

    assert result.exit_code == 0, result.output
    assert "2025-01-02, 2025-01-03" in result.output
    assert server["requests"][0][1].path == "/api/diary/missing"


def test_no_missing_days(server):
    result = runner.invoke(app, ["diary", "missing", "--output", "json"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == []
