"""Tests for the category commands."""

import json
from unittest.mock import patch

import httpx
import pytest
from typer.testing import CliRunner

from dailyvault.api.client import APIClient
from dailyvault.main import app

runner = CliRunner()


@pytest.fixture
def server(config_service):
    state = {"requests": [], "categories": []}

    def handler(request):
        body = json.loads(request.content) if request.content else None
        state["requests"].append((request.method, request.url.path, body))
        if request.method == "GET":
            return httpx.Response(
                200,
                json={
                    "success": True,
                    "total": len(state["categories"]),
                    "categories": state["categories"],
                },
            )
        return httpx.Response(200, json={"message": "ok"})

    def client_factory(service=None):
        return APIClient(service, transport=httpx.MockTransport(handler))

    with patch("dailyvault.commands.categories_command.get_client", side_effect=client_factory):
        yield state


def test_list(server):
    server["categories"] = [{"category_id": 1, "category_name": "Work", "color_code": "#f00"}]
    result = runner.invoke(app, ["categories", "list"])

    assert result.exit_code == 0, result.output
    assert "Work" in result.output


def test_list_json(server):
    server["categories"] = [{"category_id": 1, "category_name": "Work"}]
    result = runner.invoke(app, ["categories", "list", "--output", "json"])
    assert json.loads(result.output) == server["categories"]


def test_list_needs_no_secret(server, monkeypatch):
    monkeypatch.delenv("DAILYVAULT_SECRET", raising=False)
    assert runner.invoke(app, ["categories", "list"]).exit_code == 0


def test_add(server):
    result = runner.invoke(app, ["categories", "add", "Home", "--color", "#00ff00"])

    assert result.exit_code == 0, result.output
    assert server["requests"][0] == (
        "POST",
        "/api/categories",
        {"category_name": "Home", "color_code": "#00ff00"},
    )


def test_add_blank_name(server):
    result = runner.invoke(app, ["categories", "add", "   "])
    assert result.exit_code == 5
    assert server["requests"] == []


def test_rename(server):
    result = runner.invoke(app, ["categories", "rename", "3", "Errands"])

    assert result.exit_code == 0, result.output
    assert server["requests"][0] == (
        "PUT",
        "/api/categories/3",
        {"category_name": "Errands", "color_code": None},
    )


def test_delete_one(server):
    result = runner.invoke(app, ["categories", "delete", "3", "--yes"])

    assert result.exit_code == 0, result.output
    assert server["requests"][0][:2] == ("DELETE", "/api/categories/3")


def test_delete_many(server):
    result = runner.invoke(app, ["categories", "delete", "3", "4", "-y"])

    assert result.exit_code == 0, result.output
    assert server["requests"][0] == ("DELETE", "/api/categories", {"ids": [3, 4]})


def test_delete_aborted(server):
    result = runner.invoke(app, ["categories", "delete", "3"], input="n\n")
    assert "Aborted" in result.output
    assert server["requests"] == []
