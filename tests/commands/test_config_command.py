"""Tests for the configuration commands."""

import json

from typer.testing import CliRunner

from dailyvault.main import app

runner = CliRunner()


def test_show(config_service):
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert json.loads(result.output)["crypto"]["kdf_iterations"] == 250_000


def test_set_then_get(config_service):
    result = runner.invoke(app, ["config", "set", "api.endpoint", "https://vault.example.com/api/"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["config", "get", "api.endpoint"])
    assert result.output.strip() == "https://vault.example.com/api"
    assert config_service.config_path.exists()


def test_set_rejects_weak_iterations(config_service):
    result = runner.invoke(app, ["config", "set", "crypto.kdf_iterations", "1000"])
    assert result.exit_code == 5
    assert config_service.get("crypto.kdf_iterations") == 250_000


def test_unknown_key(config_service):
    assert runner.invoke(app, ["config", "get", "api.nope"]).exit_code == 5
    assert runner.invoke(app, ["config", "set", "api.nope", "1"]).exit_code == 5
