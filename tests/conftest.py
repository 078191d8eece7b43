"""Shared test fixtures and configuration.

Isolates tests from the real config, credentials and log directories.
"""

from __future__ import annotations

import base64
import json
import logging
from unittest.mock import patch

import pytest


def make_token(claims: dict) -> str:
    """Build an unsigned JWT carrying ``claims``."""

    def segment(data: dict) -> str:
        raw = json.dumps(data).encode("utf-8")
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    return f"{segment({'alg': 'HS256', 'typ': 'JWT'})}.{segment(claims)}.signature"


def _reset_logging() -> None:
    """Detach the log file and restore default state on every dailyvault logger."""
    from dailyvault.utils.logger import reset_logger

    reset_logger()
    for name in list(logging.root.manager.loggerDict):
        if name == "dailyvault" or name.startswith("dailyvault."):
            logger = logging.getLogger(name)
            logger.handlers.clear()
            logger.setLevel(logging.NOTSET)
            logger.propagate = True


@pytest.fixture(autouse=True)
def isolated_logging():
    """Give every test a fresh, propagating logger tree."""
    _reset_logging()
    yield
    _reset_logging()


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path):
    """Point platformdirs lookups at *tmp_path* and reset cached singletons."""
    from dailyvault.services.config_service import get_config_service

    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    with patch("dailyvault.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("dailyvault.utils.logger.user_log_dir", return_value=tmpdir):
            yield tmp_path
    get_config_service.cache_clear()


@pytest.fixture()
def config_service(isolated_dirs):
    """A real ConfigService backed by the temporary directory."""
    from dailyvault.services.config_service import get_config_service

    return get_config_service()


@pytest.fixture()
def logged_in(config_service):
    """Store credentials for user 42 and return the token."""
    token = make_token({"id": 42, "email": "user42@example.com"})
    config_service.save_credentials(token)
    return token


@pytest.fixture()
def codec():
    from dailyvault.crypto.codec import SealedBoxCodec

    return SealedBoxCodec()


@pytest.fixture()
def token_factory():
    """Return a helper that builds unsigned JWTs from claims."""
    return make_token
