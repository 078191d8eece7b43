"""Tests for dailyvault.utils.exit_codes."""

from __future__ import annotations

import pytest

from dailyvault.utils.exit_codes import (
    ERROR_DECRYPTION,
    ERROR_GENERAL,
    ERROR_INVALID_ARGS,
    ERROR_MISSING_SECRET,
    ERROR_NETWORK,
    SUCCESS,
    get_exit_code_name,
)

ALL_CODES = [
    SUCCESS,
    ERROR_GENERAL,
    ERROR_DECRYPTION,
    ERROR_MISSING_SECRET,
    ERROR_NETWORK,
    ERROR_INVALID_ARGS,
]


class TestExitCodeConstants:
    def test_success_is_zero(self):
        assert SUCCESS == 0

    def test_all_constants_are_unique(self):
        assert len(ALL_CODES) == len(set(ALL_CODES))

    def test_error_codes_are_truthy(self):
        for code in ALL_CODES[1:]:
            assert code, f"Expected truthy for error code {code}"


class TestGetExitCodeName:
    @pytest.mark.parametrize(
        "code, expected_name",
        [
            (SUCCESS, "SUCCESS"),
            (ERROR_GENERAL, "ERROR_GENERAL"),
            (ERROR_DECRYPTION, "ERROR_DECRYPTION"),
            (ERROR_MISSING_SECRET, "ERROR_MISSING_SECRET"),
            (ERROR_NETWORK, "ERROR_NETWORK"),
            (ERROR_INVALID_ARGS, "ERROR_INVALID_ARGS"),
        ],
    )
    def test_known_code_returns_name(self, code, expected_name):
        assert get_exit_code_name(code) == expected_name

    @pytest.mark.parametrize("code", [99, -1, 255])
    def test_unknown_code(self, code):
        assert get_exit_code_name(code) == f"UNKNOWN({code})"


def test_usage_error_code_is_not_reused():
    """Click exits with 2 on bad usage; no application code may share it."""
    assert 2 not in ALL_CODES
