"""Unit tests for PBKDF2 key derivation."""

from __future__ import annotations

import pickle

import pytest

from dailyvault.crypto.exceptions import (
    InvalidSecretError,
    KeyDerivationError,
    MissingSecretError,
)
from dailyvault.crypto.keys import (
    IV_SIZE,
    KEY_SIZE,
    MIN_PBKDF2_ITERATIONS,
    PBKDF2_ITERATIONS,
    SALT_SIZE,
    DerivedKey,
    derive_key,
    generate_iv,
    generate_salt,
)


class TestDeriveKey:
    def test_produces_256_bit_key(self):
        key = derive_key("user-42", generate_salt())
        assert isinstance(key, DerivedKey)
        assert len(key.key_bytes) == KEY_SIZE

    def test_same_secret_same_salt_gives_same_key(self):
        salt = generate_salt()
        assert derive_key("user-42", salt) == derive_key("user-42", salt)

    def test_different_salt_gives_different_key(self):
        key1 = derive_key("user-42", generate_salt())
        key2 = derive_key("user-42", generate_salt())
        assert key1 != key2

    def test_different_secret_gives_different_key(self):
        salt = generate_salt()
        assert derive_key("user-42", salt) != derive_key("user-43", salt)

    def test_matches_pbkdf2_hmac_sha256(self):
        import hashlib

        salt = b"\x01" * SALT_SIZE
        expected = hashlib.pbkdf2_hmac(
            "sha256", "abc".encode("utf-8"), salt, PBKDF2_ITERATIONS, dklen=32
        )
        assert derive_key("abc", salt).key_bytes == expected

    def test_default_iteration_count(self):
        assert PBKDF2_ITERATIONS == 250_000

    @pytest.mark.parametrize("secret", ["", None, 42, b"bytes"])
    def test_invalid_secret_rejected(self, secret):
        with pytest.raises(InvalidSecretError):
            derive_key(secret, generate_salt())

    def test_invalid_secret_is_a_missing_secret(self):
        with pytest.raises(MissingSecretError):
            derive_key("", generate_salt())

    @pytest.mark.parametrize("salt", [b"short", b"x" * 32, b""])
    def test_wrong_salt_size_rejected(self, salt):
        with pytest.raises(KeyDerivationError, match=f"{SALT_SIZE} bytes"):
            derive_key("user-42", salt)

    def test_low_iteration_count_rejected(self):
        with pytest.raises(KeyDerivationError):
            derive_key("user-42", generate_salt(), iterations=MIN_PBKDF2_ITERATIONS - 1)

    def test_unicode_secret(self):
        key = derive_key("usér-😀", generate_salt())
        assert len(key.key_bytes) == KEY_SIZE


class TestDerivedKey:
    def test_wrong_size_raises_value_error(self):
        with pytest.raises(ValueError, match=f"{KEY_SIZE} bytes"):
            DerivedKey(b"short")

    def test_repr_hides_key_material(self):
        key = DerivedKey(b"k" * KEY_SIZE)
        rep = repr(key)
        assert "DerivedKey" in rep
        assert key.key_bytes.hex() not in rep
        assert "kkkk" not in rep

    def test_cannot_be_pickled(self):
        key = DerivedKey(b"k" * KEY_SIZE)
        with pytest.raises(TypeError):
            pickle.dumps(key)

    def test_equality(self):
        assert DerivedKey(b"a" * KEY_SIZE) == DerivedKey(b"a" * KEY_SIZE)
        assert DerivedKey(b"a" * KEY_SIZE) != DerivedKey(b"b" * KEY_SIZE)
        assert DerivedKey(b"a" * KEY_SIZE) != "not a key"


class TestRandomness:
    def test_salt_size(self):
        assert len(generate_salt()) == SALT_SIZE

    def test_iv_size(self):
        assert len(generate_iv()) == IV_SIZE

    def test_salts_are_unique(self):
        assert len({generate_salt() for _ in range(50)}) == 50
