"""PBKDF2 key derivation for sealed packages."""

import hashlib
import hmac
import os
from dataclasses import dataclass, field

from .exceptions import InvalidSecretError, KeyDerivationError

# AES-256 requires 256-bit (32-byte) keys
KEY_SIZE = 32

# PBKDF2 parameters. Iteration count is not stored in the package, so every
# client of a deployment must use the same value to open what it sealed.
PBKDF2_ITERATIONS = 250_000
MIN_PBKDF2_ITERATIONS = 200_000
SALT_SIZE = 16  # 128 bits
IV_SIZE = 12  # 96 bits (recommended for GCM)


@dataclass(frozen=True)
class DerivedKey:
    """A 256-bit AES key derived from a secret and a salt."""

    key_bytes: bytes = field(repr=False)

    def __post_init__(self) -> None:
        """Validate key size."""
        if len(self.key_bytes) != KEY_SIZE:
            raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(self.key_bytes)}")

    def __repr__(self) -> str:
        """String representation (hides key material)."""
        return "DerivedKey(<hidden>)"

    def __eq__(self, other: object) -> bool:
        """Compare keys in constant time."""
        if not isinstance(other, DerivedKey):
            return NotImplemented
        return hmac.compare_digest(self.key_bytes, other.key_bytes)

    def __hash__(self) -> int:
        return hash(hashlib.sha256(self.key_bytes).digest())

    def __reduce__(self):
        raise TypeError("DerivedKey cannot be serialized")


def derive_key(
    secret: str, salt: bytes, iterations: int = PBKDF2_ITERATIONS
) -> DerivedKey:
    """Derive an AES-256 key from ``secret`` and ``salt`` with PBKDF2-HMAC-SHA256.

    The derivation is deterministic: the same ``(secret, salt, iterations)``
    always yields the same key.

    Raises:
        InvalidSecretError: If ``secret`` is empty or not a string.
        KeyDerivationError: If ``salt`` or ``iterations`` are out of range.
    """
    if not isinstance(secret, str) or not secret:
        raise InvalidSecretError("A non-empty secret is required for key derivation")
    if not isinstance(salt, (bytes, bytearray)) or len(salt) != SALT_SIZE:
        raise KeyDerivationError(f"Salt must be exactly {SALT_SIZE} bytes")
    if iterations < MIN_PBKDF2_ITERATIONS:
        raise KeyDerivationError(
            f"Iteration count must be at least {MIN_PBKDF2_ITERATIONS}"
        )

    key_bytes = hashlib.pbkdf2_hmac(
        "sha256",
        secret.encode("utf-8"),
        bytes(salt),
        iterations,
        dklen=KEY_SIZE,
    )
    return DerivedKey(key_bytes=key_bytes)


def generate_salt() -> bytes:
    """Generate a random salt for PBKDF2."""
    return os.urandom(SALT_SIZE)


def generate_iv() -> bytes:
    """Generate a random GCM nonce."""
    return os.urandom(IV_SIZE)
