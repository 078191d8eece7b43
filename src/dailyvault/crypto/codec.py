"""AES-256-GCM sealed boxes keyed by a PBKDF2-derived key.

Every call to :meth:`SealedBoxCodec.seal` draws a fresh salt and nonce, so the
same ``(secret, value)`` pair never produces the same package twice. Opening
fails closed: a wrong secret, a tampered or truncated package, or a payload
that is not valid JSON all raise :class:`DecryptionError` with one generic
message.
"""

import asyncio
import json
import logging
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .exceptions import (
    DECRYPTION_FAILED_MESSAGE,
    DecryptionError,
    KeyDerivationError,
    MalformedPackageError,
    MissingSecretError,
)
from .keys import (
    MIN_PBKDF2_ITERATIONS,
    PBKDF2_ITERATIONS,
    derive_key,
    generate_iv,
    generate_salt,
)
from .package import SealedPackage

logger = logging.getLogger(__name__)


def _require_secret(secret: str | None, action: str) -> None:
    if not secret:
        raise MissingSecretError(f"Secret required for {action}")


class SealedBoxCodec:
    """Seal and open values for a single deployment-wide iteration count."""

    def __init__(self, iterations: int = PBKDF2_ITERATIONS):
        if iterations < MIN_PBKDF2_ITERATIONS:
            raise KeyDerivationError(
                f"Iteration count must be at least {MIN_PBKDF2_ITERATIONS}, got {iterations}"
            )
        self.iterations = iterations

    def __repr__(self) -> str:
        return f"SealedBoxCodec(iterations={self.iterations})"

    # ------------------------------------------------------------------
    # Byte level
    # ------------------------------------------------------------------

    def seal_bytes(self, secret: str, data: bytes) -> str:
        """Encrypt raw bytes and return the base64 package."""
        _require_secret(secret, "encryption")

        salt = generate_salt()
        iv = generate_iv()
        key = derive_key(secret, salt, self.iterations)
        ciphertext = AESGCM(key.key_bytes).encrypt(iv, data, associated_data=None)
        return SealedPackage(salt=salt, iv=iv, ciphertext=ciphertext).to_string()

    def open_bytes(self, secret: str, package: str) -> bytes:
        """Decrypt a base64 package and return the raw plaintext bytes."""
        _require_secret(secret, "decryption")

        try:
            sealed = SealedPackage.from_string(package)
        except MalformedPackageError:
            logger.debug("Rejected sealed package: malformed")
            raise

        key = derive_key(secret, sealed.salt, self.iterations)
        try:
            return AESGCM(key.key_bytes).decrypt(
                sealed.iv, sealed.ciphertext, associated_data=None
            )
        except InvalidTag:
            logger.debug("Rejected sealed package: authentication failed")
            raise DecryptionError(DECRYPTION_FAILED_MESSAGE) from None

    # ------------------------------------------------------------------
    # Raw strings
    # ------------------------------------------------------------------

    def seal_text(self, secret: str, text: str) -> str:
        """Encrypt a string as UTF-8 without a JSON layer.

        Raises:
            MissingSecretError: If ``secret`` is empty.
            TypeError: If ``text`` is not a string.
        """
        if not isinstance(text, str):
            raise TypeError(f"seal_text expects str, got {type(text).__name__}")
        return self.seal_bytes(secret, text.encode("utf-8"))

    def open_text(self, secret: str, package: str) -> str:
        """Decrypt a package produced by :meth:`seal_text`."""
        raw = self.open_bytes(secret, package)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Rejected sealed package: payload is not UTF-8")
            raise DecryptionError(DECRYPTION_FAILED_MESSAGE) from None

    # ------------------------------------------------------------------
    # JSON values
    # ------------------------------------------------------------------

    def seal(self, secret: str, value: Any) -> str:
        """Serialize ``value`` as JSON and encrypt it.

        Strings, numbers, lists and dicts are all accepted; the encoding
        matches ``JSON.stringify`` so the web client can open the result.

        Raises:
            MissingSecretError: If ``secret`` is empty.
            TypeError: If ``value`` is not JSON-serializable.
            ValueError: If ``value`` contains NaN or infinity.
        """
        _require_secret(secret, "encryption")
        plaintext = json.dumps(
            value, ensure_ascii=False, separators=(",", ":"), allow_nan=False
        )
        return self.seal_text(secret, plaintext)

    def open(self, secret: str, package: str) -> Any:
        """Decrypt a package produced by :meth:`seal` and parse the JSON value.

        Raises:
            MissingSecretError: If ``secret`` is empty.
            DecryptionError: On a wrong secret, tampered or malformed package,
                or a payload that is not JSON.
        """
        plaintext = self.open_text(secret, package)
        try:
            return json.loads(plaintext)
        except json.JSONDecodeError:
            # JSONDecodeError.doc holds the decrypted text; do not chain it.
            logger.debug("Rejected sealed package: payload is not JSON")
            raise DecryptionError(DECRYPTION_FAILED_MESSAGE) from None

    # ------------------------------------------------------------------
    # Async variants
    # ------------------------------------------------------------------

    async def seal_async(self, secret: str, value: Any) -> str:
        return await asyncio.to_thread(self.seal, secret, value)

    async def open_async(self, secret: str, package: str) -> Any:
        return await asyncio.to_thread(self.open, secret, package)

    async def seal_text_async(self, secret: str, text: str) -> str:
        return await asyncio.to_thread(self.seal_text, secret, text)

    async def open_text_async(self, secret: str, package: str) -> str:
        return await asyncio.to_thread(self.open_text, secret, package)


_default_codec = SealedBoxCodec()


def get_default_codec() -> SealedBoxCodec:
    """Return the codec configured with the default iteration count."""
    return _default_codec


def seal(secret: str, value: Any) -> str:
    """Seal ``value`` with the default codec."""
    return _default_codec.seal(secret, value)


def unseal(secret: str, package: str) -> Any:
    """Open ``package`` with the default codec."""
    return _default_codec.open(secret, package)
