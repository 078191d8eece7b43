"""Wire format of a sealed package.

A package is ``base64(salt || iv || ciphertext)`` where ``salt`` is 16 bytes,
``iv`` is 12 bytes and ``ciphertext`` carries the 16-byte GCM tag at its end.
Fixed header widths mean no length prefixes are needed.
"""

import base64
from dataclasses import dataclass, field

from .exceptions import DECRYPTION_FAILED_MESSAGE, MalformedPackageError
from .keys import IV_SIZE, SALT_SIZE

TAG_SIZE = 16  # 128 bits (authentication tag)
HEADER_SIZE = SALT_SIZE + IV_SIZE
MIN_PACKAGE_SIZE = HEADER_SIZE + TAG_SIZE


@dataclass(frozen=True)
class SealedPackage:
    """Decoded components of a sealed package."""

    salt: bytes = field(repr=False)
    iv: bytes = field(repr=False)
    ciphertext: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if len(self.salt) != SALT_SIZE or len(self.iv) != IV_SIZE:
            raise MalformedPackageError(DECRYPTION_FAILED_MESSAGE)
        if len(self.ciphertext) < TAG_SIZE:
            raise MalformedPackageError(DECRYPTION_FAILED_MESSAGE)

    def __repr__(self) -> str:
        return f"SealedPackage(ciphertext_size={len(self.ciphertext)})"

    @property
    def size(self) -> int:
        """Total size in bytes before base64 encoding."""
        return HEADER_SIZE + len(self.ciphertext)

    def to_bytes(self) -> bytes:
        return self.salt + self.iv + self.ciphertext

    def to_string(self) -> str:
        """Encode as the opaque base64 string stored by the server."""
        return base64.b64encode(self.to_bytes()).decode("ascii")

    @classmethod
    def from_bytes(cls, raw: bytes) -> "SealedPackage":
        if len(raw) < MIN_PACKAGE_SIZE:
            raise MalformedPackageError(DECRYPTION_FAILED_MESSAGE)
        return cls(
            salt=raw[:SALT_SIZE],
            iv=raw[SALT_SIZE:HEADER_SIZE],
            ciphertext=raw[HEADER_SIZE:],
        )

    @classmethod
    def from_string(cls, value: str) -> "SealedPackage":
        """Decode a base64 package string.

        Raises:
            MalformedPackageError: If ``value`` is not a string, is not valid
                base64, or is too short to hold the header and tag.
        """
        if not isinstance(value, str):
            raise MalformedPackageError(DECRYPTION_FAILED_MESSAGE)
        try:
            raw = base64.b64decode(value.encode("ascii"), validate=True)
        except ValueError:
            raise MalformedPackageError(DECRYPTION_FAILED_MESSAGE) from None
        return cls.from_bytes(raw)
