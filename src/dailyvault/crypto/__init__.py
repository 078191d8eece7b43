"""Crypto module for DailyVault end-to-end encryption.

Values are sealed on the client before they reach the API and opened after
they come back; the server only ever stores opaque base64 packages.
"""

from dailyvault.crypto.codec import SealedBoxCodec, get_default_codec, seal, unseal
from dailyvault.crypto.exceptions import (
    DailyVaultCryptoError,
    DecryptionError,
    InvalidSecretError,
    KeyDerivationError,
    MalformedPackageError,
    MissingSecretError,
)
from dailyvault.crypto.fields import (
    DECRYPT_FAILED_PLACEHOLDER,
    DIARY_SCHEMA,
    SUBTASK_SCHEMA,
    TASK_SCHEMA,
    EncryptedField,
    FieldKind,
    RecordCipher,
    RecordSchema,
)
from dailyvault.crypto.keys import PBKDF2_ITERATIONS, DerivedKey, derive_key
from dailyvault.crypto.package import SealedPackage

__all__ = [
    "SealedBoxCodec",
    "SealedPackage",
    "DerivedKey",
    "derive_key",
    "get_default_codec",
    "seal",
    "unseal",
    "PBKDF2_ITERATIONS",
    "RecordCipher",
    "RecordSchema",
    "EncryptedField",
    "FieldKind",
    "TASK_SCHEMA",
    "SUBTASK_SCHEMA",
    "DIARY_SCHEMA",
    "DECRYPT_FAILED_PLACEHOLDER",
    "DailyVaultCryptoError",
    "MissingSecretError",
    "KeyDerivationError",
    "InvalidSecretError",
    "DecryptionError",
    "MalformedPackageError",
]
