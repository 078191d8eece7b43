"""Custom exceptions for DailyVault crypto."""


class DailyVaultCryptoError(Exception):
    """Base exception for all DailyVault crypto errors."""


class MissingSecretError(DailyVaultCryptoError):
    """Raised when no secret is available to seal or open a package."""


class KeyDerivationError(DailyVaultCryptoError):
    """Raised when key derivation fails."""


class InvalidSecretError(KeyDerivationError, MissingSecretError):
    """Raised when the secret handed to the KDF is empty or not a string."""


class DecryptionError(DailyVaultCryptoError):
    """Raised when decryption fails (wrong key, corrupted data, or tampered data)."""


class MalformedPackageError(DecryptionError):
    """Raised when a sealed package is not valid base64 or is too short."""


# Shared by every decryption failure so callers cannot tell the causes apart.
DECRYPTION_FAILED_MESSAGE = "Unable to decrypt data"
