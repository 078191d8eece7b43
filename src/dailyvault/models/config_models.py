"""Configuration models for DailyVault."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from dailyvault.crypto.fields import DECRYPT_FAILED_PLACEHOLDER
from dailyvault.crypto.keys import MIN_PBKDF2_ITERATIONS, PBKDF2_ITERATIONS


class APIConfig(BaseModel):
    """API configuration."""

    endpoint: str = Field(default="http://localhost:5000/api")
    timeout: int = Field(default=30)
    retry: int = Field(default=3)

    @field_validator("endpoint")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class CryptoConfig(BaseModel):
    """End-to-end encryption configuration.

    ``kdf_iterations`` is not recorded inside sealed packages, so it must
    match across every client of a deployment.
    """

    kdf_iterations: int = Field(default=PBKDF2_ITERATIONS, ge=MIN_PBKDF2_ITERATIONS)
    placeholder: str = Field(default=DECRYPT_FAILED_PLACEHOLDER)


class OutputConfig(BaseModel):
    """Output configuration."""

    format: str = Field(default="table")

    @field_validator("format")
    @classmethod
    def validate_format(cls, value: str) -> str:
        if value not in ("table", "json"):
            raise ValueError("Output format must be 'table' or 'json'")
        return value


class AppConfig(BaseModel):
    """Main configuration."""

    api: APIConfig = Field(default_factory=APIConfig)
    crypto: CryptoConfig = Field(default_factory=CryptoConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
