"""
Configuration — typed, validated settings loaded from environment/.env.

Uses pydantic-settings to:
  - Load from environment variables (12-factor app)
  - Fall back to .env file
  - Validate types and constraints at startup

Architecture: Only AppSettings is a BaseSettings instance. SubjectSettings is a
plain BaseModel populated by AppSettings via env_nested_delimiter="__", so the
env var CSR_SUBJECT__COMMON_NAME maps to subject.common_name, etc.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from csr_builder.domain.algorithms import KeyAlgorithm, SignatureAlgorithm
from csr_builder.domain.models import DistinguishedName

# Resolve the .env file relative to the project root (two levels above this file),
# so settings load correctly regardless of the working directory at runtime.
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class SubjectSettings(BaseModel):
    """
    Subject distinguished name of the request.

    Every attribute is optional; unset attributes are left out of the
    encoded name rather than encoded as empty strings.
    """

    country: str | None = Field(default=None, description="Two-letter country code (C)")
    state: str | None = Field(default=None, description="State or province (ST)")
    locality: str | None = Field(default=None, description="Locality / city (L)")
    organization: str | None = Field(default=None, description="Organization (O)")
    organizational_unit: str | None = Field(default=None, description="Organizational unit (OU)")
    common_name: str | None = Field(default=None, description="Common name (CN)")

    def to_distinguished_name(self) -> DistinguishedName:
        return DistinguishedName(**self.model_dump())


class AppSettings(BaseSettings):
    """
    Root application settings.

    Load order (highest priority first):
      1. Environment variables (CSR_ prefix)
      2. .env file
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="CSR_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    subject: SubjectSettings = Field(default_factory=lambda: SubjectSettings())
    key_algorithm: KeyAlgorithm = Field(default=KeyAlgorithm.RSA)
    signature_algorithm: SignatureAlgorithm = Field(default=SignatureAlgorithm.SHA256_WITH_RSA)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalize to upper case and reject unknown level names."""
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level {value!r}, expected one of {sorted(_LOG_LEVELS)}")
        return level

    @model_validator(mode="after")
    def check_algorithm_pair(self) -> AppSettings:
        """Reject a signature algorithm that cannot sign for the configured key algorithm."""
        if self.signature_algorithm.family != self.key_algorithm.family:
            raise ValueError(
                f"Signature algorithm {self.signature_algorithm.value} "
                f"does not fit key algorithm {self.key_algorithm.value}"
            )
        return self
