"""Library settings."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Characters that are safe in a file or folder name on every supported platform
DEFAULT_TOKEN_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890[]-_+=#"

# Directory extensions treated as opaque bundles during enumeration
DEFAULT_PACKAGE_EXTENSIONS = [
    ".app",
    ".bundle",
    ".framework",
    ".kext",
    ".pkg",
    ".plugin",
    ".rtfd",
    ".xcodeproj",
]


class LocationSettings(BaseModel):
    """Tunable behaviour for unique names, enumeration and alias files."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    default_prefix: str = Field(default="tmp", alias="defaultPrefix")
    token_length: int = Field(default=8, alias="tokenLength")
    max_attempts: int = Field(default=1000, alias="maxAttempts")
    token_alphabet: str = Field(default=DEFAULT_TOKEN_ALPHABET, alias="tokenAlphabet")
    package_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PACKAGE_EXTENSIONS), alias="packageExtensions"
    )
    alias_max_bytes: int = Field(default=64 * 1024, alias="aliasMaxBytes")

    @field_validator("token_length", "max_attempts", "alias_max_bytes")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value

    @field_validator("token_alphabet")
    @classmethod
    def _safe_alphabet(cls, value: str) -> str:
        if not value:
            raise ValueError("token alphabet cannot be empty")
        if "/" in value or "\0" in value:
            raise ValueError("token alphabet cannot contain path separators")
        return value

    @field_validator("package_extensions")
    @classmethod
    def _dotted(cls, value: list[str]) -> list[str]:
        return [ext if ext.startswith(".") else f".{ext}" for ext in value]

    @classmethod
    def create_default(cls) -> LocationSettings:
        """Create settings with the built-in defaults."""
        return cls()

    @classmethod
    def from_file(cls, path: Path) -> LocationSettings:
        """Load settings from a YAML file.

        Missing keys keep their defaults.

        Args:
            path: Path to the YAML settings file.

        Returns:
            Parsed LocationSettings.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the YAML is invalid or a value fails validation.
        """
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")

        try:
            data = yaml.safe_load(path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid settings file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} must contain a mapping")
        return cls.model_validate(data)

    def is_package_name(self, name: str) -> bool:
        """Check whether a directory name denotes an opaque package."""
        lowered = name.lower()
        return any(
            lowered.endswith(ext.lower()) and lowered != ext.lower() for ext in self.package_extensions
        )
