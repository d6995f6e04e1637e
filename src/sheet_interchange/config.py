"""Configuration management for sheet interchange.

This module provides centralized configuration using pydantic-settings.
All configuration options can be set via environment variables with the
SHEETS_ prefix, or via a .env file in the working directory.

Environment Variables:
    SHEETS_DEFAULT_ENCODING: Encoding for writing and decoding fallback (default: utf-8)
    SHEETS_MIN_ENCODING_CONFIDENCE: Minimum chardet confidence to trust (default: 0.5)
    SHEETS_MAX_INPUT_SIZE_MB: Maximum byte source size in MB (default: 10)
    SHEETS_LINE_TERMINATOR: Row terminator for delimited output (default: CRLF)
    SHEETS_QUOTE_ON_WRITE: Quote fields that need it when writing (default: true)
    SHEETS_ALLOW_MULTILINE_FIELDS: Let quoted fields span lines (default: true)
    SHEETS_ENFORCE_EXTENSION_MATCH: Reject sources named for another format (default: true)
    SHEETS_SPREADSHEET_NAMESPACE: Expected root namespace of XML spreadsheets
    SHEETS_LOG_LEVEL: Logging level (default: INFO)
    SHEETS_DEBUG: Enable debug mode (default: false)
"""

import logging
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SPREADSHEET_2003_NAMESPACE = "urn:schemas-microsoft-com:office:spreadsheet"


class Settings(BaseSettings):
    """Library settings loaded from environment variables.

    Example .env file:
        SHEETS_LINE_TERMINATOR="\\n"
        SHEETS_QUOTE_ON_WRITE=false
        SHEETS_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Byte Source Settings
    # =========================================================================

    default_encoding: str = "utf-8"
    """Encoding used for output and as the last decoding fallback."""

    min_encoding_confidence: float = 0.5
    """Minimum chardet confidence before a detected encoding is used (0.0-1.0)."""

    max_input_size_mb: int = 10
    """Maximum size of a byte source in megabytes."""

    enforce_extension_match: bool = True
    """Reject byte sources whose extension names a different known format."""

    # =========================================================================
    # Delimited Text Settings
    # =========================================================================

    line_terminator: str = "\r\n"
    """Terminator appended after each written row."""

    quote_on_write: bool = True
    """Quote fields containing the delimiter, a quote or a line break on write."""

    allow_multiline_fields: bool = True
    """Let a quoted field continue onto following lines until it closes."""

    # =========================================================================
    # Markup Settings
    # =========================================================================

    spreadsheet_namespace: str = SPREADSHEET_2003_NAMESPACE
    """Namespace the root element of an XML spreadsheet must declare."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    debug: bool = False
    """Enable debug mode with additional logging."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return upper_v

    @field_validator("min_encoding_confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        """Validate confidence is between 0.0 and 1.0."""
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"Confidence must be between 0.0 and 1.0, got {v}")
        return v

    @field_validator("max_input_size_mb")
    @classmethod
    def validate_input_size(cls, v: int) -> int:
        """Validate input size is positive and reasonable."""
        if not 1 <= v <= 500:
            raise ValueError(f"max_input_size_mb must be between 1 and 500, got {v}")
        return v

    @field_validator("line_terminator")
    @classmethod
    def validate_line_terminator(cls, v: str) -> str:
        if v not in ("\r\n", "\n"):
            raise ValueError("line_terminator must be CRLF or LF")
        return v

    @field_validator("default_encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Validate the encoding is known to Python's codec registry."""
        try:
            "".encode(v)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {v}") from e
        return v

    @field_validator("spreadsheet_namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("spreadsheet_namespace must be a non-empty string")
        return v.strip()

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def max_input_size_bytes(self) -> int:
        """Get max input size in bytes."""
        return self.max_input_size_mb * 1024 * 1024

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        level: int = getattr(logging, self.log_level)
        return level

    def to_safe_dict(self) -> dict[str, Any]:
        """Convert settings to a plain dictionary for logging."""
        return {
            "default_encoding": self.default_encoding,
            "min_encoding_confidence": self.min_encoding_confidence,
            "max_input_size_mb": self.max_input_size_mb,
            "enforce_extension_match": self.enforce_extension_match,
            "line_terminator": repr(self.line_terminator),
            "quote_on_write": self.quote_on_write,
            "allow_multiline_fields": self.allow_multiline_fields,
            "spreadsheet_namespace": self.spreadsheet_namespace,
            "log_level": self.log_level,
            "debug": self.debug,
        }


settings = Settings()
