"""Configuration classes for pull-based XML reading.

This module provides the configuration object that controls the reader's
tolerance for incidental whitespace, attribute unescaping and logging.
"""

import json
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, List, Optional


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ReaderConfig:
    """Configuration for :class:`~xml_pull_reader.reader.XmlReader`.

    Frozen so a single instance can be shared between readers.
    """

    correlation_id: Optional[str] = None
    component: str = "xml_reader"

    # Unescape attribute values in read_attribute / find_attribute_peek
    unescape_attributes: bool = True

    # Whitespace-only text between siblings is skipped by skip_to_children
    skip_whitespace_text: bool = True

    # Emit DEBUG records for every subtree skipped by the reader
    log_skipped_elements: bool = True

    def __post_init__(self) -> None:
        """Validate reader configuration."""
        if not self.component:
            raise ValueError("component must be a non-empty string")
        if self.correlation_id is not None and not self.correlation_id.strip():
            raise ValueError("correlation_id must be None or a non-blank string")

    @classmethod
    def lenient(cls, correlation_id: Optional[str] = None) -> "ReaderConfig":
        """Create the default configuration, tolerant of formatting whitespace."""
        return cls(correlation_id=correlation_id)

    @classmethod
    def strict(cls, correlation_id: Optional[str] = None) -> "ReaderConfig":
        """Create a configuration exposing raw token values and rejecting stray text."""
        return cls(
            correlation_id=correlation_id,
            unescape_attributes=False,
            skip_whitespace_text=False,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReaderConfig":
        """Create configuration from dictionary.

        Raises:
            ConfigValidationError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=[f"Valid keys are: {', '.join(sorted(known))}"],
            )
        try:
            return cls(**data)
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "ReaderConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))
