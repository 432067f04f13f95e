"""Shared utilities for pull-based XML reading.

This module provides the error taxonomy, configuration objects and logging
helpers used across the tokenization, character and reader layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ReaderConfig,
)
from .errors import (
    EscapeError,
    LexError,
    MissingField,
    TagMismatch,
    UnexpectedEof,
    UnexpectedToken,
    UnrecognizedSymbol,
    UnterminatedEntity,
    ValueConversionError,
    XmlError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ReaderConfig",
    "EscapeError",
    "LexError",
    "MissingField",
    "TagMismatch",
    "UnexpectedEof",
    "UnexpectedToken",
    "UnrecognizedSymbol",
    "UnterminatedEntity",
    "ValueConversionError",
    "XmlError",
    "CorrelationLogger",
    "get_logger",
]
