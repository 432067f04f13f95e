"""Reader layer for pull-based XML reading.

This module provides the lookahead-of-one reader core and the record reader
interface built on top of it.
"""

from .reader import SKIPPABLE_TOKEN_TYPES, XmlReader
from .record import (
    XmlRead,
    convert_value,
    from_str,
    parse_bool,
    require_field,
)

__all__ = [
    "SKIPPABLE_TOKEN_TYPES",
    "XmlReader",
    "XmlRead",
    "convert_value",
    "from_str",
    "parse_bool",
    "require_field",
]
