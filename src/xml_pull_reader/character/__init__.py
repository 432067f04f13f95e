"""Character processing layer for pull-based XML reading.

This module provides decoding of entity and character references found in
text runs and attribute values.
"""

from .unescape import (
    PREDEFINED_ENTITIES,
    unescape,
)

__all__ = [
    "PREDEFINED_ENTITIES",
    "unescape",
]
