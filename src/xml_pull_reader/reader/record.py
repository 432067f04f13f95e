"""Record reader interface and conversion helpers.

A record reader is the per-type traversal plan that drives an
:class:`XmlReader` to reconstruct one typed value. Implementations may be
hand-written or generated; both implement :class:`XmlRead`.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, Type, TypeVar

from xml_pull_reader.shared import MissingField, ReaderConfig, ValueConversionError

from .reader import XmlReader

T = TypeVar("T")
R = TypeVar("R", bound="XmlRead")

TRUE_VALUES = frozenset({"true", "t", "yes", "y", "1"})
FALSE_VALUES = frozenset({"false", "f", "no", "n", "0"})


class XmlRead(ABC):
    """Interface for types that can be read from an :class:`XmlReader`."""

    @classmethod
    @abstractmethod
    def from_reader(cls: Type[R], reader: XmlReader) -> R:
        """Read one value, starting before the element's start token."""

    @classmethod
    def from_str(cls: Type[R], text: str, config: Optional[ReaderConfig] = None) -> R:
        """Read one value from an XML string."""
        return cls.from_reader(XmlReader(text, config))


def from_str(
    record_type: Type[R],
    text: str,
    config: Optional[ReaderConfig] = None
) -> R:
    """Read a ``record_type`` value from an XML string.

    Args:
        record_type: An :class:`XmlRead` implementation
        text: XML document or fragment
        config: Optional reader configuration

    Returns:
        The value produced by ``record_type.from_reader``
    """
    return record_type.from_reader(XmlReader(text, config))


def require_field(value: Optional[T], name: str, field: str) -> T:
    """Return ``value``, or raise MissingField if it was never read."""
    if value is None:
        raise MissingField(name=name, field=field)
    return value


def convert_value(
    text: str,
    converter: Callable[[str], T],
    name: str,
    field: str
) -> T:
    """Convert attribute or text content with ``converter``.

    ``ValueError`` and ``TypeError`` from the converter are raised as
    :class:`ValueConversionError`, chained to the original exception.
    """
    try:
        return converter(text)
    except (ValueError, TypeError) as e:
        raise ValueConversionError(name=name, field=field, value=text) from e


def parse_bool(text: str) -> bool:
    """Parse the usual textual spellings of a boolean, case-insensitively."""
    lowered = text.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value: {text!r}")
