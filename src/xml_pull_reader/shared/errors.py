"""Error taxonomy for pull-based XML reading.

Every error raised by the reader, the unescaper and the record layer derives
from :class:`XmlError`. All of them are fatal to the current parse: once one
has been raised the reader's position is undefined and it must not be reused.
"""

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from xml_pull_reader.tokenization.tokenizer import TokenPosition


class XmlError(Exception):
    """Base exception for all reader errors."""


class UnexpectedEof(XmlError):
    """Raised when the token stream ends while more tokens are expected."""

    def __init__(self, message: str = "Unexpected end of XML input") -> None:
        super().__init__(message)


class UnexpectedToken(XmlError):
    """Raised when a token is not valid in the reader's current state."""

    def __init__(self, token: Any) -> None:
        super().__init__(f"Unexpected token: {token!r}")
        self.token = token


class TagMismatch(XmlError):
    """Raised when a closing tag does not name the element the caller expected."""

    def __init__(self, expected: str, found: str) -> None:
        super().__init__(
            f"Tag mismatch: expected </{expected}>, found </{found}>"
        )
        self.expected = expected
        self.found = found


class EscapeError(XmlError):
    """Base exception for malformed character or entity references."""


class UnterminatedEntity(EscapeError):
    """Raised when an ``&`` is not followed by a terminating ``;``."""

    def __init__(self, entity: str) -> None:
        super().__init__(f"Unterminated entity reference: {entity!r}")
        self.entity = entity


class UnrecognizedSymbol(EscapeError):
    """Raised for unknown entity names and invalid character references."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Unrecognized symbol: &{symbol};")
        self.symbol = symbol


class LexError(XmlError):
    """Raised when the tokenizer reports a lexical error.

    The tokenizer's own exception is kept in ``source`` and is also chained
    as ``__cause__`` by the reader.
    """

    def __init__(self, source: Exception) -> None:
        super().__init__(f"Lexical error: {source}")
        self.source = source

    @property
    def position(self) -> Optional["TokenPosition"]:
        """Position reported by the tokenizer, if any."""
        return getattr(self.source, "position", None)


class MissingField(XmlError):
    """Raised by record readers when a required field was never read."""

    def __init__(self, name: str, field: str) -> None:
        super().__init__(f"Missing field {field!r} when reading {name!r}")
        self.name = name
        self.field = field


class ValueConversionError(XmlError):
    """Raised when text cannot be converted to a field's target type."""

    def __init__(self, name: str, field: str, value: str) -> None:
        super().__init__(
            f"Cannot convert {value!r} for field {field!r} of {name!r}"
        )
        self.name = name
        self.field = field
        self.value = value
