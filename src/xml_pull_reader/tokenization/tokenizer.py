"""Strict pull tokenizer for XML documents and fragments.

This module implements a fail-fast XML tokenizer that turns a source string
into a one-directional stream of structural tokens. Attribute lists are
emitted as individual tokens between an element start and its ``>`` or ``/>``
marker, which is the shape the pull reader consumes.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

# Markup delimiters
CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"
COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
DOCTYPE_OPEN = "<!DOCTYPE"
PI_OPEN = "<?"
PI_CLOSE = "?>"
XML_WHITESPACE = " \t\r\n"

_NAME_PART = r"[^\W\d][\w.\-]*"
NAME_PATTERN = re.compile(rf"(?:(?P<prefix>{_NAME_PART}):)?(?P<local>{_NAME_PART})")
WHITESPACE_PATTERN = re.compile(r"[ \t\r\n]*")

logger = logging.getLogger(__name__)


class TokenType(Enum):
    """XML token types produced by the tokenizer."""

    DECLARATION = auto()             # <?xml version="1.0"?>
    PROCESSING_INSTRUCTION = auto()  # <?target content?>
    COMMENT = auto()                 # <!-- ... -->
    DOCTYPE = auto()                 # <!DOCTYPE ...>
    ELEMENT_START = auto()           # <name
    ATTRIBUTE = auto()               # name="value"
    ELEMENT_END = auto()             # > or /> or </name>
    TEXT = auto()                    # Character data, still escaped
    CDATA = auto()                   # <![CDATA[ ... ]]>


class ElementEnd(Enum):
    """Variants of the ELEMENT_END token."""

    OPEN = auto()   # > closing a start tag that has content
    EMPTY = auto()  # /> closing a self-closing tag
    CLOSE = auto()  # </name>


class TokenizerState(Enum):
    """State machine states for XML tokenization."""

    CONTENT = auto()     # Between markup: text, tags, comments
    ATTRIBUTES = auto()  # Inside a start tag, after its name
    FINISHED = auto()    # End of input reached or lexical error raised


@dataclass(frozen=True)
class TokenPosition:
    """Position information for XML tokens."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")


@dataclass(frozen=True)
class Token:
    """A single XML token.

    ``local`` and ``prefix`` hold the element or attribute name (the closing
    tag's name for ``ElementEnd.CLOSE``, the target for processing
    instructions). ``value`` holds attribute values, text, CDATA, comment and
    declaration content. ``end`` is only set on ELEMENT_END tokens.
    """

    type: TokenType
    position: TokenPosition
    local: str = ""
    prefix: str = ""
    value: str = ""
    end: Optional[ElementEnd] = None

    @property
    def name(self) -> str:
        """Qualified name as written in the source."""
        if self.prefix:
            return f"{self.prefix}:{self.local}"
        return self.local

    def is_element_end(self, *kinds: ElementEnd) -> bool:
        """Check for an ELEMENT_END token, optionally of the given kinds."""
        if self.type is not TokenType.ELEMENT_END:
            return False
        return not kinds or self.end in kinds


class XmlSyntaxError(Exception):
    """Lexical error reported by the tokenizer."""

    def __init__(self, message: str, position: TokenPosition) -> None:
        super().__init__(
            f"{message} at line {position.line}, column {position.column}"
        )
        self.message = message
        self.position = position


class Tokenizer:
    """Pull tokenizer over an in-memory XML string.

    Iterating yields :class:`Token` objects in source order. A lexical error
    raises :class:`XmlSyntaxError`, after which the tokenizer is finished and
    yields nothing more. Tag balance is not checked here.
    """

    def __init__(self, text: str) -> None:
        """Initialize the tokenizer.

        Args:
            text: Complete XML document or fragment
        """
        self.text = text
        self.state = TokenizerState.CONTENT
        self.pos = 0
        self._line = 1
        self._line_start = 0
        # Open elements; whitespace outside every element is not emitted
        self._depth = 0

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        if self.state is TokenizerState.FINISHED:
            raise StopIteration
        try:
            if self.state is TokenizerState.ATTRIBUTES:
                token: Optional[Token] = self._read_attribute_or_end()
            else:
                token = self._read_content()
        except XmlSyntaxError as e:
            self.state = TokenizerState.FINISHED
            logger.debug(
                "Tokenization stopped on syntax error",
                extra={
                    "component": "xml_tokenizer",
                    "error": e.message,
                    "offset": e.position.offset,
                }
            )
            raise
        if token is None:
            self.state = TokenizerState.FINISHED
            raise StopIteration
        return token

    def _position_at(self, offset: int) -> TokenPosition:
        """Line/column of ``offset``, which must not precede the cursor."""
        line = self._line + self.text.count("\n", self.pos, offset)
        newline = self.text.rfind("\n", self.pos, offset)
        line_start = newline + 1 if newline != -1 else self._line_start
        return TokenPosition(line, offset - line_start + 1, offset)

    def _move_to(self, offset: int) -> TokenPosition:
        """Advance the cursor to ``offset`` and return the new position."""
        position = self._position_at(offset)
        self._line = position.line
        self._line_start = offset - position.column + 1
        self.pos = offset
        return position

    def _here(self) -> TokenPosition:
        return TokenPosition(self._line, self.pos - self._line_start + 1, self.pos)

    def _error(self, message: str, offset: int) -> XmlSyntaxError:
        return XmlSyntaxError(message, self._position_at(offset))

    def _skip_whitespace(self, offset: int) -> int:
        match = WHITESPACE_PATTERN.match(self.text, offset)
        return match.end() if match else offset

    def _read_content(self) -> Optional[Token]:
        """Read the next token outside of a start tag."""
        text = self.text
        while self.pos < len(text):
            pos = self.pos
            start = self._here()

            if text[pos] != "<":
                end = text.find("<", pos)
                if end == -1:
                    end = len(text)
                run = text[pos:end]
                self._move_to(end)
                if self._depth == 0 and not run.strip(XML_WHITESPACE):
                    continue
                return Token(TokenType.TEXT, start, value=run)

            if text.startswith("</", pos):
                return self._read_close_tag(start)
            if text.startswith(COMMENT_OPEN, pos):
                return self._read_delimited(
                    TokenType.COMMENT, start, len(COMMENT_OPEN), COMMENT_CLOSE, "comment"
                )
            if text.startswith(CDATA_OPEN, pos):
                return self._read_delimited(
                    TokenType.CDATA, start, len(CDATA_OPEN), CDATA_CLOSE, "CDATA section"
                )
            if text.startswith(DOCTYPE_OPEN, pos):
                return self._read_doctype(start)
            if text.startswith(PI_OPEN, pos):
                return self._read_processing_instruction(start)
            if text.startswith("<!", pos):
                raise self._error("Unknown markup declaration", pos)
            return self._read_start_tag(start)

        return None

    def _read_delimited(
        self,
        token_type: TokenType,
        start: TokenPosition,
        open_length: int,
        close: str,
        what: str
    ) -> Token:
        body_start = start.offset + open_length
        body_end = self.text.find(close, body_start)
        if body_end == -1:
            raise self._error(f"Unterminated {what}", start.offset)
        value = self.text[body_start:body_end]
        self._move_to(body_end + len(close))
        return Token(token_type, start, value=value)

    def _find_subset_end(self, pos: int) -> int:
        """Return the offset of the ``]`` closing an internal subset, or -1.

        Quoted literals, comments and processing instructions are stepped over
        so a ``]`` inside them does not end the subset.
        """
        text = self.text
        while pos < len(text):
            char = text[pos]
            if char == "]":
                return pos
            if char in "\"'":
                close = text.find(char, pos + 1)
                if close == -1:
                    return -1
                pos = close + 1
            elif text.startswith(COMMENT_OPEN, pos):
                close = text.find(COMMENT_CLOSE, pos + len(COMMENT_OPEN))
                if close == -1:
                    return -1
                pos = close + len(COMMENT_CLOSE)
            elif text.startswith(PI_OPEN, pos):
                close = text.find(PI_CLOSE, pos + len(PI_OPEN))
                if close == -1:
                    return -1
                pos = close + len(PI_CLOSE)
            else:
                pos += 1
        return -1

    def _read_doctype(self, start: TokenPosition) -> Token:
        text = self.text
        body_start = start.offset + len(DOCTYPE_OPEN)
        end = text.find(">", body_start)
        bracket = text.find("[", body_start)
        if bracket != -1 and (end == -1 or bracket < end):
            # Internal subset may itself contain '>'
            subset_end = self._find_subset_end(bracket + 1)
            end = text.find(">", subset_end) if subset_end != -1 else -1
        if end == -1:
            raise self._error("Unterminated DOCTYPE declaration", start.offset)
        value = text[body_start:end].strip(XML_WHITESPACE)
        self._move_to(end + 1)
        return Token(TokenType.DOCTYPE, start, value=value)

    def _read_processing_instruction(self, start: TokenPosition) -> Token:
        text = self.text
        match = NAME_PATTERN.match(text, start.offset + len(PI_OPEN))
        if not match:
            raise self._error("Invalid processing instruction target", start.offset)
        end = text.find(PI_CLOSE, match.end())
        if end == -1:
            raise self._error("Unterminated processing instruction", start.offset)
        target = match.group(0)
        content = text[match.end():end].strip(XML_WHITESPACE)
        self._move_to(end + len(PI_CLOSE))
        if target.lower() == "xml":
            return Token(TokenType.DECLARATION, start, value=content)
        return Token(
            TokenType.PROCESSING_INSTRUCTION, start, local=target, value=content
        )

    def _read_start_tag(self, start: TokenPosition) -> Token:
        match = NAME_PATTERN.match(self.text, start.offset + 1)
        if not match:
            raise self._error("Invalid element name", start.offset + 1)
        self._move_to(match.end())
        self.state = TokenizerState.ATTRIBUTES
        return Token(
            TokenType.ELEMENT_START,
            start,
            local=match.group("local"),
            prefix=match.group("prefix") or "",
        )

    def _read_close_tag(self, start: TokenPosition) -> Token:
        text = self.text
        match = NAME_PATTERN.match(text, start.offset + 2)
        if not match:
            raise self._error("Invalid closing tag name", start.offset + 2)
        after = self._skip_whitespace(match.end())
        if not text.startswith(">", after):
            raise self._error("Expected '>' to end closing tag", after)
        self._move_to(after + 1)
        self._depth = max(0, self._depth - 1)
        return Token(
            TokenType.ELEMENT_END,
            start,
            local=match.group("local"),
            prefix=match.group("prefix") or "",
            end=ElementEnd.CLOSE,
        )

    def _read_attribute_or_end(self) -> Token:
        """Read the next attribute, or the marker ending the start tag."""
        text = self.text
        begin = self.pos
        offset = self._skip_whitespace(begin)
        if offset >= len(text):
            raise self._error("Unexpected end of input inside tag", offset)
        start = self._move_to(offset)

        if text[offset] == ">":
            self._move_to(offset + 1)
            self.state = TokenizerState.CONTENT
            self._depth += 1
            return Token(TokenType.ELEMENT_END, start, end=ElementEnd.OPEN)
        if text.startswith("/>", offset):
            self._move_to(offset + 2)
            self.state = TokenizerState.CONTENT
            return Token(TokenType.ELEMENT_END, start, end=ElementEnd.EMPTY)

        if offset == begin:
            raise self._error("Expected whitespace before attribute", offset)
        match = NAME_PATTERN.match(text, offset)
        if not match:
            raise self._error("Invalid attribute name", offset)

        equals = self._skip_whitespace(match.end())
        if not text.startswith("=", equals):
            raise self._error("Expected '=' after attribute name", equals)
        quote_at = self._skip_whitespace(equals + 1)
        if quote_at >= len(text) or text[quote_at] not in "\"'":
            raise self._error("Expected quoted attribute value", quote_at)

        quote = text[quote_at]
        close = text.find(quote, quote_at + 1)
        if close == -1:
            raise self._error("Unterminated attribute value", quote_at)
        value = text[quote_at + 1:close]
        if "<" in value:
            raise self._error(
                "'<' is not allowed in attribute values",
                quote_at + 1 + value.index("<"),
            )
        self._move_to(close + 1)
        return Token(
            TokenType.ATTRIBUTE,
            start,
            local=match.group("local"),
            prefix=match.group("prefix") or "",
            value=value,
        )
