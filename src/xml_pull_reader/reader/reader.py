"""Pull-based XML reader with one token of lookahead.

This module implements the traversal primitives a record reader composes to
reconstruct typed values from XML: attribute iteration, text extraction,
tag-validated close matching, subtree skipping and child discovery. The
document is walked once, left to right, without building a tree.
"""

import logging
from typing import Iterable, Iterator, Optional, Tuple, Union

from xml_pull_reader.character import unescape
from xml_pull_reader.shared import (
    LexError,
    ReaderConfig,
    TagMismatch,
    UnexpectedEof,
    UnexpectedToken,
    get_logger,
)
from xml_pull_reader.tokenization import (
    ElementEnd,
    Token,
    Tokenizer,
    TokenType,
    XmlSyntaxError,
)
from xml_pull_reader.tokenization.tokenizer import XML_WHITESPACE

# Tokens carrying no document structure, ignored between elements
SKIPPABLE_TOKEN_TYPES = frozenset({
    TokenType.DECLARATION,
    TokenType.PROCESSING_INSTRUCTION,
    TokenType.COMMENT,
    TokenType.DOCTYPE,
})


class XmlReader:
    """Cursor over a token stream with one token of lookahead.

    Every operation either returns normally or raises an
    :class:`~xml_pull_reader.shared.errors.XmlError`. After an error the
    reader's position is undefined and the reader must be discarded.

    Example:
        >>> reader = XmlReader('<item id="7">text</item>')
        >>> reader.advance().local
        'item'
        >>> reader.read_attribute()
        ('id', '7')
        >>> reader.read_attribute() is None
        True
        >>> reader.read_text_content("item")
        'text'
    """

    def __init__(
        self,
        source: Union[str, Iterable[Token]],
        config: Optional[ReaderConfig] = None
    ) -> None:
        """Initialize the reader.

        Args:
            source: XML text, or an iterable of already produced tokens
            config: Reader configuration, defaults to ``ReaderConfig()``
        """
        self.config = config or ReaderConfig()
        if isinstance(source, str):
            self._tokens: Iterator[Token] = Tokenizer(source)
        else:
            self._tokens = iter(source)

        self._lookahead: Optional[Token] = None
        self._lookahead_error: Optional[XmlSyntaxError] = None
        self._filled = False

        self._logger = get_logger(
            __name__, self.config.correlation_id, self.config.component
        )

    @classmethod
    def from_tokens(
        cls,
        tokens: Iterable[Token],
        config: Optional[ReaderConfig] = None
    ) -> "XmlReader":
        """Create a reader over tokens produced elsewhere."""
        return cls(tokens, config)

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.advance()
        if token is None:
            raise StopIteration
        return token

    # Lookahead slot

    def _fill(self) -> None:
        if self._filled:
            return
        self._filled = True
        try:
            self._lookahead = next(self._tokens, None)
        except XmlSyntaxError as e:
            self._lookahead = None
            self._lookahead_error = e

    def _discard(self) -> None:
        """Drop the lookahead slot, whatever it holds."""
        self._filled = False
        self._lookahead = None
        self._lookahead_error = None

    def _peek_required(self) -> Token:
        """Peek, consuming a pending lexical error and failing at end of stream."""
        try:
            token = self.peek()
        except LexError:
            self._discard()
            raise
        if token is None:
            raise self._eof()
        return token

    def advance(self) -> Optional[Token]:
        """Consume and return the next token, or ``None`` at end of stream.

        Raises:
            LexError: The tokenizer reported a lexical error
        """
        self._fill()
        token, error = self._lookahead, self._lookahead_error
        self._discard()
        if error is not None:
            raise LexError(error) from error
        return token

    def peek(self) -> Optional[Token]:
        """Return the next token without consuming it.

        Repeated calls return the same token. A pending lexical error is
        raised on every call and only consumed by :meth:`advance`.

        Raises:
            LexError: The tokenizer reported a lexical error
        """
        self._fill()
        if self._lookahead_error is not None:
            raise LexError(self._lookahead_error) from self._lookahead_error
        return self._lookahead

    # Error construction

    def _eof(self) -> UnexpectedEof:
        self._logger.debug("Unexpected end of XML input")
        return UnexpectedEof()

    def _unexpected(self, token: Token) -> UnexpectedToken:
        if self._logger.is_enabled_for(logging.DEBUG):
            self._logger.debug(
                "Unexpected token",
                extra={
                    "token_type": token.type.name,
                    "line": token.position.line,
                    "column": token.position.column,
                }
            )
        return UnexpectedToken(token)

    def _mismatch(self, expected: str, token: Token) -> TagMismatch:
        if self._logger.is_enabled_for(logging.DEBUG):
            self._logger.debug(
                "Closing tag mismatch",
                extra={
                    "expected": expected,
                    "found": token.local,
                    "line": token.position.line,
                    "column": token.position.column,
                }
            )
        return TagMismatch(expected=expected, found=token.local)

    # Attributes

    def _attribute_value(self, token: Token) -> str:
        if self.config.unescape_attributes:
            return unescape(token.value)
        return token.value

    def read_attribute(self) -> Optional[Tuple[str, str]]:
        """Consume the next attribute of the current start tag.

        Call in a loop until it returns ``None`` to drain the attribute list.

        Returns:
            ``(name, value)`` or ``None`` when the start tag's ``>`` or ``/>``
            is next (the marker is not consumed)

        Raises:
            UnexpectedToken: The next token is neither attribute nor marker
            UnexpectedEof: The stream ended inside the start tag
            LexError: The tokenizer reported a lexical error
        """
        self._fill()
        if self._lookahead_error is not None:
            self.advance()
        token = self._lookahead
        if token is None:
            raise self._eof()

        if token.type is TokenType.ATTRIBUTE:
            self._discard()
            return token.local, self._attribute_value(token)
        if token.is_element_end(ElementEnd.OPEN, ElementEnd.EMPTY):
            return None
        raise self._unexpected(token)

    def find_attribute_peek(self) -> Optional[Tuple[str, str]]:
        """Same contract as :meth:`read_attribute`, through :meth:`peek`.

        Lets a caller that has already peeked branch on attribute presence
        before committing to consume it.
        """
        token = self._peek_required()
        if token.type is TokenType.ATTRIBUTE:
            self.advance()
            return token.local, self._attribute_value(token)
        if token.is_element_end(ElementEnd.OPEN, ElementEnd.EMPTY):
            return None
        raise self._unexpected(token)

    # Content

    def read_text_content(self, end_tag: str) -> str:
        """Read the text of the current element through its closing tag.

        Remaining attributes and the ``>`` marker are skipped. When several
        text or CDATA runs occur the last one wins. Text runs are unescaped,
        CDATA is returned verbatim.

        Args:
            end_tag: Local name of the element being read

        Returns:
            The element's text, or ``""`` when it has none

        Raises:
            TagMismatch: A closing tag names another element
            UnexpectedToken: A child element or other markup was found
            UnexpectedEof: The stream ended before the element was closed
        """
        text = ""
        while True:
            token = self.advance()
            if token is None:
                raise self._eof()

            if token.type is TokenType.ATTRIBUTE or token.is_element_end(ElementEnd.OPEN):
                continue
            if token.type is TokenType.TEXT:
                text = unescape(token.value)
            elif token.type is TokenType.CDATA:
                text = token.value
            elif token.is_element_end(ElementEnd.EMPTY):
                return text
            elif token.is_element_end(ElementEnd.CLOSE):
                if token.local == end_tag:
                    return text
                raise self._mismatch(end_tag, token)
            else:
                raise self._unexpected(token)

    def _drain_start_tag(self) -> ElementEnd:
        """Consume attributes up to and including the start tag's marker."""
        while True:
            token = self.advance()
            if token is None:
                raise self._eof()
            if token.type is TokenType.ATTRIBUTE:
                continue
            if token.is_element_end(ElementEnd.OPEN, ElementEnd.EMPTY):
                return token.end  # type: ignore[return-value]
            # Only attributes may sit between an element start and its marker
            raise self._unexpected(token)

    def skip_to_end(self, end_tag: str) -> None:
        """Discard the rest of the current element, including its closing tag.

        Must be called after the element's start token has been consumed.
        Nested elements with the same name are depth-counted so that only
        the closing tag of the outer element ends the skip.

        Raises:
            UnexpectedToken: The start tag holds something other than attributes
            UnexpectedEof: The stream ended before the element was closed
        """
        if self._drain_start_tag() is ElementEnd.EMPTY:
            return

        depth = 1
        while True:
            token = self.advance()
            if token is None:
                raise self._eof()

            if token.type is TokenType.ELEMENT_START and token.local == end_tag:
                if self._drain_start_tag() is ElementEnd.OPEN:
                    depth += 1
            elif token.is_element_end(ElementEnd.CLOSE) and token.local == end_tag:
                depth -= 1
                if depth == 0:
                    return

    def _skip_element(self, token: Token) -> None:
        if self.config.log_skipped_elements and self._logger.is_enabled_for(logging.DEBUG):
            self._logger.debug(
                "Skipping element",
                extra={
                    "element": token.name,
                    "line": token.position.line,
                    "column": token.position.column,
                }
            )
        self.skip_to_end(token.local)

    def skip_to_children(self, end_tag: str) -> None:
        """Advance to the start of the next element named ``end_tag``.

        Elements with other names are skipped whole. On return the element's
        start token has been consumed and its attributes are next.

        Raises:
            UnexpectedToken: Text, CDATA, attributes or an element end was found
            UnexpectedEof: The stream ended before the element was found
        """
        while True:
            token = self.advance()
            if token is None:
                raise self._eof()

            if token.type is TokenType.ELEMENT_START:
                if token.local == end_tag:
                    return
                self._skip_element(token)
            elif token.type in SKIPPABLE_TOKEN_TYPES:
                continue
            elif (
                token.type is TokenType.TEXT
                and self.config.skip_whitespace_text
                and not token.value.strip(XML_WHITESPACE)
            ):
                if self.config.log_skipped_elements and self._logger.is_enabled_for(logging.DEBUG):
                    self._logger.debug(
                        "Skipping whitespace text",
                        extra={
                            "line": token.position.line,
                            "column": token.position.column,
                        }
                    )
            else:
                raise self._unexpected(token)

    def find_next_child_or_end(self, end_tag: Optional[str]) -> Optional[str]:
        """Locate the next child element or the closing tag of the current one.

        Text, CDATA, comments and processing instructions in between are
        consumed and ignored.

        Args:
            end_tag: Local name of the enclosing element, or ``None`` when no
                closing tag is expected

        Returns:
            The next child's local name (its start token is not consumed), or
            ``None`` once the closing tag of ``end_tag`` has been consumed

        Raises:
            TagMismatch: A closing tag names another element
            UnexpectedToken: An attribute or an unexpected element end was found
            UnexpectedEof: The stream ended first
        """
        while True:
            token = self._peek_required()

            if token.type is TokenType.ELEMENT_START:
                return token.local
            if end_tag is not None and token.is_element_end(ElementEnd.CLOSE):
                if token.local == end_tag:
                    self._discard()
                    return None
                raise self._mismatch(end_tag, token)
            if token.type in (TokenType.ELEMENT_END, TokenType.ATTRIBUTE):
                raise self._unexpected(token)
            self._discard()
