"""XML Pull Reader.

A streaming, pull-based XML traversal layer. Record readers walk a document
once, left to right, with one token of lookahead and without building a tree.

Progressive API Disclosure:
- Level 1: Record reading - XmlRead.from_str(), from_str()
- Level 2: Traversal primitives - XmlReader
- Level 3: Raw tokens - Tokenizer
"""

__version__ = "0.1.0"
__author__ = "XML Pull Reader Team"

# Level 1 and 2: record reading and the reader core
from .reader import XmlRead, XmlReader, from_str

# Level 3: tokenization
from .tokenization import ElementEnd, Token, Tokenizer, TokenType, XmlSyntaxError

# Configuration and errors
from .character import unescape
from .shared import (
    EscapeError,
    LexError,
    MissingField,
    ReaderConfig,
    TagMismatch,
    UnexpectedEof,
    UnexpectedToken,
    UnrecognizedSymbol,
    UnterminatedEntity,
    ValueConversionError,
    XmlError,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: record reading
    "XmlRead",
    "from_str",

    # Level 2: reader core
    "XmlReader",
    "ReaderConfig",
    "unescape",

    # Level 3: tokenization
    "ElementEnd",
    "Token",
    "Tokenizer",
    "TokenType",
    "XmlSyntaxError",

    # Errors
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
]
