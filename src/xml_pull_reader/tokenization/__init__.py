"""Tokenization layer for pull-based XML reading.

This module provides a strict, fail-fast tokenizer that converts an in-memory
XML string into structural tokens consumed by the reader.

Key Components:
    Tokenizer: Pull tokenizer yielding tokens in source order
    Token: A single token with its type, names, value and position
    TokenType: Enumeration of all token types
    ElementEnd: Open, empty and close variants of element end tokens
    TokenPosition: Line, column and offset of a token
    XmlSyntaxError: Lexical error raised by the tokenizer
"""

from .tokenizer import (
    ElementEnd,
    Token,
    Tokenizer,
    TokenizerState,
    TokenPosition,
    TokenType,
    XmlSyntaxError,
)

__all__ = [
    "ElementEnd",
    "Token",
    "Tokenizer",
    "TokenizerState",
    "TokenPosition",
    "TokenType",
    "XmlSyntaxError",
]
