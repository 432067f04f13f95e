"""XML character and entity reference decoding.

Decodes the five predefined XML entities and numeric character references in
a text run. Text without any ``&`` is returned as the very same object, so
the common case allocates nothing.
"""

from typing import Dict, List

from xml_pull_reader.shared.errors import UnrecognizedSymbol, UnterminatedEntity

# Predefined XML 1.0 entities
PREDEFINED_ENTITIES: Dict[str, str] = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "apos": "'",
    "quot": '"',
}

# Largest Unicode scalar value
MAX_CODE_POINT = 0x10FFFF
SURROGATE_RANGE_START = 0xD800
SURROGATE_RANGE_END = 0xDFFF


def _decode_reference(symbol: str) -> str:
    """Resolve the text between ``&`` and ``;`` to a character."""
    char = PREDEFINED_ENTITIES.get(symbol)
    if char is not None:
        return char

    digits = None
    base = 10
    if symbol.startswith("#x"):
        digits, base = symbol[2:], 16
    elif symbol.startswith("#"):
        digits = symbol[1:]

    # int() accepts signs, underscores and surrounding whitespace, which
    # character references do not
    if not digits or not digits.isalnum() or not digits.isascii():
        raise UnrecognizedSymbol(symbol)
    try:
        code_point = int(digits, base)
    except ValueError:
        raise UnrecognizedSymbol(symbol) from None

    if code_point > MAX_CODE_POINT or (
        SURROGATE_RANGE_START <= code_point <= SURROGATE_RANGE_END
    ):
        raise UnrecognizedSymbol(symbol)
    return chr(code_point)


def unescape(text: str) -> str:
    """Decode entity and character references in ``text``.

    Args:
        text: Raw text run as produced by the tokenizer

    Returns:
        ``text`` itself when it contains no ``&``, otherwise a new decoded string

    Raises:
        UnterminatedEntity: An ``&`` has no terminating ``;``
        UnrecognizedSymbol: Unknown entity name or invalid character reference
    """
    amp = text.find("&")
    if amp == -1:
        return text

    parts: List[str] = []
    pos = 0
    while amp != -1:
        parts.append(text[pos:amp])
        semi = text.find(";", amp + 1)
        if semi == -1:
            raise UnterminatedEntity(text[amp:])
        parts.append(_decode_reference(text[amp + 1:semi]))
        pos = semi + 1
        amp = text.find("&", pos)
    parts.append(text[pos:])
    return "".join(parts)
