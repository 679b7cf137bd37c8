"""Byte sets for O(1) classification.

All sets are frozensets of byte values for:
- O(1) membership testing against ``tokenizer.current``
- Immutability (thread-safe)
- Module-level caching (no per-call allocation)

Reference: CommonMark 0.31.2 specification

Usage:
    from huellas.charsets import ASCII_PUNCTUATION

    if tokenizer.current in ASCII_PUNCTUATION:  # O(1) lookup
        ...
"""

LINE_FEED = 0x0A
SPACE = 0x20
TAB = 0x09
BACKSLASH = ord("\\")
LEFT_BRACKET = ord("[")
RIGHT_BRACKET = ord("]")
LEFT_PAREN = ord("(")
RIGHT_PAREN = ord(")")
LESS_THAN = ord("<")
GREATER_THAN = ord(">")
EXCLAMATION = ord("!")
AMPERSAND = ord("&")
NUMBER_SIGN = ord("#")
SEMICOLON = ord(";")
COLON = ord(":")
DOUBLE_QUOTE = ord('"')
SINGLE_QUOTE = ord("'")

# CommonMark: ASCII punctuation characters
# https://spec.commonmark.org/0.31.2/#ascii-punctuation-character
ASCII_PUNCTUATION: frozenset[int] = frozenset(b"!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")

ASCII_DIGITS: frozenset[int] = frozenset(b"0123456789")
ASCII_HEX_DIGITS: frozenset[int] = frozenset(b"0123456789abcdefABCDEF")
ASCII_ALPHANUMERIC: frozenset[int] = frozenset(
    b"0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
)

SPACE_OR_TAB: frozenset[int] = frozenset((SPACE, TAB))

# Bytes that may be escaped inside a label
LABEL_ESCAPABLE: frozenset[int] = frozenset((LEFT_BRACKET, BACKSLASH, RIGHT_BRACKET))

# Bytes that may be escaped inside an enclosed destination
DESTINATION_ESCAPABLE: frozenset[int] = frozenset((LESS_THAN, GREATER_THAN, BACKSLASH))

# Raw destinations cannot contain ASCII control characters
ASCII_CONTROL: frozenset[int] = frozenset(range(0x00, 0x20)) | frozenset((0x7F,))

# Title opening marker to closing marker
TITLE_MARKERS: dict[int, int] = {
    DOUBLE_QUOTE: DOUBLE_QUOTE,
    SINGLE_QUOTE: SINGLE_QUOTE,
    LEFT_PAREN: RIGHT_PAREN,
}

# Character reference value limits (named, decimal, hexadecimal)
CHARACTER_REFERENCE_NAMED_SIZE_MAX = 31
CHARACTER_REFERENCE_DECIMAL_SIZE_MAX = 7
CHARACTER_REFERENCE_HEXADECIMAL_SIZE_MAX = 6
