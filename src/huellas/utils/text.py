"""Text helpers shared by the tokenizer and the compiler.

Example:
    >>> from huellas.utils.text import normalize_identifier
    >>> normalize_identifier("  Foo\\n  Bar ")
    'foo bar'
"""

from __future__ import annotations

import re
from html.entities import html5

_WHITESPACE_RUN = re.compile(r"[\t\n\r ]+")
_LINE_ENDING = re.compile(r"\r\n?")

REPLACEMENT_CHARACTER = "\ufffd"


def normalize_line_endings(source: str) -> str:
    """Turn ``\\r\\n`` and lone ``\\r`` into ``\\n``."""
    return _LINE_ENDING.sub("\n", source)


def normalize_identifier(value: str) -> str:
    """Normalize a label so matching references and definitions compare equal.

    Collapses whitespace runs (including line endings) to one space, trims
    the ends and case folds.
    """
    return _WHITESPACE_RUN.sub(" ", value).strip().casefold()


def decode_numeric_character_reference(value: str, radix: int) -> str:
    """Decode the value of ``&#123;`` or ``&#x7b;``.

    Code points that may not appear in HTML (NUL, lone surrogates, values
    past U+10FFFF, most controls and noncharacters) become U+FFFD.

    Args:
        value: Digits without markers
        radix: 10 or 16

    Returns:
        The decoded character
    """
    code = int(value, radix)
    if (
        code < 0x09
        or code == 0x0B
        or 0x0D < code < 0x20
        or 0x7F <= code <= 0x9F
        or 0xD800 <= code <= 0xDFFF
        or 0xFDD0 <= code <= 0xFDEF
        or (code & 0xFFFF) in (0xFFFE, 0xFFFF)
        or code > 0x10FFFF
    ):
        return REPLACEMENT_CHARACTER
    return chr(code)


def decode_named_character_reference(name: str) -> str | None:
    """Decode the value of ``&amp;``, or None for an unknown name."""
    return html5.get(f"{name};")
