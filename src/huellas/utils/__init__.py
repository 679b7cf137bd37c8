"""Utility modules for Huellas.

Provides:
- text: identifier normalization, line endings, character reference decoding
- logger: get_logger for logging
"""

from huellas.utils.logger import get_logger
from huellas.utils.text import (
    decode_named_character_reference,
    decode_numeric_character_reference,
    normalize_identifier,
    normalize_line_endings,
)

__all__ = [
    "decode_named_character_reference",
    "decode_numeric_character_reference",
    "get_logger",
    "normalize_identifier",
    "normalize_line_endings",
]
