"""Positions in the source buffer.

Provides the Point dataclass used by every event. Offsets are absolute byte
offsets into the normalized UTF-8 input, so they survive rollback and
splicing without renumbering.

Thread Safety:
Point is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Point:
    """A place in the source.

    Attributes:
        line: Line number (1-indexed)
        column: Column in bytes (1-indexed)
        offset: Absolute byte offset (0-indexed)

    Examples:
        >>> Point(1, 1, 0)
        Point(line=1, column=1, offset=0)
        >>> str(Point(2, 4, 10))
        '2:4'

    """

    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        """Format as ``line:column`` for messages."""
        return f"{self.line}:{self.column}"

    def shift_to(self, offset: int) -> Point:
        """Move to another offset on the same line.

        Only valid when no line ending lies between the two offsets.

        Args:
            offset: Target byte offset

        Returns:
            New Point with column adjusted by the distance moved
        """
        return Point(self.line, self.column + offset - self.offset, offset)

    @classmethod
    def start(cls) -> Point:
        """The point before the first byte of a document."""
        return cls(line=1, column=1, offset=0)
