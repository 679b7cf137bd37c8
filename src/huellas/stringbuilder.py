"""StringBuilder for O(n) HTML accumulation.

The compiler appends fragments while walking events and joins them once.
Link and image labels get their own builder so the label can be wrapped
(or, for image alt text, flattened) once the closing event is reached.

Thread Safety:
StringBuilder instances are local to each compile() call.
No shared mutable state.

"""

from __future__ import annotations


class StringBuilder:
    """Append-only string accumulator.

    Usage:
        >>> sb = StringBuilder()
        >>> _ = sb.append("<p>").append("a").append("</p>")
        >>> sb.build()
        '<p>a</p>'

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Append a fragment; empty strings are skipped.

        Returns:
            self for method chaining
        """
        if s:
            self._parts.append(s)
        return self

    def build(self) -> str:
        """Join everything appended so far."""
        return "".join(self._parts)

    def __bool__(self) -> bool:
        """Return True if anything was appended."""
        return bool(self._parts)
