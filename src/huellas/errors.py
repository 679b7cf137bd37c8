"""Exception classes for Huellas.

Grammar mismatches are never exceptions: a construct that does not match
returns ``State.NOK`` and the caller tries something else. Exceptions are
reserved for defects in how constructs are composed.
"""

from __future__ import annotations


class HuellasError(Exception):
    """Base exception for all Huellas errors.

    Subclass this for specific error categories.
    """

    pass


class ContractError(HuellasError):
    """An internal tokenizer contract was broken.

    Raised when a construct consumes without a byte available, exits a token
    that is not the innermost open one, or hands back a continuation without
    consuming. These point at a bug in a construct, never at the input, and
    are not meant to be caught.
    """

    def __init__(self, message: str, offset: int | None = None) -> None:
        """Initialize contract error with an optional byte offset.

        Args:
            message: Description of the broken contract
            offset: Absolute byte offset where it was detected (optional)
        """
        self.message = message
        self.offset = offset

        location = f" (at byte {offset})" if offset is not None else ""
        super().__init__(f"{message}{location}")
