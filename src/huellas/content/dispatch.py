"""Byte-to-construct dispatch shared by the content types.

A content type maps each marker byte to the constructs that may start
there, in the order they are tried. Tables are built from the construct
toggles in ``ParseConfig`` and cached per toggle set.
"""

from __future__ import annotations

from collections.abc import Iterable

from huellas.tokenizer import Next, StateFn, Tokenizer

ConstructTable = dict[int, tuple[StateFn, ...]]


def build_table(entries: Iterable[tuple[int, StateFn, bool]]) -> ConstructTable:
    """Group enabled constructs by their marker byte, keeping order.

    Args:
        entries: (marker byte, construct start, enabled) triples

    Returns:
        Marker byte to the constructs to try there
    """
    table: dict[int, list[StateFn]] = {}
    for marker, construct, enabled in entries:
        if enabled:
            table.setdefault(marker, []).append(construct)
    return {marker: tuple(constructs) for marker, constructs in table.items()}


def attempt_each(constructs: tuple[StateFn, ...], ok: StateFn, nok: StateFn) -> StateFn:
    """Try ``constructs`` in order at the current byte.

    Args:
        constructs: Candidate construct starts
        ok: Where to go after the first construct that matches
        nok: Where to go when none of them match

    Returns:
        State function to call on the current byte
    """

    def attempt_from(index: int) -> StateFn:
        if index == len(constructs):
            return nok

        def start(tokenizer: Tokenizer) -> Next:
            return tokenizer.attempt(
                constructs[index], lambda matched: ok if matched else attempt_from(index + 1)
            )(tokenizer)

        return start

    return attempt_from(0)
