"""String content type: escapes and character references.

Used inside labels, destinations and titles, where links and breaks are
not recognized but ``\\]`` and ``&amp;`` still are.
"""

from __future__ import annotations

from functools import lru_cache

from huellas.charsets import AMPERSAND, BACKSLASH
from huellas.config import Constructs
from huellas.constructs import character_escape, character_reference, partial_data
from huellas.content.dispatch import ConstructTable, attempt_each, build_table
from huellas.tokenizer import Next, State, Tokenizer


@lru_cache(maxsize=16)
def _table(constructs: Constructs) -> ConstructTable:
    return build_table(
        (
            (AMPERSAND, character_reference.start, constructs.character_reference),
            (BACKSLASH, character_escape.start, constructs.character_escape),
        )
    )


@lru_cache(maxsize=16)
def _markers(constructs: Constructs) -> frozenset[int]:
    return frozenset(_table(constructs))


def start(tokenizer: Tokenizer) -> Next:
    """At the start of a string."""
    tokenizer.register_resolver(partial_data.resolve_data)
    return before(tokenizer)


def before(tokenizer: Tokenizer) -> Next:
    """At a construct, data or the end."""
    current = tokenizer.current
    if current is None:
        return State.OK

    constructs = tokenizer.parse_state.config.constructs
    table = _table(constructs)
    data = partial_data.start(_markers(constructs), before)
    candidates = table.get(current)
    if candidates:
        return attempt_each(candidates, before, data)(tokenizer)
    return data(tokenizer)
