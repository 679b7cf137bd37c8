"""Blank line: optional whitespace, then a line ending or the end.

The line ending is not part of the construct; flow tokenizes it.
"""

from __future__ import annotations

from huellas.charsets import LINE_FEED
from huellas.constructs.partial_space_or_tab import space_or_tab
from huellas.tokenizer import Next, State, Tokenizer


def start(tokenizer: Tokenizer) -> Next:
    """At the start of a line."""
    return tokenizer.attempt(space_or_tab, lambda _ok: after)(tokenizer)


def after(tokenizer: Tokenizer) -> Next:
    """After optional whitespace."""
    if tokenizer.current is None or tokenizer.current == LINE_FEED:
        return State.OK
    return State.NOK
