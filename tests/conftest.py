"""Shared fixtures for Huellas tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from huellas.config import ParseConfig
from huellas.event import Edge, Event
from huellas.parser import ParseState, encode
from huellas.tokenizer import State, StateFn, Tokenizer
from huellas.tokens import TokenType


@pytest.fixture
def make_tokenizer() -> Callable[..., Tokenizer]:
    """Factory for a tokenizer over a whole source string."""

    def factory(source: str, config: ParseConfig | None = None) -> Tokenizer:
        return Tokenizer(ParseState(encode(source), config or ParseConfig()))

    return factory


@pytest.fixture
def run_attempt() -> Callable[[Tokenizer, StateFn], bool]:
    """Run a construct inside an attempt so failures roll back."""

    def runner(tokenizer: Tokenizer, construct: StateFn) -> bool:
        return tokenizer.run(
            tokenizer.attempt(construct, lambda ok: State.OK if ok else State.NOK)
        )

    return runner


def spans_of(events: list[Event], token_type: TokenType) -> list[tuple[int, int]]:
    """(start, end) offsets of every span of ``token_type``, in order."""
    starts: list[int] = []
    spans: list[tuple[int, int]] = []
    for event in events:
        if event.token_type is not token_type:
            continue
        if event.edge is Edge.ENTER:
            starts.append(event.point.offset)
        else:
            spans.append((starts.pop(), event.point.offset))
    return sorted(spans)


@pytest.fixture
def spans() -> Callable[[list[Event], TokenType], list[tuple[int, int]]]:
    return spans_of
