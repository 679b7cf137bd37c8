"""Tests for the tokenizer engine: primitives, contracts and rollback."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from huellas.config import ParseConfig
from huellas.constructs import definition, partial_label
from huellas.errors import ContractError
from huellas.event import Edge, link
from huellas.location import Point
from huellas.parser import ParseState, encode
from huellas.tokenizer import State, StateFn, Tokenizer
from huellas.tokens import ContentType, TokenType

LABEL_ROLES = (
    TokenType.DEFINITION_LABEL,
    TokenType.DEFINITION_LABEL_MARKER,
    TokenType.DEFINITION_LABEL_STRING,
)


def _consume_all(tokenizer: Tokenizer):
    if tokenizer.current is None:
        return State.OK
    tokenizer.consume()
    return _consume_all


class TestPrimitives:
    """Test consume, enter and exit."""

    def test_consume_tracks_lines_and_columns(self, make_tokenizer) -> None:
        """Points advance by byte and move to the next line after a line feed."""
        tokenizer = make_tokenizer("ab\ncd")
        assert tokenizer.run(_consume_all)
        assert tokenizer.point == Point(2, 3, 5)

    def test_enter_exit_produce_events(self, make_tokenizer) -> None:
        """Enter and exit record the position they happen at."""
        tokenizer = make_tokenizer("ab")

        def start(t: Tokenizer):
            t.enter(TokenType.DATA)
            t.consume()
            return inside

        def inside(t: Tokenizer):
            t.consume()
            t.exit(TokenType.DATA)
            return State.OK

        assert tokenizer.run(start)
        events = tokenizer.flush()
        assert [(e.edge, e.token_type, e.point.offset) for e in events] == [
            (Edge.ENTER, TokenType.DATA, 0),
            (Edge.EXIT, TokenType.DATA, 2),
        ]

    def test_enter_with_content_type_creates_chunk(self, make_tokenizer) -> None:
        """Chunks carry an unlinked Link with their content type."""
        tokenizer = make_tokenizer("a")
        tokenizer.enter(TokenType.DATA, ContentType.STRING)
        event = tokenizer.events[-1]
        assert event.link is not None
        assert event.content_type is ContentType.STRING
        assert event.link.previous is None
        assert event.link.next is None

    def test_current_is_none_at_end(self, make_tokenizer) -> None:
        """The end of input reads as None."""
        assert make_tokenizer("").current is None


class TestContracts:
    """Internal contract violations fail fast with ContractError."""

    def test_consume_at_end_of_input(self, make_tokenizer) -> None:
        """Consuming without a byte raises."""

        def start(t: Tokenizer):
            t.consume()
            return State.OK

        with pytest.raises(ContractError, match="end of input"):
            make_tokenizer("").run(start)

    def test_consume_twice_in_one_step(self, make_tokenizer) -> None:
        """Each step may consume at most one byte."""

        def start(t: Tokenizer):
            t.consume()
            t.consume()
            return State.OK

        with pytest.raises(ContractError, match="not be consumed"):
            make_tokenizer("ab").run(start)

    def test_exit_must_close_innermost(self, make_tokenizer) -> None:
        """Exiting a token that is not the innermost open one raises."""
        tokenizer = make_tokenizer("a")
        tokenizer.enter(TokenType.PARAGRAPH)
        tokenizer.enter(TokenType.DATA)
        with pytest.raises(ContractError, match="innermost open token is DATA"):
            tokenizer.exit(TokenType.PARAGRAPH)

    def test_exit_with_nothing_open(self, make_tokenizer) -> None:
        with pytest.raises(ContractError, match="nothing"):
            make_tokenizer("a").exit(TokenType.DATA)

    def test_continuation_without_consuming(self, make_tokenizer) -> None:
        """Returning a state function without consuming would never terminate."""

        def start(t: Tokenizer):
            return start

        with pytest.raises(ContractError, match="consumed before continuing"):
            make_tokenizer("a").run(start)

    def test_flush_with_open_tokens(self, make_tokenizer) -> None:
        """Unclosed tokens at the end of a run are a defect."""
        tokenizer = make_tokenizer("a")

        def start(t: Tokenizer):
            t.enter(TokenType.PARAGRAPH)
            return State.OK

        assert tokenizer.run(start)
        with pytest.raises(ContractError, match="PARAGRAPH"):
            tokenizer.flush()

    def test_error_reports_offset(self, make_tokenizer) -> None:
        """The byte offset of the violation is part of the error."""
        tokenizer = make_tokenizer("a")
        with pytest.raises(ContractError) as info:
            tokenizer.exit(TokenType.DATA)
        assert info.value.offset == 0
        assert "(at byte 0)" in str(info.value)


class TestAttempt:
    """Test attempt and check."""

    def test_nok_restores_everything(self, make_tokenizer) -> None:
        """A failed attempt leaves no trace."""
        tokenizer = make_tokenizer("[a\n\nb]")
        outcome: list[bool] = []

        def done(ok: bool):
            outcome.append(ok)
            return State.OK

        tokenizer.tokenize_state.bind(
            TokenType.DEFINITION_LABEL,
            TokenType.DEFINITION_LABEL_MARKER,
            TokenType.DEFINITION_LABEL_STRING,
        )
        before = tokenizer.capture()
        assert tokenizer.run(tokenizer.attempt(partial_label.start, done))
        assert outcome == [False]
        assert tokenizer.capture() == before
        assert tokenizer.events == []

    def test_ok_keeps_events(self, make_tokenizer) -> None:
        """A successful attempt keeps its events and position."""
        tokenizer = make_tokenizer("[a]")
        tokenizer.tokenize_state.bind(
            TokenType.DEFINITION_LABEL,
            TokenType.DEFINITION_LABEL_MARKER,
            TokenType.DEFINITION_LABEL_STRING,
        )
        assert tokenizer.run(tokenizer.attempt(partial_label.start, lambda ok: State.OK if ok else State.NOK))
        assert tokenizer.point.offset == 3
        assert tokenizer.events[0].token_type is TokenType.DEFINITION_LABEL

    def test_check_always_reverts(self, make_tokenizer) -> None:
        """check reports the outcome but keeps nothing."""
        tokenizer = make_tokenizer("[a]")
        tokenizer.tokenize_state.bind(
            TokenType.DEFINITION_LABEL,
            TokenType.DEFINITION_LABEL_MARKER,
            TokenType.DEFINITION_LABEL_STRING,
        )
        before = tokenizer.capture()
        outcome: list[bool] = []

        def done(ok: bool):
            outcome.append(ok)
            return State.OK

        assert tokenizer.run(tokenizer.check(partial_label.start, done))
        assert outcome == [True]
        assert tokenizer.capture() == before

    def test_done_continues_on_same_byte(self, make_tokenizer) -> None:
        """A continuation returned from done sees the byte the attempt started at."""
        tokenizer = make_tokenizer("x")
        seen: list[int | None] = []

        def fails(t: Tokenizer):
            t.consume()
            return lambda _t: State.NOK

        def after(t: Tokenizer):
            seen.append(t.current)
            t.consume()
            return State.OK

        assert tokenizer.run(tokenizer.attempt(fails, lambda ok: after))
        assert seen == [ord("x")]

    def test_rollback_clears_dangling_links(self, make_tokenizer) -> None:
        """A kept chunk never points at an event that was rolled back."""
        tokenizer = make_tokenizer("ab")
        tokenizer.enter(TokenType.DATA, ContentType.STRING)
        tokenizer.exit(TokenType.DATA)
        checkpoint = tokenizer.capture()
        tokenizer.enter(TokenType.DATA, ContentType.STRING)
        tokenizer.exit(TokenType.DATA)
        link(tokenizer.events, 2)
        assert tokenizer.events[0].link.next == 2

        tokenizer.restore(checkpoint)
        assert len(tokenizer.events) == 2
        assert tokenizer.events[0].link.next is None


class TestRollbackProperty:
    """A failed attempt puts the tokenizer back where it was, whatever the input."""

    @pytest.mark.parametrize(
        "construct,roles",
        [(partial_label.start, LABEL_ROLES), (definition.start, None)],
        ids=["label", "definition"],
    )
    @given(st.text(alphabet='[]\\ \n\t:<>()"\'ab', max_size=40))
    @settings(max_examples=300)
    def test_nok_leaves_no_trace(self, construct: StateFn, roles, source: str) -> None:
        tokenizer = Tokenizer(ParseState(encode("[" + source), ParseConfig()))
        if roles:
            tokenizer.tokenize_state.bind(*roles)
        before = (len(tokenizer.events), tokenizer.point, tokenizer.tokenize_state.copy())

        matched = tokenizer.run(tokenizer.attempt(construct, lambda ok: State.OK if ok else State.NOK))

        if not matched:
            assert (len(tokenizer.events), tokenizer.point, tokenizer.tokenize_state) == before


class TestResolvers:
    """Test resolver registration."""

    def test_registered_once_and_run_on_flush(self, make_tokenizer) -> None:
        calls: list[int] = []

        def resolver(t: Tokenizer) -> None:
            calls.append(len(t.events))

        tokenizer = make_tokenizer("")
        tokenizer.register_resolver(resolver)
        tokenizer.register_resolver(resolver)
        tokenizer.flush()
        assert calls == [0]
