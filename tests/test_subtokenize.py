"""Tests for subtokenize passes and the document pipeline."""

from __future__ import annotations

import logging

import pytest

from huellas.config import ParseConfig
from huellas.content import flow
from huellas.errors import ContractError
from huellas.event import Edge, Event, Link
from huellas.location import Point
from huellas.parser import ParseState, encode, parse, tokenize
from huellas.subtokenize import subtokenize
from huellas.tokenizer import Tokenizer
from huellas.tokens import ContentType, TokenType


def _flow_events(source: str) -> tuple[list[Event], ParseState]:
    state = ParseState(encode(source), ParseConfig())
    tokenizer = Tokenizer(state)
    tokenizer.run(flow.start)
    return tokenizer.flush(), state


class TestPass:
    """A single pass over flow events."""

    def test_no_chunks_means_done(self) -> None:
        state = ParseState(b"", ParseConfig())
        events: list[Event] = []
        result, done = subtokenize(events, state)
        assert done
        assert result is events

    def test_content_chunks_are_replaced(self) -> None:
        events, state = _flow_events("a\nb")
        assert [e.token_type for e in events if e.edge is Edge.ENTER] == [
            TokenType.CONTENT,
            TokenType.CHUNK_CONTENT,
            TokenType.CHUNK_CONTENT,
        ]
        result, done = subtokenize(events, state)
        assert not done
        entered = [e.token_type for e in result if e.edge is Edge.ENTER]
        assert TokenType.CHUNK_CONTENT not in entered
        assert entered[:2] == [TokenType.CONTENT, TokenType.PARAGRAPH]
        assert entered.count(TokenType.CHUNK_TEXT) == 2

    def test_parent_span_kept(self, spans) -> None:
        """The span around a chunk still wraps what replaced it."""
        events, state = _flow_events("ab\ncd")
        result, _ = subtokenize(events, state)
        assert spans(result, TokenType.CONTENT) == [(0, 5)]
        assert spans(result, TokenType.PARAGRAPH) == [(0, 5)]

    def test_new_chunks_are_linked_by_index(self) -> None:
        """Links in the rebuilt list point at the right events."""
        events, state = _flow_events("a\nb")
        result, _ = subtokenize(events, state)
        heads = [
            i for i, e in enumerate(result)
            if e.edge is Edge.ENTER and e.link is not None and e.link.previous is None
        ]
        assert len(heads) == 1
        second = result[heads[0]].link.next
        assert second is not None
        assert result[second].token_type is TokenType.CHUNK_TEXT
        assert result[second].link.previous == heads[0]

    def test_void_check(self) -> None:
        """A chunk whose Enter is not directly followed by its Exit is a defect."""
        state = ParseState(b"ab", ParseConfig())
        events = [
            Event(Edge.ENTER, TokenType.CHUNK_TEXT, Point(1, 1, 0), Link(None, None, ContentType.TEXT)),
            Event(Edge.ENTER, TokenType.DATA, Point(1, 1, 0)),
            Event(Edge.EXIT, TokenType.DATA, Point(1, 3, 2)),
            Event(Edge.EXIT, TokenType.CHUNK_TEXT, Point(1, 3, 2)),
        ]
        with pytest.raises(ContractError, match="not void"):
            subtokenize(events, state)


class TestPipeline:
    """Parsing a whole document."""

    @pytest.mark.parametrize(
        "source",
        ["", "a", "a\nb", "[a](b)", "[a]\n\n[a]: /u 't'", "![a *b*](c)", "&amp; \\*"],
    )
    def test_no_links_remain(self, source: str) -> None:
        assert all(event.link is None for event in parse(source))

    def test_offsets_preserved(self) -> None:
        """Sub-events carry the absolute offsets of their bytes."""
        events = parse("x\n[ab](c)")
        data = [
            (e.point.offset, events[i + 1].point.offset)
            for i, e in enumerate(events)
            if e.edge is Edge.ENTER and e.token_type is TokenType.DATA
        ]
        assert (3, 5) in data
        assert (0, 1) in data

    def test_definitions_visible_to_earlier_text(self) -> None:
        """A reference before its definition still resolves."""
        events = parse("[a]\n\n[a]: /u")
        types = {e.token_type for e in events}
        assert TokenType.LINK in types

    def test_undefined_reference_is_text(self) -> None:
        events = parse("[a]")
        types = {e.token_type for e in events}
        assert TokenType.LINK not in types
        assert TokenType.LABEL_LINK not in types

    def test_crlf_normalized(self) -> None:
        assert encode("a\r\nb\rc") == b"a\nb\nc"
        assert parse("a\r\nb") == parse("a\nb")

    def test_tokenize_uses_context_config(self) -> None:
        from huellas.config import Constructs, parse_config_context

        with parse_config_context(ParseConfig(constructs=Constructs(label_end=False))):
            events = tokenize(encode("[a](b)"))
        assert TokenType.LINK not in {e.token_type for e in events}

    def test_debug_logging(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="huellas"):
            parse("[a](b)")
        assert any("subtokenize pass" in record.getMessage() for record in caplog.records)
