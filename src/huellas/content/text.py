"""Text content type: the inside of paragraphs.

Recognizes everything the string content type does, plus label starts and
ends (links and images) and hard breaks. Runs the media resolver (when a
label start was seen), then data merging, then whitespace classification.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache

from huellas.charsets import AMPERSAND, BACKSLASH, EXCLAMATION, LEFT_BRACKET, RIGHT_BRACKET, SPACE, SPACE_OR_TAB
from huellas.config import Constructs
from huellas.constructs import (
    character_escape,
    character_reference,
    hard_break_escape,
    label_end,
    label_start_image,
    label_start_link,
    partial_data,
)
from huellas.content.dispatch import ConstructTable, attempt_each, build_table
from huellas.edit_map import EditMap
from huellas.event import Edge, Event
from huellas.tokenizer import Next, State, Tokenizer
from huellas.tokens import TokenType


@lru_cache(maxsize=16)
def _table(constructs: Constructs) -> ConstructTable:
    return build_table(
        (
            (EXCLAMATION, label_start_image.start, constructs.label_start_image),
            (AMPERSAND, character_reference.start, constructs.character_reference),
            (LEFT_BRACKET, label_start_link.start, constructs.label_start_link),
            (BACKSLASH, character_escape.start, constructs.character_escape),
            (BACKSLASH, hard_break_escape.start, constructs.hard_break_escape),
            (RIGHT_BRACKET, label_end.start, constructs.label_end),
        )
    )


@lru_cache(maxsize=16)
def _markers(constructs: Constructs) -> frozenset[int]:
    return frozenset(_table(constructs))


def start(tokenizer: Tokenizer) -> Next:
    """At the start of text."""
    return before(tokenizer)


def before(tokenizer: Tokenizer) -> Next:
    """At a construct, data or the end."""
    current = tokenizer.current
    if current is None:
        # After the media resolver, which label starts registered.
        tokenizer.register_resolver(partial_data.resolve_data)
        tokenizer.register_resolver(resolve_whitespace)
        return State.OK

    constructs = tokenizer.parse_state.config.constructs
    data = partial_data.start(_markers(constructs), before)
    candidates = _table(constructs).get(current)
    if candidates:
        return attempt_each(candidates, before, data)(tokenizer)
    return data(tokenizer)


def resolve_whitespace(tokenizer: Tokenizer) -> None:
    """Split whitespace at line edges out of data.

    Trailing whitespace before a line ending becomes ``HardBreakTrailing``
    when it is two or more spaces (and the construct is on), otherwise
    ``SpaceOrTab``. Whitespace at the start of the text, after a line
    ending, or at the end of the text becomes ``SpaceOrTab``.
    """
    events = tokenizer.events
    hard_break = tokenizer.parse_state.config.constructs.hard_break_trailing
    edits = EditMap()

    for index, event in enumerate(events):
        if event.edge is not Edge.ENTER or event.token_type is not TokenType.DATA or event.link is not None:
            continue

        exit_event = events[index + 1]
        start = event.point.offset
        end = exit_event.point.offset
        value = tokenizer.slice(start, end)

        at_line_start = index == 0 or (
            events[index - 1].edge is Edge.EXIT and events[index - 1].token_type is TokenType.LINE_ENDING
        )
        before_eol = (
            index + 2 < len(events)
            and events[index + 2].edge is Edge.ENTER
            and events[index + 2].token_type is TokenType.LINE_ENDING
        )
        at_end = index + 2 == len(events)

        leading = _count_space_or_tab(value) if at_line_start else 0
        trailing = _count_space_or_tab(reversed(value)) if before_eol or at_end else 0
        if leading == 0 and trailing == 0:
            continue

        pieces: list[tuple[TokenType, int, int]] = []
        if leading == len(value):
            trailing = leading if before_eol else 0
            leading = 0 if before_eol else leading

        if leading:
            pieces.append((TokenType.SPACE_OR_TAB, start, start + leading))
        if start + leading < end - trailing:
            pieces.append((TokenType.DATA, start + leading, end - trailing))
        if trailing:
            tail = value[len(value) - trailing :]
            is_break = before_eol and hard_break and trailing >= 2 and all(byte == SPACE for byte in tail)
            token_type = TokenType.HARD_BREAK_TRAILING if is_break else TokenType.SPACE_OR_TAB
            pieces.append((token_type, end - trailing, end))

        replacement: list[Event] = []
        for token_type, piece_start, piece_end in pieces:
            replacement.append(Event(Edge.ENTER, token_type, event.point.shift_to(piece_start)))
            replacement.append(Event(Edge.EXIT, token_type, event.point.shift_to(piece_end)))
        edits.add(index, 2, replacement)

    tokenizer.events = edits.consume(events)


def _count_space_or_tab(value: Iterable[int]) -> int:
    size = 0
    for byte in value:
        if byte not in SPACE_OR_TAB:
            break
        size += 1
    return size
