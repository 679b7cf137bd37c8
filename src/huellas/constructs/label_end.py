"""Label end: the ``]`` that may close a link or image.

Grammar::

    label_end ::= ']' [ resource | reference_full | reference_collapsed ]
    resource ::= '(' [ space_or_tab_eol ] [ destination [ space_or_tab_eol title ] ] [ space_or_tab_eol ] ')'
    reference_full ::= label
    reference_collapsed ::= '[' ']'

Matching follows CommonMark:

- Without an open label start there is nothing to close: ``Nok``.
- An inactive start (a link start inside a finished link) is dropped: ``Nok``.
- Otherwise a resource is tried, then a full or collapsed reference, then
  the text between the brackets as a shortcut reference. References must
  name a collected definition.
- On failure the start is dropped too, so it stays literal text.
- A matched link deactivates all earlier link starts: links do not nest.

Matches are recorded in ``tokenizer.media``. The media resolver turns them
into ``Link``/``Image`` spans once the whole text is tokenized, and turns
starts that never matched back into data.

"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from huellas.charsets import LEFT_BRACKET, LEFT_PAREN, LINE_FEED, RIGHT_BRACKET, RIGHT_PAREN, SPACE_OR_TAB, TITLE_MARKERS
from huellas.constructs import partial_destination, partial_label, partial_title
from huellas.constructs.partial_space_or_tab import space_or_tab_eol
from huellas.edit_map import EditMap
from huellas.event import Edge, Event
from huellas.tokenizer import Next, State, StateFn, Tokenizer
from huellas.tokens import TokenType
from huellas.utils.text import normalize_identifier


@dataclass(slots=True)
class LabelStart:
    """An opening ``[`` or ``![`` waiting for its label end.

    Attributes:
        kind: LABEL_LINK or LABEL_IMAGE
        start: Indices of the start's Enter and Exit events
        inactive: Whether it can no longer open a link

    """

    kind: TokenType
    start: tuple[int, int]
    inactive: bool = False


@dataclass(frozen=True, slots=True)
class Media:
    """A matched label start and label end.

    Attributes:
        start: Indices of the label start's Enter and Exit events
        end: Index of the label end's Enter event and of the last event
            of the trailing resource or reference

    """

    start: tuple[int, int]
    end: tuple[int, int]


def start(tokenizer: Tokenizer) -> Next:
    """At ``]``.

    ```markdown
    > | [a](b) c
          ^
    ```
    """
    if tokenizer.current != RIGHT_BRACKET or not tokenizer.label_starts:
        return State.NOK

    label_start = tokenizer.label_starts[-1]
    if label_start.inactive:
        return _nok(tokenizer)

    text_start = tokenizer.events[label_start.start[1]].point.offset
    identifier = normalize_identifier(
        tokenizer.slice(text_start, tokenizer.point.offset).decode("utf-8")
    )
    defined = identifier in tokenizer.parse_state.definitions

    end_index = len(tokenizer.events)
    tokenizer.enter(TokenType.LABEL_END)
    tokenizer.enter(TokenType.LABEL_MARKER)
    tokenizer.consume()
    tokenizer.exit(TokenType.LABEL_MARKER)
    tokenizer.exit(TokenType.LABEL_END)
    return _after(defined, end_index)


def _after(defined: bool, end_index: int) -> StateFn:
    def after(tokenizer: Tokenizer) -> Next:
        ok = _ok(end_index)
        fallback: Callable[[Tokenizer], Next] = ok if defined else _nok

        if tokenizer.current == LEFT_PAREN:
            return tokenizer.attempt(
                resource_start, lambda matched: ok if matched else fallback
            )(tokenizer)

        if tokenizer.current == LEFT_BRACKET:
            not_full = _reference_not_full(end_index) if defined else _nok
            return tokenizer.attempt(
                reference_full_start, lambda matched: ok if matched else not_full
            )(tokenizer)

        return fallback(tokenizer)

    return after


def _reference_not_full(end_index: int) -> StateFn:
    def reference_not_full(tokenizer: Tokenizer) -> Next:
        return tokenizer.attempt(
            reference_collapsed_start,
            lambda matched: _ok(end_index) if matched else _nok,
        )(tokenizer)

    return reference_not_full


def _ok(end_index: int) -> StateFn:
    def ok(tokenizer: Tokenizer) -> Next:
        label_start = tokenizer.label_starts.pop()
        if label_start.kind is TokenType.LABEL_LINK:
            for earlier in tokenizer.label_starts:
                if earlier.kind is TokenType.LABEL_LINK:
                    earlier.inactive = True
        tokenizer.media.append(Media(label_start.start, (end_index, len(tokenizer.events) - 1)))
        return State.OK

    return ok


def _nok(tokenizer: Tokenizer) -> Next:
    # The start is dropped for good; the attempt rolls back only the events.
    tokenizer.label_starts_loose.append(tokenizer.label_starts.pop())
    return State.NOK


# =========================================================================
# Resource: (destination "title")
# =========================================================================


def resource_start(tokenizer: Tokenizer) -> Next:
    """At ``(``."""
    if tokenizer.current != LEFT_PAREN:
        return State.NOK
    tokenizer.enter(TokenType.RESOURCE)
    tokenizer.enter(TokenType.RESOURCE_MARKER)
    tokenizer.consume()
    tokenizer.exit(TokenType.RESOURCE_MARKER)
    return resource_before


def _optional_whitespace(then: StateFn) -> StateFn:
    def whitespace(tokenizer: Tokenizer) -> Next:
        if tokenizer.current in SPACE_OR_TAB or tokenizer.current == LINE_FEED:
            return tokenizer.attempt(space_or_tab_eol, lambda _ok: then)(tokenizer)
        return then(tokenizer)

    return whitespace


def resource_before(tokenizer: Tokenizer) -> Next:
    """After ``(``, before optional whitespace."""
    return _optional_whitespace(resource_open)(tokenizer)


def resource_open(tokenizer: Tokenizer) -> Next:
    """At ``)`` or a destination."""
    if tokenizer.current == RIGHT_PAREN:
        return resource_end(tokenizer)

    tokenizer.tokenize_state.bind(
        TokenType.RESOURCE_DESTINATION,
        TokenType.RESOURCE_DESTINATION_LITERAL,
        TokenType.RESOURCE_DESTINATION_LITERAL_MARKER,
        TokenType.RESOURCE_DESTINATION_RAW,
        TokenType.RESOURCE_DESTINATION_STRING,
    )
    return tokenizer.attempt(
        partial_destination.start,
        lambda ok: resource_destination_after if ok else resource_destination_missing,
    )(tokenizer)


def resource_destination_after(tokenizer: Tokenizer) -> Next:
    """After the destination, at optional whitespace."""
    tokenizer.tokenize_state.unbind()
    if tokenizer.current in SPACE_OR_TAB or tokenizer.current == LINE_FEED:
        return tokenizer.attempt(
            space_or_tab_eol,
            lambda ok: resource_between if ok else resource_end,
        )(tokenizer)
    return resource_end(tokenizer)


def resource_destination_missing(tokenizer: Tokenizer) -> Next:
    """At something that is not a destination."""
    tokenizer.tokenize_state.unbind()
    return State.NOK


def resource_between(tokenizer: Tokenizer) -> Next:
    """After whitespace following the destination, at a title or ``)``."""
    if tokenizer.current in TITLE_MARKERS:
        tokenizer.tokenize_state.bind(
            TokenType.RESOURCE_TITLE,
            TokenType.RESOURCE_TITLE_MARKER,
            TokenType.RESOURCE_TITLE_STRING,
        )
        return tokenizer.attempt(
            partial_title.start,
            lambda ok: resource_title_after if ok else resource_title_missing,
        )(tokenizer)
    return resource_end(tokenizer)


def resource_title_after(tokenizer: Tokenizer) -> Next:
    """After the title, before optional whitespace."""
    tokenizer.tokenize_state.unbind()
    return _optional_whitespace(resource_end)(tokenizer)


def resource_title_missing(tokenizer: Tokenizer) -> Next:
    """At a marker that does not start a valid title."""
    tokenizer.tokenize_state.unbind()
    return State.NOK


def resource_end(tokenizer: Tokenizer) -> Next:
    """At ``)``."""
    if tokenizer.current != RIGHT_PAREN:
        return State.NOK
    tokenizer.enter(TokenType.RESOURCE_MARKER)
    tokenizer.consume()
    tokenizer.exit(TokenType.RESOURCE_MARKER)
    tokenizer.exit(TokenType.RESOURCE)
    return State.OK


# =========================================================================
# References: [label] and []
# =========================================================================


def reference_full_start(tokenizer: Tokenizer) -> Next:
    """At ``[`` of a full reference."""
    tokenizer.tokenize_state.bind(
        TokenType.REFERENCE, TokenType.REFERENCE_MARKER, TokenType.REFERENCE_STRING
    )
    return tokenizer.attempt(
        partial_label.start,
        lambda ok: reference_full_after if ok else reference_full_missing,
    )(tokenizer)


def reference_full_after(tokenizer: Tokenizer) -> Next:
    """After a full reference: it must name a definition."""
    tokenizer.tokenize_state.unbind()
    events = tokenizer.events
    index = len(events) - 1
    while events[index].token_type is not TokenType.REFERENCE_STRING:
        index -= 1
    end = events[index].point.offset
    while not (
        events[index].token_type is TokenType.REFERENCE_STRING and events[index].edge is Edge.ENTER
    ):
        index -= 1
    identifier = normalize_identifier(
        tokenizer.slice(events[index].point.offset, end).decode("utf-8")
    )
    if identifier in tokenizer.parse_state.definitions:
        return State.OK
    return State.NOK


def reference_full_missing(tokenizer: Tokenizer) -> Next:
    """At something that is not a label."""
    tokenizer.tokenize_state.unbind()
    return State.NOK


def reference_collapsed_start(tokenizer: Tokenizer) -> Next:
    """At ``[`` of a collapsed reference."""
    if tokenizer.current != LEFT_BRACKET:
        return State.NOK
    tokenizer.enter(TokenType.REFERENCE)
    tokenizer.enter(TokenType.REFERENCE_MARKER)
    tokenizer.consume()
    tokenizer.exit(TokenType.REFERENCE_MARKER)
    return reference_collapsed_open


def reference_collapsed_open(tokenizer: Tokenizer) -> Next:
    """After ``[``, at ``]``."""
    if tokenizer.current != RIGHT_BRACKET:
        return State.NOK
    tokenizer.enter(TokenType.REFERENCE_MARKER)
    tokenizer.consume()
    tokenizer.exit(TokenType.REFERENCE_MARKER)
    tokenizer.exit(TokenType.REFERENCE)
    return State.OK


# =========================================================================
# Resolver
# =========================================================================


def resolve_media(tokenizer: Tokenizer) -> None:
    """Wrap matched media and turn unmatched label starts into data.

    Each match becomes::

        Link|Image > Label > (label start, LabelText?, label end) , resource|reference

    At one index, closing events of inner media come before those of outer
    media, and opening events of outer media before those of inner media.
    """
    events = tokenizer.events
    edits = EditMap()

    for label_start in tokenizer.label_starts_loose + tokenizer.label_starts:
        enter_index, exit_index = label_start.start
        events[enter_index].token_type = TokenType.DATA
        events[exit_index].token_type = TokenType.DATA
        edits.add(enter_index + 1, exit_index - enter_index - 1, [])

    enters: dict[int, list[Event]] = {}
    exits: dict[int, list[Event]] = {}

    def opening(index: int, added: list[Event]) -> None:
        enters[index] = added + enters.get(index, [])

    def closing(index: int, added: list[Event]) -> None:
        exits.setdefault(index, []).extend(added)

    for media in tokenizer.media:
        start_enter, start_exit = media.start
        end_enter, end_last = media.end
        kind = TokenType.IMAGE if events[start_enter].token_type is TokenType.LABEL_IMAGE else TokenType.LINK
        # LABEL_END enter, marker enter, marker exit, LABEL_END exit
        label_end_exit = end_enter + 3

        at_start = events[start_enter].point
        opening(start_enter, [Event(Edge.ENTER, kind, at_start), Event(Edge.ENTER, TokenType.LABEL, at_start)])
        if end_enter > start_exit + 1:
            opening(start_exit + 1, [Event(Edge.ENTER, TokenType.LABEL_TEXT, events[start_exit].point)])
            closing(end_enter, [Event(Edge.EXIT, TokenType.LABEL_TEXT, events[end_enter].point)])
        closing(label_end_exit + 1, [Event(Edge.EXIT, TokenType.LABEL, events[label_end_exit].point)])
        closing(end_last + 1, [Event(Edge.EXIT, kind, events[end_last].point)])

    for index in sorted(enters.keys() | exits.keys()):
        edits.add(index, 0, exits.get(index, []) + enters.get(index, []))

    tokenizer.events = edits.consume(events)
    tokenizer.label_starts.clear()
    tokenizer.label_starts_loose.clear()
    tokenizer.media.clear()
