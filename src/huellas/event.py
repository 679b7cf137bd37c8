"""Enter/Exit events and chunk linking.

The tokenizer produces a flat list of events. Nesting is implicit: every
Enter is closed by exactly one Exit of the same token type, innermost first.

Chunks are spans whose bytes get re-parsed later under another grammar.
Chunks that form one logical run (for example the data before and after a
line ending inside a label) are chained through their ``link`` so the
subtokenizer can feed them as a single stream.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from huellas.errors import ContractError
from huellas.location import Point
from huellas.tokens import ContentType, TokenType


class Edge(Enum):
    """Which side of a span an event marks."""

    ENTER = "enter"
    EXIT = "exit"


@dataclass(slots=True)
class Link:
    """Chunk linkage.

    Attributes:
        previous: Index of the previous chunk's Enter event, if any
        next: Index of the next chunk's Enter event, if any
        content_type: Grammar used to re-parse the chunk

    """

    previous: int | None
    next: int | None
    content_type: ContentType


@dataclass(slots=True)
class Event:
    """Something that happened at a point.

    Attributes:
        edge: Enter or exit
        token_type: Semantic role of the span
        point: Where it happened
        link: Chunk linkage (Enter events of chunks only)

    """

    edge: Edge
    token_type: TokenType
    point: Point
    link: Link | None = None

    @property
    def content_type(self) -> ContentType | None:
        """Content type of the chunk this event opens, if any."""
        return self.link.content_type if self.link is not None else None

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        return f"Event({self.edge.name}, {self.token_type.name}, {self.point.offset})"


def link(events: list[Event], index: int) -> None:
    """Link the chunk at ``index`` to the chunk right before it.

    The previous chunk must be a closed void span directly preceding the
    new Enter, so its Enter sits two events back.

    Args:
        events: Event list being built
        index: Index of the Enter event of the new chunk
    """
    link_to(events, index - 2, index)


def link_to(events: list[Event], previous: int, next: int) -> None:
    """Chain two chunks together.

    Args:
        events: Event list being built
        previous: Index of the earlier chunk's Enter event
        next: Index of the later chunk's Enter event

    Raises:
        ContractError: If either index is not a chunk Enter, or the chunks
            disagree on content type.
    """
    if previous < 0 or previous >= next:
        raise ContractError(f"cannot link chunk {next} to {previous}")

    before = events[previous]
    after = events[next]
    if before.edge is not Edge.ENTER or before.link is None:
        raise ContractError("expected previous event to open a chunk", before.point.offset)
    if after.edge is not Edge.ENTER or after.link is None:
        raise ContractError("expected next event to open a chunk", after.point.offset)
    if before.link.content_type is not after.link.content_type:
        raise ContractError("cannot link chunks of different content types", after.point.offset)

    before.link.next = next
    after.link.previous = previous


def capture_links(events: list[Event]) -> list[tuple[Event, Event | None, Event | None]]:
    """Record chunk links as event identities instead of indices.

    Use before rebuilding an event list (insertions, removals, splices);
    pass the result to ``restore_links`` on the rebuilt list.

    Args:
        events: Event list whose links are expressed as indices

    Returns:
        (event, previous event, next event) for every linked event
    """
    captured = []
    for event in events:
        if event.link is not None:
            previous = events[event.link.previous] if event.link.previous is not None else None
            following = events[event.link.next] if event.link.next is not None else None
            captured.append((event, previous, following))
    return captured


def restore_links(
    events: list[Event], captured: list[tuple[Event, Event | None, Event | None]]
) -> None:
    """Re-express captured links as indices into a rebuilt list.

    Links to events that no longer exist are cleared.

    Args:
        events: Rebuilt event list
        captured: Output of ``capture_links`` on the original list(s)
    """
    positions = {id(event): index for index, event in enumerate(events)}
    for event, previous, following in captured:
        if id(event) not in positions or event.link is None:
            continue
        event.link.previous = positions.get(id(previous)) if previous is not None else None
        event.link.next = positions.get(id(following)) if following is not None else None
