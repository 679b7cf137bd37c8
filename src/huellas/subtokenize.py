"""Re-tokenize linked chunks under their content type.

After a tokenizer run, the event list holds chunks: void spans whose bytes
still need parsing under another grammar (``ChunkContent``, ``ChunkText``,
string ``Data``, ...). Chunks that belong together are chained through
their links. One pass feeds every chain present at the start of the pass
to a fresh tokenizer as a single stream of byte ranges, then replaces each
chunk's Enter/Exit pair with the sub-events that fall inside it. The
spans around the chunks (a paragraph, a label string) stay as they are and
now contain the sub-events.

Sub-events can contain chunks of their own (a text chunk yields string
chunks for destinations), so callers repeat passes until one reports it
is done.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.content import STARTS
from huellas.errors import ContractError
from huellas.event import Edge, Event, capture_links, restore_links
from huellas.tokenizer import Tokenizer
from huellas.utils.logger import get_logger

if TYPE_CHECKING:
    from huellas.parser import ParseState

logger = get_logger(__name__)


def subtokenize(events: list[Event], parse_state: ParseState) -> tuple[list[Event], bool]:
    """Run one subtokenize pass.

    Args:
        events: Event list that may contain chunks
        parse_state: Shared per-document state

    Returns:
        The new event list, and whether it was already free of chunks

    Raises:
        ContractError: If a chain is malformed or a content type fails.
    """
    heads = [
        index
        for index, event in enumerate(events)
        if event.edge is Edge.ENTER and event.link is not None and event.link.previous is None
    ]
    if not heads:
        return events, True

    captured = capture_links(events)
    replacements: dict[int, list[Event]] = {}

    for head in heads:
        chain = _chain(events, head)
        spans = [(events[index].point, events[index + 1].point.offset) for index in chain]
        content_type = events[head].link.content_type

        tokenizer = Tokenizer(parse_state, spans)
        if not tokenizer.run(STARTS[content_type]):
            raise ContractError(
                f"{content_type.name.lower()} content did not finish", events[head].point.offset
            )
        sub_events = tokenizer.flush()
        captured.extend(capture_links(sub_events))

        ends = [end for _point, end in spans]
        for index, part in zip(chain, _divide(sub_events, ends), strict=True):
            replacements[index] = part

    result: list[Event] = []
    index = 0
    while index < len(events):
        part = replacements.get(index)
        if part is None:
            result.append(events[index])
            index += 1
        else:
            result.extend(part)
            index += 2

    restore_links(result, captured)
    logger.debug("Subtokenized %d chain(s) into %d events", len(heads), len(result))
    return result, False


def _chain(events: list[Event], head: int) -> list[int]:
    # Enter indices of the chunks linked from ``head``, in order.
    chain = []
    index: int | None = head
    while index is not None:
        event = events[index]
        closing = events[index + 1] if index + 1 < len(events) else None
        if closing is None or closing.edge is not Edge.EXIT or closing.token_type is not event.token_type:
            raise ContractError(f"chunk {event.token_type.name} is not void", event.point.offset)
        chain.append(index)
        index = event.link.next if event.link is not None else None
    return chain


def _divide(sub_events: list[Event], ends: list[int]) -> list[list[Event]]:
    """Split sub-events over the chunks they came from.

    Events are assigned in order; an Exit at a chunk's end offset stays in
    that chunk, an Enter there belongs to the next one.
    """
    parts: list[list[Event]] = [[] for _ in ends]
    chunk = 0
    last = len(ends) - 1
    for event in sub_events:
        offset = event.point.offset
        while chunk < last and (
            offset > ends[chunk] or (offset == ends[chunk] and event.edge is Edge.ENTER)
        ):
            chunk += 1
        parts[chunk].append(event)
    return parts
