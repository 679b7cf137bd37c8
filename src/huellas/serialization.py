"""Event serialization: JSON round-trip and a readable dump.

Converts events to/from JSON-compatible dicts. Useful for:
- Snapshotting event streams in tests
- Handing events to consumers in another process
- Debugging and inspection (``format_events``)

All JSON output is deterministic (sorted keys).

Example:
    from huellas import parse
    from huellas.serialization import to_json, from_json

    events = parse("[a](b)")
    assert from_json(to_json(events)) == events

Thread Safety:
    All functions are pure — safe to call from any thread.

"""

import json
from typing import Any

from huellas.event import Edge, Event, Link
from huellas.location import Point
from huellas.tokens import ContentType, TokenType


def to_dict(event: Event) -> dict[str, Any]:
    """Convert an event to a JSON-compatible dict.

    Token and content types are stored by name. ``link`` is only present on
    chunk events.

    Args:
        event: Any event.

    Returns:
        Dict with ``edge``, ``token_type``, ``point`` and maybe ``link``.

    """
    result: dict[str, Any] = {
        "edge": event.edge.value,
        "token_type": event.token_type.name,
        "point": {
            "line": event.point.line,
            "column": event.point.column,
            "offset": event.point.offset,
        },
    }
    if event.link is not None:
        result["link"] = {
            "previous": event.link.previous,
            "next": event.link.next,
            "content_type": event.link.content_type.name,
        }
    return result


def from_dict(data: dict[str, Any]) -> Event:
    """Reconstruct an event from a dict made by ``to_dict``.

    Raises:
        ValueError: If the edge, token type or content type is unknown, or
            a field is missing.

    """
    try:
        edge = Edge(data["edge"])
        token_type = TokenType[data["token_type"]]
        point = Point(**data["point"])
        link = None
        if data.get("link") is not None:
            raw = data["link"]
            link = Link(raw["previous"], raw["next"], ContentType[raw["content_type"]])
    except KeyError as e:
        msg = f"Invalid serialized event: missing or unknown {e}"
        raise ValueError(msg) from e
    return Event(edge, token_type, point, link)


def to_json(events: list[Event], *, indent: int | None = None) -> str:
    """Serialize events to a JSON array.

    Args:
        events: Events to serialize.
        indent: JSON indentation level (None for compact).

    Returns:
        JSON string.

    """
    return json.dumps([to_dict(event) for event in events], sort_keys=True, indent=indent)


def from_json(data: str) -> list[Event]:
    """Deserialize events from a JSON array made by ``to_json``.

    Raises:
        ValueError: If the JSON is not an array of events.

    """
    raw = json.loads(data)
    if not isinstance(raw, list):
        msg = f"Expected a list of events, got {type(raw).__name__}"
        raise ValueError(msg)
    return [from_dict(item) for item in raw]


def format_events(events: list[Event], data: bytes | None = None) -> str:
    """Indented, one-line-per-event dump for debugging.

    Args:
        events: Events to show.
        data: Source bytes; when given, void spans show their text.

    Returns:
        Multi-line string, for example::

            enter CONTENT 1:1
              enter PARAGRAPH 1:1
                enter DATA 1:1 'a'
                exit DATA 1:2
              exit PARAGRAPH 1:2
            exit CONTENT 1:2

    """
    lines: list[str] = []
    depth = 0
    for index, event in enumerate(events):
        if event.edge is Edge.EXIT:
            depth -= 1
        line = f"{'  ' * depth}{event.edge.value} {event.token_type.name} {event.point}"
        if event.link is not None:
            line += f" [{event.link.content_type.name.lower()}]"
        if data is not None and event.edge is Edge.ENTER and index + 1 < len(events):
            following = events[index + 1]
            if following.edge is Edge.EXIT and following.token_type is event.token_type:
                text = data[event.point.offset : following.point.offset].decode("utf-8", "replace")
                line += f" {text!r}"
        lines.append(line)
        if event.edge is Edge.ENTER:
            depth += 1
    return "\n".join(lines)
