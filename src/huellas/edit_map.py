"""Batched edits to an event list.

Resolvers decide on many insertions and removals while walking events by
their original indices. Collecting them here and applying them once keeps
those indices valid during the walk, and chunk links are re-pointed at the
end so they survive the shift.

"""

from __future__ import annotations

from huellas.event import Event, capture_links, restore_links


class EditMap:
    """Insertions and removals keyed by original event index.

    Usage:
        >>> edits = EditMap()
        >>> edits.add(3, 0, [enter, exit])  # insert before event 3
        >>> edits.add(7, 2, [])  # drop events 7 and 8
        >>> events = edits.consume(events)

    Additions at one index keep the order they were added in.

    """

    __slots__ = ("_edits",)

    def __init__(self) -> None:
        self._edits: dict[int, tuple[int, list[Event]]] = {}

    def add(self, index: int, remove: int, add: list[Event]) -> None:
        """Remove ``remove`` events at ``index`` and insert ``add`` there."""
        removed, added = self._edits.get(index, (0, []))
        self._edits[index] = (removed + remove, added + add)

    def __bool__(self) -> bool:
        return bool(self._edits)

    def consume(self, events: list[Event]) -> list[Event]:
        """Apply all edits and return the new list.

        Args:
            events: Original event list (its links are updated in place)

        Returns:
            New event list with links pointing at the new indices
        """
        if not self._edits:
            return events

        captured = capture_links(events)
        result: list[Event] = []
        index = 0
        length = len(events)
        while index <= length:
            edit = self._edits.get(index)
            if edit is not None:
                removed, added = edit
                result.extend(added)
                if removed:
                    index += removed
                    continue
            if index < length:
                result.append(events[index])
            index += 1

        self._edits.clear()
        restore_links(result, captured)
        return result
