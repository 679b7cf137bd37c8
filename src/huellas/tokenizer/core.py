"""Continuation-passing tokenizer with exact rollback.

Constructs are written as small state machines. A state function looks at
``tokenizer.current``, calls ``enter``/``consume``/``exit``, and returns the
next state function, or ``State.OK``/``State.NOK`` when it is done. The
tokenizer calls the held function once per byte in a flat loop, so stack
depth never depends on input length.

Backtracking is a value snapshot: ``attempt`` records the position, the
number of events, the open-token stack and the scratch register, runs a
construct, and on failure puts all of it back before continuing.

Thread Safety:
Tokenizer instances are single-use. Create one per byte range.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from huellas.errors import ContractError
from huellas.event import Edge, Event, Link
from huellas.location import Point
from huellas.tokenizer.state import Next, State, StateFn, TokenizeState
from huellas.tokens import ContentType, TokenType

if TYPE_CHECKING:
    from huellas.constructs.label_end import LabelStart, Media
    from huellas.parser import ParseState

Resolver = Callable[["Tokenizer"], None]


@dataclass(frozen=True, slots=True)
class Checkpoint:
    """Everything ``attempt`` needs to undo a failed construct.

    Attributes:
        point: Position in the source
        span: Index of the byte range being fed
        events_len: Number of events at capture time
        stack: Open token types, innermost last
        tokenize_state: Copy of the scratch register

    """

    point: Point
    span: int
    events_len: int
    stack: tuple[TokenType, ...]
    tokenize_state: TokenizeState


@dataclass(slots=True)
class _Attempt:
    checkpoint: Checkpoint
    done: Callable[[bool], Next]
    revert: bool


class Tokenizer:
    """Drive state functions over one or more byte ranges.

    A document is one range. The subtokenizer feeds the ranges of a chain of
    linked chunks; the gaps between them are skipped, and event points keep
    their absolute offsets.

    Usage:
        >>> tokenizer = Tokenizer(parse_state)
        >>> ok = tokenizer.run(flow.start)
        >>> events = tokenizer.flush()

    Thread Safety:
        Tokenizer instances are single-use and not thread-safe.

    """

    __slots__ = (
        "parse_state",
        "events",
        "tokenize_state",
        "consumed",
        # Media bookkeeping for the text content type; not rolled back
        "label_starts",
        "label_starts_loose",
        "media",
        "_bytes",
        "_spans",
        "_span",
        "_point",
        "_stack",
        "_attempts",
        "_resolvers",
    )

    def __init__(
        self,
        parse_state: ParseState,
        spans: list[tuple[Point, int]] | None = None,
    ) -> None:
        """Initialize tokenizer over the parse state's bytes.

        Args:
            parse_state: Shared per-document state (bytes, config, definitions)
            spans: Byte ranges to feed, as (start point, end offset); defaults
                to the whole document
        """
        self.parse_state = parse_state
        self._bytes = parse_state.bytes
        self._spans = spans if spans else [(Point.start(), len(self._bytes))]
        self._span = 0
        self._point = self._spans[0][0]
        self._stack: list[TokenType] = []
        self._attempts: list[_Attempt] = []
        self._resolvers: list[Resolver] = []

        self.events: list[Event] = []
        self.tokenize_state = TokenizeState()
        self.consumed = True

        self.label_starts: list[LabelStart] = []
        self.label_starts_loose: list[LabelStart] = []
        self.media: list[Media] = []

    # =========================================================================
    # Position
    # =========================================================================

    @property
    def point(self) -> Point:
        """Current position."""
        return self._point

    @property
    def current(self) -> int | None:
        """Byte at the current position, or None at the end of input."""
        offset = self._point.offset
        if offset < self._spans[self._span][1]:
            return self._bytes[offset]
        following = self._next_span()
        if following is None:
            return None
        return self._bytes[self._spans[following][0].offset]

    def peek(self, distance: int = 1) -> int | None:
        """Byte ``distance`` bytes ahead within the current range, if any."""
        offset = self._point.offset + distance
        if offset < self._spans[self._span][1]:
            return self._bytes[offset]
        return None

    def slice(self, start: int, end: int) -> bytes:
        """Source bytes between two absolute offsets."""
        return self._bytes[start:end]

    def _next_span(self) -> int | None:
        index = self._span + 1
        while index < len(self._spans):
            start, end = self._spans[index]
            if start.offset < end:
                return index
            index += 1
        return None

    def _skip(self) -> None:
        # Move into the next range once the current one is exhausted.
        if self._point.offset < self._spans[self._span][1]:
            return
        following = self._next_span()
        if following is not None:
            self._span = following
            self._point = self._spans[following][0]

    # =========================================================================
    # Primitives used by constructs
    # =========================================================================

    def consume(self) -> None:
        """Commit the current byte and move past it.

        Raises:
            ContractError: If there is no byte, or one was already consumed
                in this step.
        """
        if self.consumed:
            raise ContractError("expected byte to not be consumed yet", self._point.offset)
        self._skip()
        offset = self._point.offset
        if offset >= self._spans[self._span][1]:
            raise ContractError("cannot consume at end of input", offset)

        if self._bytes[offset] == 0x0A:
            self._point = Point(self._point.line + 1, 1, offset + 1)
        else:
            self._point = Point(self._point.line, self._point.column + 1, offset + 1)
        self.consumed = True

    def enter(self, token_type: TokenType, content_type: ContentType | None = None) -> None:
        """Open a span at the current position.

        Args:
            token_type: Role of the span
            content_type: Grammar for re-parsing, which makes the span a chunk
        """
        self._skip()
        link = Link(None, None, content_type) if content_type is not None else None
        self.events.append(Event(Edge.ENTER, token_type, self._point, link))
        self._stack.append(token_type)

    def exit(self, token_type: TokenType) -> None:
        """Close the innermost open span.

        Raises:
            ContractError: If ``token_type`` is not the innermost open span.
        """
        if not self._stack or self._stack[-1] is not token_type:
            current = self._stack[-1].name if self._stack else "nothing"
            raise ContractError(
                f"cannot exit {token_type.name}, innermost open token is {current}",
                self._point.offset,
            )
        self._stack.pop()
        self.events.append(Event(Edge.EXIT, token_type, self._point))

    def register_resolver(self, resolver: Resolver) -> None:
        """Run ``resolver`` on ``flush``; registering twice is a no-op."""
        if resolver not in self._resolvers:
            self._resolvers.append(resolver)

    # =========================================================================
    # Backtracking
    # =========================================================================

    def capture(self) -> Checkpoint:
        """Snapshot everything a failed attempt must restore."""
        return Checkpoint(
            point=self._point,
            span=self._span,
            events_len=len(self.events),
            stack=tuple(self._stack),
            tokenize_state=self.tokenize_state.copy(),
        )

    def restore(self, checkpoint: Checkpoint) -> None:
        """Go back to ``checkpoint`` exactly."""
        kept = checkpoint.events_len
        for event in self.events[kept:]:
            # Surviving chunks must not point into the dropped tail.
            if event.link is not None and event.link.previous is not None:
                if event.link.previous < kept:
                    previous = self.events[event.link.previous].link
                    if previous is not None:
                        previous.next = None
        del self.events[kept:]
        self._point = checkpoint.point
        self._span = checkpoint.span
        self._stack[:] = checkpoint.stack
        self.tokenize_state.restore(checkpoint.tokenize_state)

    def attempt(self, construct: StateFn, done: Callable[[bool], Next]) -> StateFn:
        """Try ``construct``; keep its work on success, undo it on failure.

        The returned state function is meant to be called on the current
        byte (``return tokenizer.attempt(x, done)(tokenizer)``) or returned
        as the continuation for the next byte.

        Args:
            construct: Start state of the construct to try
            done: Receives whether it matched, returns where to go next

        Returns:
            State function that starts the attempt
        """
        return self._speculate(construct, done, revert=False)

    def check(self, construct: StateFn, done: Callable[[bool], Next]) -> StateFn:
        """Like ``attempt``, but always undo: pure lookahead."""
        return self._speculate(construct, done, revert=True)

    def _speculate(
        self, construct: StateFn, done: Callable[[bool], Next], *, revert: bool
    ) -> StateFn:
        def start(tokenizer: Tokenizer) -> Next:
            tokenizer._attempts.append(_Attempt(tokenizer.capture(), done, revert))
            return construct(tokenizer)

        return start

    def _settle(self, ok: bool) -> Next:
        attempt = self._attempts.pop()
        if attempt.revert or not ok:
            self.restore(attempt.checkpoint)
        return attempt.done(ok)

    # =========================================================================
    # Drive loop
    # =========================================================================

    def _step(self, state_fn: StateFn) -> Next:
        self.consumed = False
        result = state_fn(self)
        if not isinstance(result, State) and not self.consumed:
            raise ContractError("expected byte to be consumed before continuing", self._point.offset)
        return result

    def run(self, start: StateFn) -> bool:
        """Feed bytes to ``start`` and its continuations until it finishes.

        Args:
            start: First state function, called on the current byte

        Returns:
            Whether the outermost construct ended in ``State.OK``
        """
        result = self._step(start)
        while True:
            if isinstance(result, State):
                if not self._attempts:
                    return result is State.OK
                result = self._settle(result is State.OK)
                if isinstance(result, State):
                    continue
            result = self._step(result)

    def flush(self) -> list[Event]:
        """Run registered resolvers and hand over the final events.

        Raises:
            ContractError: If spans are still open.
        """
        if self._stack:
            names = ", ".join(token_type.name for token_type in self._stack)
            raise ContractError(f"unclosed tokens at end of run: {names}", self._point.offset)
        for resolver in self._resolvers:
            resolver(self)
        return self.events
