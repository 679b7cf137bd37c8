"""HTML compiler over the event stream.

Walks the flat Enter/Exit list once, after a first pass that collects
definitions, and writes HTML through StringBuilder buffers. Enough of
CommonMark is covered to check the tokenizer end to end: paragraphs, line
endings, hard breaks, escapes, character references, links and images.

Thread Safety:
All per-compile state lives on the HtmlCompiler instance, created fresh for
each compile() call. Events are only read.

"""

from __future__ import annotations

import html
from dataclasses import dataclass
from urllib.parse import quote as url_quote

from huellas.config import CompileConfig
from huellas.errors import ContractError
from huellas.event import Edge, Event
from huellas.stringbuilder import StringBuilder
from huellas.tokens import TokenType
from huellas.utils.logger import get_logger
from huellas.utils.text import (
    decode_named_character_reference,
    decode_numeric_character_reference,
    normalize_identifier,
)

logger = get_logger(__name__)

# Protocols allowed in link and image URLs unless dangerous ones are allowed
LINK_PROTOCOLS = frozenset(("http", "https", "irc", "ircs", "mailto", "xmpp"))
IMAGE_PROTOCOLS = frozenset(("http", "https"))

# Text-bearing tokens whose source bytes are output as-is (escaped)
_LITERAL_TOKENS = frozenset(
    (
        TokenType.DATA,
        TokenType.CHARACTER_ESCAPE_VALUE,
        TokenType.LINE_ENDING,
        TokenType.SPACE_OR_TAB,
    )
)


def html_escape(s: str) -> str:
    """Escape HTML special characters.

    CommonMark-compliant: escapes <, >, &, " but NOT single quotes.
    """
    return html.escape(s, quote=False).replace('"', "&quot;")


def _encode_url(url: str) -> str:
    """Percent-encode a decoded destination.

    Keeps reserved URL characters and existing ``%XX`` sequences; encodes
    spaces, backslashes, quotes and non-ASCII.
    """
    return url_quote(url, safe="/:?#[]@!$&'()*+,;=-_.~%")


def sanitize_uri(url: str, protocols: frozenset[str] | None) -> str:
    """Encode a URL for an attribute and drop it if its protocol is unsafe.

    A URL is relative (and kept) when it has no colon, or a ``/``, ``?``
    or ``#`` comes before the first colon.

    Args:
        url: Destination after escapes and references were decoded
        protocols: Allowed protocols, or None to allow any

    Returns:
        Attribute-safe URL, or an empty string
    """
    value = html_escape(_encode_url(url))
    if protocols is None:
        return value

    colon = value.find(":")
    if colon < 0:
        return value
    for delimiter in "/?#":
        position = value.find(delimiter)
        if -1 < position < colon:
            return value
    if value[:colon].lower() in protocols:
        return value
    return ""


@dataclass(frozen=True, slots=True)
class Definition:
    """Destination and title of a definition."""

    destination: str
    title: str | None


@dataclass(slots=True)
class _Media:
    # Link or image being compiled
    image: bool
    tags: bool
    label_start: int | None = None
    label_end: int | None = None
    label: str = ""
    destination: str | None = None
    title: str | None = None
    reference: str | None = None


class HtmlCompiler:
    """Compile events to HTML.

    Usage:
        >>> data = encode("[a](b)")
        >>> HtmlCompiler(tokenize(data), data).compile()
        '<p><a href="b">a</a></p>'

    Thread Safety:
        Instances are single-use. Create one per compile.

    """

    __slots__ = (
        "_events",
        "_bytes",
        "_config",
        "_definitions",
        "_buffers",
        "_media",
        "_image_depth",
        "_in_paragraph",
        "_after_block",
    )

    def __init__(self, events: list[Event], data: bytes, config: CompileConfig | None = None) -> None:
        """Initialize compiler.

        Args:
            events: Fully subtokenized events
            data: The bytes the events point into
            config: Compile configuration (defaults to CompileConfig())
        """
        self._events = events
        self._bytes = data
        self._config = config if config is not None else CompileConfig()
        self._definitions: dict[str, Definition] = {}
        self._buffers: list[StringBuilder] = [StringBuilder()]
        self._media: list[_Media] = []
        self._image_depth = 0
        self._in_paragraph = False
        self._after_block = False

    def compile(self) -> str:
        """Compile the events to an HTML string."""
        self._collect_definitions()

        events = self._events
        index = 0
        while index < len(events):
            event = events[index]
            if event.edge is Edge.ENTER:
                index = self._on_enter(index, event)
            else:
                self._on_exit(event)
            index += 1

        return self._buffers[0].build()

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _on_enter(self, index: int, event: Event) -> int:
        # Returns the index of the last event handled.
        token_type = event.token_type

        if token_type in _LITERAL_TOKENS:
            if token_type is TokenType.LINE_ENDING:
                self._line_ending()
            elif token_type is not TokenType.SPACE_OR_TAB:
                self._emit(html_escape(self._text(index)))
            return index + 1

        if token_type is TokenType.PARAGRAPH:
            self._emit("<p>")
            self._in_paragraph = True
        elif token_type is TokenType.CHARACTER_REFERENCE:
            value, index = self._reference(index)
            self._emit(html_escape(value))
        elif token_type in (TokenType.HARD_BREAK_ESCAPE, TokenType.HARD_BREAK_TRAILING):
            if self._image_depth == 0:
                self._emit("<br />")
        elif token_type in (TokenType.LINK, TokenType.IMAGE):
            image = token_type is TokenType.IMAGE
            self._media.append(_Media(image=image, tags=self._image_depth == 0))
            self._buffers.append(StringBuilder())
            if image:
                self._image_depth += 1
        elif token_type is TokenType.LABEL_TEXT:
            self._media[-1].label_start = event.point.offset
        elif token_type is TokenType.RESOURCE:
            index = self._resource(index)
        elif token_type is TokenType.REFERENCE:
            index = self._reference_label(index)
        elif token_type is TokenType.DEFINITION:
            index = self._skip(index)
        return index

    def _on_exit(self, event: Event) -> None:
        token_type = event.token_type
        if token_type is TokenType.PARAGRAPH:
            self._emit("</p>")
            self._in_paragraph = False
            self._after_block = True
        elif token_type is TokenType.LABEL_TEXT:
            self._media[-1].label_end = event.point.offset
        elif token_type is TokenType.LABEL:
            self._media[-1].label = self._buffers.pop().build()
        elif token_type in (TokenType.LINK, TokenType.IMAGE):
            self._media_exit(self._media.pop())

    def _emit(self, s: str) -> None:
        self._buffers[-1].append(s)

    def _line_ending(self) -> None:
        if self._in_paragraph:
            self._emit("\n")
        elif self._after_block:
            # Between blocks: one line ending after the block that was rendered.
            self._emit("\n")
            self._after_block = False

    # =========================================================================
    # Strings
    # =========================================================================

    def _text(self, index: int) -> str:
        # Source of the void span opened at ``index``.
        start = self._events[index].point.offset
        end = self._events[index + 1].point.offset
        return self._bytes[start:end].decode("utf-8")

    def _exit_index(self, index: int) -> int:
        token_type = self._events[index].token_type
        depth = 0
        for position in range(index, len(self._events)):
            event = self._events[position]
            if event.token_type is token_type:
                depth += 1 if event.edge is Edge.ENTER else -1
                if depth == 0:
                    return position
        raise ContractError(f"unbalanced {token_type.name}", self._events[index].point.offset)

    def _skip(self, index: int) -> int:
        return self._exit_index(index)

    def _string(self, index: int) -> tuple[str, int]:
        """Decoded value of the string span opened at ``index``.

        Returns:
            The value, and the index of the span's Exit event
        """
        end = self._exit_index(index)
        parts: list[str] = []
        position = index + 1
        while position < end:
            event = self._events[position]
            if event.edge is Edge.ENTER:
                if event.token_type in _LITERAL_TOKENS:
                    parts.append(self._text(position))
                elif event.token_type is TokenType.CHARACTER_REFERENCE:
                    value, position = self._reference(position)
                    parts.append(value)
            position += 1
        return "".join(parts), end

    def _reference(self, index: int) -> tuple[str, int]:
        """Decoded value of the character reference opened at ``index``."""
        radix = 0
        position = index + 1
        while True:
            event = self._events[position]
            if event.edge is Edge.ENTER:
                if event.token_type is TokenType.CHARACTER_REFERENCE_MARKER_NUMERIC:
                    radix = 10
                elif event.token_type is TokenType.CHARACTER_REFERENCE_MARKER_HEXADECIMAL:
                    radix = 16
                elif event.token_type is TokenType.CHARACTER_REFERENCE_VALUE:
                    value = self._text(position)
                    break
            position += 1

        if radix:
            decoded = decode_numeric_character_reference(value, radix)
        else:
            decoded = decode_named_character_reference(value) or f"&{value};"
        return decoded, self._exit_index(index)

    def _raw(self, index: int) -> tuple[str, int]:
        # Undecoded source of the span opened at ``index``, for identifiers.
        end = self._exit_index(index)
        start = self._events[index].point.offset
        return self._bytes[start : self._events[end].point.offset].decode("utf-8"), end

    # =========================================================================
    # Definitions
    # =========================================================================

    def _collect_definitions(self) -> None:
        events = self._events
        index = 0
        while index < len(events):
            event = events[index]
            if event.edge is Edge.ENTER and event.token_type is TokenType.DEFINITION:
                index = self._definition(index)
            index += 1

    def _definition(self, index: int) -> int:
        end = self._exit_index(index)
        identifier = ""
        destination = ""
        title = None

        position = index + 1
        while position < end:
            event = self._events[position]
            if event.edge is Edge.ENTER:
                if event.token_type is TokenType.DEFINITION_LABEL_STRING:
                    raw, position = self._raw(position)
                    identifier = normalize_identifier(raw)
                elif event.token_type is TokenType.DEFINITION_DESTINATION_STRING:
                    destination, position = self._string(position)
                elif event.token_type is TokenType.DEFINITION_TITLE_STRING:
                    title, position = self._string(position)
            position += 1

        # First definition of an identifier wins.
        if identifier not in self._definitions:
            self._definitions[identifier] = Definition(destination, title)
        return end

    # =========================================================================
    # Media
    # =========================================================================

    def _resource(self, index: int) -> int:
        media = self._media[-1]
        media.destination = ""
        end = self._exit_index(index)

        position = index + 1
        while position < end:
            event = self._events[position]
            if event.edge is Edge.ENTER:
                if event.token_type is TokenType.RESOURCE_DESTINATION_STRING:
                    media.destination, position = self._string(position)
                elif event.token_type is TokenType.RESOURCE_TITLE_STRING:
                    media.title, position = self._string(position)
            position += 1
        return end

    def _reference_label(self, index: int) -> int:
        end = self._exit_index(index)
        for position in range(index + 1, end):
            event = self._events[position]
            if event.edge is Edge.ENTER and event.token_type is TokenType.REFERENCE_STRING:
                raw, _ = self._raw(position)
                self._media[-1].reference = normalize_identifier(raw)
                break
        return end

    def _media_exit(self, media: _Media) -> None:
        if media.image:
            self._image_depth -= 1

        destination = media.destination
        title = media.title
        if destination is None:
            identifier = media.reference
            if identifier is None and media.label_start is not None and media.label_end is not None:
                raw = self._bytes[media.label_start : media.label_end].decode("utf-8")
                identifier = normalize_identifier(raw)
            definition = self._definitions.get(identifier or "")
            if definition is None:
                logger.debug("No definition for reference %r", identifier)
                destination = ""
            else:
                destination = definition.destination
                title = definition.title

        if not media.tags:
            self._emit(media.label)
            return

        allow_any = self._config.allow_dangerous_protocol
        title_attribute = f' title="{html_escape(title)}"' if title else ""
        if media.image:
            src = sanitize_uri(destination, None if allow_any else IMAGE_PROTOCOLS)
            self._emit(f'<img src="{src}" alt="{media.label}"{title_attribute} />')
        else:
            href = sanitize_uri(destination, None if allow_any else LINK_PROTOCOLS)
            self._emit(f'<a href="{href}"{title_attribute}>{media.label}</a>')


def compile_html(events: list[Event], data: bytes, config: CompileConfig | None = None) -> str:
    """Compile events to HTML.

    Args:
        events: Events from ``tokenize(data)``
        data: The bytes the events point into
        config: Compile configuration

    Returns:
        HTML string
    """
    return HtmlCompiler(events, data, config).compile()
