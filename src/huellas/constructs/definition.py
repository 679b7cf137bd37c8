"""Definition: ``[label]: destination "title"``.

Grammar::

    definition ::= [ space_or_tab ] label ':' [ space_or_tab_eol ] destination
                   [ space_or_tab_eol title ] [ space_or_tab ] ( eol | eof )

Only tried at the start of a content block or right after another
definition, so a definition never interrupts a paragraph.

The identifier of each definition is collected by the parser between
subtokenize passes, before any text is parsed, so references can point to
definitions further down the document.
"""

from __future__ import annotations

from huellas.charsets import COLON, LEFT_BRACKET, LINE_FEED
from huellas.constructs import partial_destination, partial_label, partial_title
from huellas.constructs.partial_space_or_tab import space_or_tab, space_or_tab_eol
from huellas.tokenizer import Next, State, Tokenizer
from huellas.tokens import TokenType


def start(tokenizer: Tokenizer) -> Next:
    """At the start of a definition.

    ```markdown
    > | [a]: b "c"
        ^
    ```
    """
    tokenizer.enter(TokenType.DEFINITION)
    return tokenizer.attempt(space_or_tab, lambda _ok: before)(tokenizer)


def before(tokenizer: Tokenizer) -> Next:
    """After optional whitespace, at ``[``."""
    if tokenizer.current != LEFT_BRACKET:
        return State.NOK
    tokenizer.tokenize_state.bind(
        TokenType.DEFINITION_LABEL,
        TokenType.DEFINITION_LABEL_MARKER,
        TokenType.DEFINITION_LABEL_STRING,
    )
    return tokenizer.attempt(
        partial_label.start, lambda ok: label_after if ok else label_nok
    )(tokenizer)


def label_after(tokenizer: Tokenizer) -> Next:
    """After the label, at ``:``."""
    tokenizer.tokenize_state.unbind()
    if tokenizer.current != COLON:
        return State.NOK
    tokenizer.enter(TokenType.DEFINITION_MARKER)
    tokenizer.consume()
    tokenizer.exit(TokenType.DEFINITION_MARKER)
    return marker_after


def label_nok(tokenizer: Tokenizer) -> Next:
    tokenizer.tokenize_state.unbind()
    return State.NOK


def marker_after(tokenizer: Tokenizer) -> Next:
    """After ``:``, before optional whitespace and one line ending."""
    return tokenizer.attempt(space_or_tab_eol, lambda _ok: destination_before)(tokenizer)


def destination_before(tokenizer: Tokenizer) -> Next:
    """At the destination."""
    tokenizer.tokenize_state.bind(
        TokenType.DEFINITION_DESTINATION,
        TokenType.DEFINITION_DESTINATION_LITERAL,
        TokenType.DEFINITION_DESTINATION_LITERAL_MARKER,
        TokenType.DEFINITION_DESTINATION_RAW,
        TokenType.DEFINITION_DESTINATION_STRING,
    )
    return tokenizer.attempt(
        partial_destination.start,
        lambda ok: destination_after if ok else destination_missing,
    )(tokenizer)


def destination_after(tokenizer: Tokenizer) -> Next:
    """After the destination, at an optional title."""
    tokenizer.tokenize_state.unbind()
    return tokenizer.attempt(title_before, lambda _ok: after)(tokenizer)


def destination_missing(tokenizer: Tokenizer) -> Next:
    tokenizer.tokenize_state.unbind()
    return State.NOK


def after(tokenizer: Tokenizer) -> Next:
    """After the destination or title, before optional trailing whitespace."""
    return tokenizer.attempt(space_or_tab, lambda _ok: after_whitespace)(tokenizer)


def after_whitespace(tokenizer: Tokenizer) -> Next:
    """At the end of the line."""
    if tokenizer.current is None or tokenizer.current == LINE_FEED:
        tokenizer.exit(TokenType.DEFINITION)
        return State.OK
    return State.NOK


def title_before(tokenizer: Tokenizer) -> Next:
    """After the destination: a title needs whitespace before it."""
    return tokenizer.attempt(
        space_or_tab_eol, lambda ok: title_before_marker if ok else State.NOK
    )(tokenizer)


def title_before_marker(tokenizer: Tokenizer) -> Next:
    """At the title's opening marker."""
    tokenizer.tokenize_state.bind(
        TokenType.DEFINITION_TITLE,
        TokenType.DEFINITION_TITLE_MARKER,
        TokenType.DEFINITION_TITLE_STRING,
    )
    return tokenizer.attempt(
        partial_title.start, lambda ok: title_after if ok else title_missing
    )(tokenizer)


def title_after(tokenizer: Tokenizer) -> Next:
    """After the title, before optional trailing whitespace."""
    tokenizer.tokenize_state.unbind()
    return tokenizer.attempt(space_or_tab, lambda _ok: title_after_whitespace)(tokenizer)


def title_missing(tokenizer: Tokenizer) -> Next:
    tokenizer.tokenize_state.unbind()
    return State.NOK


def title_after_whitespace(tokenizer: Tokenizer) -> Next:
    """After the title and trailing whitespace: only the line may end here."""
    if tokenizer.current is None or tokenizer.current == LINE_FEED:
        return State.OK
    return State.NOK
