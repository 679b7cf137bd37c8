"""Label: the bracketed text of definitions and full references.

Grammar::

    ; Restriction: maximum 999 bytes between the brackets.
    ; Restriction: no blank lines.
    ; Restriction: at least one byte that is not whitespace or a line ending.
    label ::= '[' *( label_text | label_escape ) ']'
    label_text ::= byte - '[' - '\\' - ']'
    label_escape ::= '\\' [ '[' | '\\' | ']' ]

The size limit comes from ``ParseConfig.link_reference_size_max``.

The caller binds the token roles before attempting the label:
``token_1`` wraps the whole label, ``token_2`` marks each bracket and
``token_3`` wraps the text between them. The text is made of data chunks
with the string content type, linked across line endings, so escapes and
character references inside it are recognized later.

This is not the ``[x]`` that starts a link or image; that part is split
into a label start and a label end so it can contain other text
constructs. A label is only the ``[y]`` of a definition or of a full
reference ``[x][y]``.

"""

from __future__ import annotations

from huellas.charsets import BACKSLASH, LABEL_ESCAPABLE, LEFT_BRACKET, LINE_FEED, RIGHT_BRACKET, SPACE_OR_TAB
from huellas.constructs.partial_space_or_tab import space_or_tab_eol_with_options
from huellas.event import link
from huellas.tokenizer import Next, State, Tokenizer
from huellas.tokens import ContentType, TokenType


def start(tokenizer: Tokenizer) -> Next:
    """Before a label.

    ```markdown
    > | [a]
        ^
    ```
    """
    if tokenizer.current != LEFT_BRACKET:
        return State.NOK

    roles = tokenizer.tokenize_state
    tokenizer.enter(roles.token_1)
    tokenizer.enter(roles.token_2)
    tokenizer.consume()
    tokenizer.exit(roles.token_2)
    tokenizer.enter(roles.token_3)
    return at_break


def at_break(tokenizer: Tokenizer) -> Next:
    """In a label, at something.

    ```markdown
    > | [a]
         ^
    ```
    """
    scratch = tokenizer.tokenize_state
    current = tokenizer.current

    if (
        scratch.size > tokenizer.parse_state.config.link_reference_size_max
        or current is None
        or current == LEFT_BRACKET
        or (current == RIGHT_BRACKET and not scratch.seen)
    ):
        return _nok(tokenizer)

    if current == LINE_FEED:
        return tokenizer.attempt(
            space_or_tab_eol_with_options(ContentType.STRING, scratch.connect),
            lambda ok: after_eol if ok else at_blank_line,
        )(tokenizer)

    if current == RIGHT_BRACKET:
        tokenizer.exit(scratch.token_3)
        tokenizer.enter(scratch.token_2)
        tokenizer.consume()
        tokenizer.exit(scratch.token_2)
        tokenizer.exit(scratch.token_1)
        scratch.connect = False
        scratch.seen = False
        scratch.size = 0
        return State.OK

    tokenizer.enter(TokenType.DATA, ContentType.STRING)
    if scratch.connect:
        link(tokenizer.events, len(tokenizer.events) - 1)
    else:
        scratch.connect = True
    return label(tokenizer)


def after_eol(tokenizer: Tokenizer) -> Next:
    """In a label, after a line ending and any following whitespace.

    ```markdown
      | [a
    > | b]
        ^
    ```
    """
    tokenizer.tokenize_state.connect = True
    return at_break(tokenizer)


def at_blank_line(tokenizer: Tokenizer) -> Next:
    """In a label, at a line ending followed by a blank line.

    ```markdown
    > | [a
           ^
      |
    ```
    """
    tokenizer.tokenize_state.marker = 0
    return _nok(tokenizer)


def label(tokenizer: Tokenizer) -> Next:
    """In a label, in text.

    ```markdown
    > | [a]
         ^
    ```
    """
    current = tokenizer.current
    scratch = tokenizer.tokenize_state

    if current is None or current in (LINE_FEED, LEFT_BRACKET, RIGHT_BRACKET):
        tokenizer.exit(TokenType.DATA)
        return at_break(tokenizer)

    if scratch.size > tokenizer.parse_state.config.link_reference_size_max:
        tokenizer.exit(TokenType.DATA)
        return at_break(tokenizer)

    tokenizer.consume()
    scratch.size += 1
    if not scratch.seen and current not in SPACE_OR_TAB:
        scratch.seen = True
    return escape if current == BACKSLASH else label


def escape(tokenizer: Tokenizer) -> Next:
    """After ``\\`` in a label.

    ```markdown
    > | [a\\*a]
            ^
    ```
    """
    if tokenizer.current in LABEL_ESCAPABLE:
        tokenizer.consume()
        tokenizer.tokenize_state.size += 1
        return label
    return label(tokenizer)


def _nok(tokenizer: Tokenizer) -> State:
    scratch = tokenizer.tokenize_state
    scratch.connect = False
    scratch.seen = False
    scratch.size = 0
    return State.NOK
