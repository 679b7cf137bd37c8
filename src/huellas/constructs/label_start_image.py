"""Label start (image): the ``![`` that may open an image."""

from __future__ import annotations

from huellas.charsets import EXCLAMATION, LEFT_BRACKET
from huellas.constructs.label_end import LabelStart, resolve_media
from huellas.tokenizer import Next, State, Tokenizer
from huellas.tokens import TokenType


def start(tokenizer: Tokenizer) -> Next:
    """At ``!``.

    ```markdown
    > | a ![b] c
          ^
    ```
    """
    if tokenizer.current != EXCLAMATION:
        return State.NOK
    tokenizer.enter(TokenType.LABEL_IMAGE)
    tokenizer.enter(TokenType.LABEL_IMAGE_MARKER)
    tokenizer.consume()
    tokenizer.exit(TokenType.LABEL_IMAGE_MARKER)
    return open_bracket


def open_bracket(tokenizer: Tokenizer) -> Next:
    """After ``!``, at ``[``."""
    if tokenizer.current != LEFT_BRACKET:
        return State.NOK

    tokenizer.enter(TokenType.LABEL_MARKER)
    tokenizer.consume()
    tokenizer.exit(TokenType.LABEL_MARKER)
    tokenizer.exit(TokenType.LABEL_IMAGE)

    # LABEL_IMAGE enter, two marker spans, LABEL_IMAGE exit
    exit_index = len(tokenizer.events) - 1
    tokenizer.label_starts.append(LabelStart(TokenType.LABEL_IMAGE, (exit_index - 5, exit_index)))
    tokenizer.register_resolver(resolve_media)
    return State.OK
