"""Label start (link): the ``[`` that may open a link.

Whether it does is only known when a matching label end is found; until
then the start waits in ``tokenizer.label_starts``. Starts that never match
are turned back into data by the media resolver.
"""

from __future__ import annotations

from huellas.charsets import LEFT_BRACKET
from huellas.constructs.label_end import LabelStart, resolve_media
from huellas.tokenizer import Next, State, Tokenizer
from huellas.tokens import TokenType


def start(tokenizer: Tokenizer) -> Next:
    """At ``[``.

    ```markdown
    > | a [b] c
          ^
    ```
    """
    if tokenizer.current != LEFT_BRACKET:
        return State.NOK

    enter_index = len(tokenizer.events)
    tokenizer.enter(TokenType.LABEL_LINK)
    tokenizer.enter(TokenType.LABEL_MARKER)
    tokenizer.consume()
    tokenizer.exit(TokenType.LABEL_MARKER)
    tokenizer.exit(TokenType.LABEL_LINK)
    tokenizer.label_starts.append(
        LabelStart(TokenType.LABEL_LINK, (enter_index, len(tokenizer.events) - 1))
    )
    tokenizer.register_resolver(resolve_media)
    return State.OK
