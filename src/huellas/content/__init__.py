"""Content types: which constructs apply where.

- ``flow``: the document, made of blank lines and content blocks
- ``content``: definitions followed by a paragraph
- ``string``: escapes and character references
- ``text``: string plus links, images and hard breaks

Each module exposes ``start``, the state function the tokenizer runs for a
chunk of that content type.
"""

from huellas.content import content, flow, string, text
from huellas.tokens import ContentType

STARTS = {
    ContentType.FLOW: flow.start,
    ContentType.CONTENT: content.start,
    ContentType.STRING: string.start,
    ContentType.TEXT: text.start,
}

__all__ = ["STARTS", "content", "flow", "string", "text"]
