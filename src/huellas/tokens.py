"""Token and content type vocabulary.

Every event names a TokenType, the semantic role of the span it opens or
closes. Chunk events additionally carry a ContentType that selects the
grammar used to re-parse their bytes.

Thread Safety:
Both are enums (inherently immutable).

"""

from enum import Enum, auto


class ContentType(Enum):
    """Grammar that governs the inside of a span.

    - FLOW: block structure (blank lines, content blocks)
    - CONTENT: definitions and paragraphs
    - STRING: escapes and character references only
    - TEXT: everything in STRING plus links, images and breaks

    """

    FLOW = auto()
    CONTENT = auto()
    STRING = auto()
    TEXT = auto()


class TokenType(Enum):
    """Token types found in the event stream.

    Organized by category for clarity:
    - Generic (data, whitespace, line endings)
    - Flow and content (chunks, paragraphs)
    - Escapes, references and breaks
    - Definitions
    - Media (links, images, their labels, resources and references)

    """

    # Generic
    DATA = auto()
    SPACE_OR_TAB = auto()
    LINE_ENDING = auto()
    BLANK_LINE_ENDING = auto()

    # Flow and content
    CONTENT = auto()
    CHUNK_CONTENT = auto()
    CHUNK_TEXT = auto()
    PARAGRAPH = auto()

    # Escapes: \*
    CHARACTER_ESCAPE = auto()
    CHARACTER_ESCAPE_MARKER = auto()
    CHARACTER_ESCAPE_VALUE = auto()

    # References: &amp; &#123; &#x7b;
    CHARACTER_REFERENCE = auto()
    CHARACTER_REFERENCE_MARKER = auto()  # &
    CHARACTER_REFERENCE_MARKER_NUMERIC = auto()  # #
    CHARACTER_REFERENCE_MARKER_HEXADECIMAL = auto()  # x or X
    CHARACTER_REFERENCE_MARKER_SEMI = auto()  # ;
    CHARACTER_REFERENCE_VALUE = auto()

    # Breaks
    HARD_BREAK_ESCAPE = auto()  # \ before a line ending
    HARD_BREAK_TRAILING = auto()  # two or more trailing spaces

    # Definitions: [label]: destination "title"
    DEFINITION = auto()
    DEFINITION_LABEL = auto()
    DEFINITION_LABEL_MARKER = auto()
    DEFINITION_LABEL_STRING = auto()
    DEFINITION_MARKER = auto()  # :
    DEFINITION_DESTINATION = auto()
    DEFINITION_DESTINATION_LITERAL = auto()
    DEFINITION_DESTINATION_LITERAL_MARKER = auto()
    DEFINITION_DESTINATION_RAW = auto()
    DEFINITION_DESTINATION_STRING = auto()
    DEFINITION_TITLE = auto()
    DEFINITION_TITLE_MARKER = auto()
    DEFINITION_TITLE_STRING = auto()

    # Media wrappers, added by the media resolver
    LINK = auto()
    IMAGE = auto()
    LABEL = auto()
    LABEL_TEXT = auto()

    # Media parts
    LABEL_LINK = auto()  # [
    LABEL_IMAGE = auto()  # ![
    LABEL_IMAGE_MARKER = auto()  # !
    LABEL_MARKER = auto()  # [ or ]
    LABEL_END = auto()  # ]

    # Resources: (destination "title")
    RESOURCE = auto()
    RESOURCE_MARKER = auto()
    RESOURCE_DESTINATION = auto()
    RESOURCE_DESTINATION_LITERAL = auto()
    RESOURCE_DESTINATION_LITERAL_MARKER = auto()
    RESOURCE_DESTINATION_RAW = auto()
    RESOURCE_DESTINATION_STRING = auto()
    RESOURCE_TITLE = auto()
    RESOURCE_TITLE_MARKER = auto()
    RESOURCE_TITLE_STRING = auto()

    # References: [label] after a label end
    REFERENCE = auto()
    REFERENCE_MARKER = auto()
    REFERENCE_STRING = auto()


