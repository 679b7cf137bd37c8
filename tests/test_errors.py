"""Error types and malformed input.

Malformed Markdown never raises: it degrades to text. Errors are reserved
for broken internal contracts.
"""

import pytest

from huellas import ContractError, HuellasError, to_html


class TestContractErrorFormatting:
    """ContractError messages."""

    def test_message_only(self) -> None:
        err = ContractError("bad exit")
        assert str(err) == "bad exit"
        assert err.message == "bad exit"
        assert err.offset is None

    def test_with_offset(self) -> None:
        err = ContractError("bad exit", 7)
        assert str(err) == "bad exit (at byte 7)"
        assert err.offset == 7

    def test_hierarchy(self) -> None:
        assert issubclass(ContractError, HuellasError)
        assert issubclass(HuellasError, Exception)


class TestMalformedInput:
    """Input that looks like constructs but is not."""

    @pytest.mark.parametrize(
        "source",
        [
            "[",
            "]",
            "![",
            "[]()",
            "[a](<",
            "[a]:",
            "[a]: <",
            '[a]: b "',
            "&#",
            "&#x",
            "\\",
            "[" * 200,
            "]" * 200,
            "[a](" + "(" * 100,
            "[" + "a" * 2000 + "](b)",
            "\x00",
        ],
    )
    def test_never_raises(self, source: str) -> None:
        assert isinstance(to_html(source), str)

    def test_long_link_text_is_still_a_link(self) -> None:
        """The size limit applies to reference labels, not link text."""
        text = "a" * 1000
        assert to_html(f"[{text}](b)") == f'<p><a href="b">{text}</a></p>'

    def test_oversized_definition_label_is_text(self) -> None:
        label = "a" * 1000
        assert to_html(f"[{label}]: /u") == f"<p>[{label}]: /u</p>"
