"""Continuation outcomes and the tokenize-state register.

A state function takes the tokenizer and returns what happens next: a
terminal ``State.OK`` or ``State.NOK``, or another state function to call
with the next byte. That returned function *is* the continuation.

The register is scratch space shared by whichever construct is active.
Every construct leaves it at its defaults on every exit path, so the same
construct can be entered again from anywhere.

"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, fields, replace
from enum import Enum, auto
from typing import TYPE_CHECKING, TypeAlias

from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer.core import Tokenizer


class State(Enum):
    """Terminal outcome of a construct."""

    OK = auto()
    NOK = auto()


StateFn: TypeAlias = Callable[["Tokenizer"], "State | StateFn"]
Next: TypeAlias = "State | StateFn"


@dataclass(slots=True)
class TokenizeState:
    """Scratch register lent to the active construct.

    Attributes:
        size: Byte counter (label size, paren balance, ...)
        seen: Whether non-whitespace content was observed
        connect: Whether the next chunk links to the previous one
        marker: Delimiter byte (title quote, ...), 0 when unset
        token_1: Outer span role
        token_2: Boundary marker role
        token_3: Inner text role
        token_4: Extra role (raw destination)
        token_5: Extra role (destination string)

    """

    size: int = 0
    seen: bool = False
    connect: bool = False
    marker: int = 0
    token_1: TokenType | None = None
    token_2: TokenType | None = None
    token_3: TokenType | None = None
    token_4: TokenType | None = None
    token_5: TokenType | None = None

    def copy(self) -> TokenizeState:
        """Value copy for checkpoints."""
        return replace(self)

    def restore(self, other: TokenizeState) -> None:
        """Overwrite every field with the values of ``other``."""
        for f in fields(self):
            setattr(self, f.name, getattr(other, f.name))

    def is_default(self) -> bool:
        """Whether every field reads as its default."""
        return self == TokenizeState()

    def bind(
        self,
        token_1: TokenType,
        token_2: TokenType,
        token_3: TokenType,
        token_4: TokenType | None = None,
        token_5: TokenType | None = None,
    ) -> None:
        """Assign token roles before attempting a partial construct."""
        self.token_1 = token_1
        self.token_2 = token_2
        self.token_3 = token_3
        self.token_4 = token_4
        self.token_5 = token_5

    def unbind(self) -> None:
        """Clear token roles after a partial construct finished."""
        self.token_1 = None
        self.token_2 = None
        self.token_3 = None
        self.token_4 = None
        self.token_5 = None
