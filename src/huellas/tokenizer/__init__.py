"""Continuation-passing tokenizer engine.

tokenizer/
├── __init__.py          # Re-exports
├── core.py              # Tokenizer (consume, enter, exit, attempt, drive loop)
└── state.py             # State outcomes and the TokenizeState register

Usage:
    >>> from huellas.tokenizer import State, Tokenizer
    >>> def start(tokenizer):
    ...     if tokenizer.current is None:
    ...         return State.OK
    ...     tokenizer.consume()
    ...     return start
"""

from huellas.tokenizer.core import Checkpoint, Tokenizer
from huellas.tokenizer.state import Next, State, StateFn, TokenizeState

__all__ = ["Checkpoint", "Next", "State", "StateFn", "TokenizeState", "Tokenizer"]
