"""Interpreter modes

The machine is always in exactly one mode, which decides what happens to the
next token. Nested modes (a definition, a comment) save the enclosing mode on
the mode stack, and restore it when they end.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..exceptions import UserResolvableError
from .instruction import Instruction


class ModeViolation(UserResolvableError):
    """Bad nesting"""


@dataclass(frozen=True)
class ExecuteMode:
    """Tokens are resolved and run immediately"""

    def serialise(self) -> list:
        return [type(self).__name__]


@dataclass
class CompileMode:
    """Tokens are recorded into the body of a new word

    The first token after `:' becomes the name, so name is None until then.
    """

    name: Optional[str] = None
    body: List[Instruction] = field(default_factory=list)

    def serialise(self) -> list:
        return [type(self).__name__, self.name, [i.serialise() for i in self.body]]


@dataclass(frozen=True)
class CommentMode:
    """Tokens are discarded until `)'"""

    def serialise(self) -> list:
        return [type(self).__name__]

