"""The ToyForth machine

Tokens come in through feed(). What happens to each one depends on the current
mode (see modes.py):

- execute: resolve it to an Instruction and run it now
- compile: the first token names the new word, and the rest are resolved and
  recorded in its body. `;' and `(' are run instead of recorded.
- comment: discard it, unless it's `)'

Instructions themselves are evaluated by evali, which switches on the
instruction type.
"""

import logging
import sys
from functools import singledispatchmethod
from types import MappingProxyType
from typing import Optional, TextIO

from ..exceptions import (
    ForthError,
    SourceLocation,
    UnexpectedError,
    UserResolvableError,
)
from ..reader import index_column, parse_numeral, tokenize
from .dictionary import Dictionary
from .instruction import Instruction
from .instructionset import *
from .instructionset import BUILTINS
from .modes import CommentMode, CompileMode, ExecuteMode, ModeViolation
from .probe import Probe
from .state import State

LOG = logging.getLogger(__name__)


class UnknownWord(UserResolvableError):
    """Unknown word"""

    def __init__(self, token):
        self.token = token
        super().__init__(
            f"`{token}' is not a number or a defined word",
            "Words must be defined with `: NAME ... ;' before they are used.",
        )


class DivisionByZero(UserResolvableError):
    """Division by zero"""

    def __init__(self, dividend):
        super().__init__(f"can't divide {dividend} by zero")


def truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero (Python's // rounds down)"""
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


class ForthMachine:
    """Interpreter for ToyForth source text.

    Each machine owns its state and dictionary. The builtin table is shared by
    all machines, but is read-only and copied into each new dictionary, so
    defining a word never affects another machine.

    """

    builtins = MappingProxyType({cls.word: cls() for cls in BUILTINS})

    def __init__(self, output: Optional[TextIO] = None, trace=False):
        self.state = State()
        self.dictionary = Dictionary(self.builtins)
        self.probe = Probe(enabled=trace)
        self._output = output

    @property
    def output(self) -> TextIO:
        # Looked up late so that sys.stdout can be swapped out (e.g. by pytest)
        return sys.stdout if self._output is None else self._output

    @property
    def compiling(self) -> bool:
        return isinstance(self.state.mode, CompileMode)

    def feed(self, text: str, filename: str = "<input>"):
        """Process every token in text

        Any error stops processing immediately. The state is left exactly as
        it was when the error happened.
        """
        for tok in tokenize(text):
            try:
                self.feed_token(self.state.mode, tok.value)
            except ForthError as exc:
                line = text.split("\n")[tok.lineno - 1]
                column = index_column(text, tok.index)
                exc.at(SourceLocation(filename, tok.lineno, line, column))
                LOG.info("Error at `%s': %s", tok.value, exc)
                raise

    ## Dispatch on mode

    @singledispatchmethod
    def feed_token(self, mode, token: str):
        """Handle one token in the given mode"""
        raise UnexpectedError(f"Bad interpreter mode: {mode}")

    @feed_token.register
    def _(self, mode: ExecuteMode, token):
        self.evali(self.resolve_required(token))

    @feed_token.register
    def _(self, mode: CompileMode, token):
        if mode.name is None:
            # Whatever the token is, it's the name
            LOG.debug("Compiling %s", token)
            mode.name = token
        elif token in (";", "("):
            self.evali(self.resolve_required(token))
        else:
            mode.body.append(self.resolve_required(token))

    @feed_token.register
    def _(self, mode: CommentMode, token):
        if token == ")":
            self.evali(self.resolve_required(token))

    ## Resolution

    def resolve(self, token: str) -> Optional[Instruction]:
        """Find the Instruction for token, or None if there isn't one"""
        value = parse_numeral(token)
        if value is not None:
            return PushNumber(value)
        return self.dictionary.get(token)

    def resolve_required(self, token: str) -> Instruction:
        instr = self.resolve(token)
        if instr is None:
            raise UnknownWord(token)
        return instr

    ## Evaluation

    @singledispatchmethod
    def evali(self, i: Instruction):
        """Evaluate instruction"""
        raise NotImplementedError(i)

    def _step(self, i: Instruction):
        if not self.probe.enabled:
            return
        self.probe.event("step", instr=repr(i), top_of_stack=self.state.top(3))

    @evali.register
    def _(self, i: PushNumber):
        self._step(i)
        self.state.ds_push(i.value)

    @evali.register
    def _(self, i: Dup):
        self._step(i)
        self.state.ds_push(self.state.ds_peek(0))

    @evali.register
    def _(self, i: Drop):
        self._step(i)
        self.state.ds_pop()

    @evali.register
    def _(self, i: Swap):
        self._step(i)
        b = self.state.ds_pop()
        a = self.state.ds_pop()
        self.state.ds_push(b)
        self.state.ds_push(a)

    @evali.register
    def _(self, i: Add):
        self._step(i)
        b = self.state.ds_pop()
        a = self.state.ds_pop()
        self.state.ds_push(a + b)

    @evali.register
    def _(self, i: Sub):
        self._step(i)
        b = self.state.ds_pop()
        a = self.state.ds_pop()
        self.state.ds_push(a - b)

    @evali.register
    def _(self, i: Mul):
        self._step(i)
        b = self.state.ds_pop()
        a = self.state.ds_pop()
        self.state.ds_push(a * b)

    @evali.register
    def _(self, i: Div):
        self._step(i)
        b = self.state.ds_pop()
        a = self.state.ds_pop()
        if b == 0:
            raise DivisionByZero(a)
        self.state.ds_push(truncating_div(a, b))

    @evali.register
    def _(self, i: Print):
        self._step(i)
        self.output.write(f" {self.state.ds_pop()}")

    @evali.register
    def _(self, i: Define):
        self._step(i)
        if isinstance(self.state.mode, CompileMode):
            raise ModeViolation(
                "already compiling a word", "Definitions can't be nested."
            )
        self.state.enter_mode(CompileMode())
        self.probe.event("mode", mode="compile")

    @evali.register
    def _(self, i: Return):
        self._step(i)
        mode = self.state.mode
        if not isinstance(mode, CompileMode):
            raise ModeViolation("`;' outside of a definition")
        if mode.name is None:
            raise ModeViolation("definition has no name", "Use `: NAME ... ;'.")
        word = UserWord(mode.name, mode.body)
        self.dictionary.define(mode.name, word)
        self.probe.event("define", name=mode.name, length=len(word.body))
        self.state.leave_mode()

    @evali.register
    def _(self, i: CommentBegin):
        self._step(i)
        if isinstance(self.state.mode, CommentMode):
            raise ModeViolation(
                "already in a comment", "Comments can't be nested."
            )
        self.state.enter_mode(CommentMode())
        self.probe.event("mode", mode="comment")

    @evali.register
    def _(self, i: CommentEnd):
        self._step(i)
        if not isinstance(self.state.mode, CommentMode):
            raise ModeViolation("`)' outside of a comment")
        self.state.leave_mode()

    @evali.register
    def _(self, i: UserWord):
        self._step(i)
        LOG.debug("Calling %s", i.word_name)
        # One iterator per active word body. Nested words push a frame here
        # instead of recursing.
        return_stack = [iter(i.body)]
        while return_stack:
            instr = next(return_stack[-1], None)
            if instr is None:
                return_stack.pop()
            elif isinstance(instr, UserWord):
                self._step(instr)
                LOG.debug("Calling %s", instr.word_name)
                return_stack.append(iter(instr.body))
            else:
                self.evali(instr)
