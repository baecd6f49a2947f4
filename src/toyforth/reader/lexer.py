"""Split ToyForth source text into words"""

import logging
from typing import Iterator

from sly import Lexer
from sly.lex import Token

from ..exceptions import UnexpectedError

LOG = logging.getLogger(__name__)


def index_column(text, index):
    """Compute column position of a token index in text"""
    last_cr = text.rfind("\n", 0, index)
    if last_cr < 0:
        last_cr = -1
    column = index - last_cr
    return column


class ForthLexer(Lexer):
    """Whitespace-delimited tokenizer.

    Forth has almost no syntax: a word is any run of non-whitespace characters,
    and all classification (numeral, dictionary word, comment delimiter) is
    done later by the machine. Newlines are just another separator, but they
    are counted so that errors can point at the right line.
    """

    tokens = {WORD}

    # Unicode-aware whitespace, except newlines which are counted below
    ignore_whitespace = r"[^\S\n]+"

    @_(r"\n+")
    def ignore_newline(self, t):
        self.lineno += t.value.count("\n")

    WORD = r"\S+"

    def error(self, t):
        # Every character is either whitespace or part of a WORD
        raise UnexpectedError(f"Unlexable character `{t.value[0]}` at {t.index}")


def tokenize(text: str, lineno: int = 1) -> Iterator[Token]:
    """Lazily yield the WORD tokens in text"""
    lexer = ForthLexer()
    for tok in lexer.tokenize(text, lineno=lineno):
        LOG.debug("token %r (line %d)", tok.value, tok.lineno)
        yield tok
