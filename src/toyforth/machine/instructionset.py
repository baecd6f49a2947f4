from .instruction import BadOperandsType
from .instruction import Instruction as I

__all__ = [
    "Dup",
    "Drop",
    "Swap",
    "Print",
    "Add",
    "Sub",
    "Mul",
    "Div",
    "Define",
    "Return",
    "CommentBegin",
    "CommentEnd",
    "PushNumber",
    "UserWord",
]

##± Stack Manipulation ±########################################################


class Dup(I):
    """Duplicate the top element of the data stack"""

    word = "DUP"


class Drop(I):
    """Remove the top element of the data stack and discard it"""

    word = "DROP"


class Swap(I):
    """Exchange the top two elements of the data stack"""

    word = "SWAP"


##± Arithmetic ±################################################################

# All binary: pop b, pop a, push (a op b)


class Add(I):
    word = "+"


class Sub(I):
    word = "-"


class Mul(I):
    word = "*"


class Div(I):
    """Integer division, truncating toward zero"""

    word = "/"


##± Input-Output ±##############################################################


class Print(I):
    """Pop the top value and print it after a space, without a newline"""

    word = "."


##± Definitions and Comments ±##################################################


class Define(I):
    """Start compiling a new word. The next token is its name."""

    word = ":"


class Return(I):
    """Finish compiling the current word and install it in the dictionary"""

    word = ";"


class CommentBegin(I):
    """Start discarding tokens"""

    word = "("


class CommentEnd(I):
    word = ")"


##± Data ±######################################################################


class PushNumber(I):
    """Push an immediate (literal) integer onto the stack"""

    num_ops = 1
    op_types = [int]

    @property
    def value(self) -> int:
        return self.operands[0]

    def as_token(self) -> str:
        return str(self.value)


class UserWord(I):
    """A compiled word: run each instruction of the body in order

    Operands:
      - [0] str: The name the word was defined with
      - [1] tuple: The body instructions, fixed at definition time
    """

    num_ops = 2
    op_types = [str, tuple]

    def __init__(self, name, body):
        super().__init__(name, tuple(body) if isinstance(body, list) else body)
        for idx, instr in enumerate(self.body):
            if not isinstance(instr, I):
                raise BadOperandsType(self.name, type(instr), I, idx)

    @property
    def word_name(self) -> str:
        return self.operands[0]

    @property
    def body(self) -> tuple:
        return self.operands[1]

    def as_token(self) -> str:
        return self.word_name

    def __repr__(self):
        return f"{self.name.upper():8} {self.word_name}"


BUILTINS = (
    Dup,
    Drop,
    Swap,
    Print,
    Add,
    Sub,
    Mul,
    Div,
    Define,
    Return,
    CommentBegin,
    CommentEnd,
)
