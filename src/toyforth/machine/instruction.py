"""The ToyForth Instruction class"""

from ..exceptions import UnexpectedError


class BadOperandsLength(UnexpectedError):
    """Wrong number of operands for instruction"""

    def __init__(self, instr_name: str, num_ops: int, expected_num: int):
        msg = (
            f"Wrong number of operands ({num_ops}, expected {expected_num}) "
            f"for {instr_name.upper()}."
        )
        super().__init__(msg)


class BadOperandsType(UnexpectedError):
    """Bad operand type(s) for instruction"""

    def __init__(self, instr_name: str, got, expected, pos: int):
        msg = (
            f"Wrong operand type (got {got}, expected {expected} "
            f"in position {pos}) for {instr_name.upper()}."
        )
        super().__init__(msg)


class Instruction:
    """A ToyForth action: one executable step over the machine state

    Instructions are values. Two instructions are equal when they have the same
    type and operands, and the operands can't be changed after construction.
    """

    num_ops = 0
    op_types = None
    # The dictionary name of a builtin, e.g. "DUP". None if not a builtin.
    word = None

    def __init__(self, *operands):
        self.name = type(self).__name__

        if len(operands) != self.num_ops:
            raise BadOperandsLength(self.name, len(operands), self.num_ops)

        if self.op_types:
            for idx, (a, b) in enumerate(zip(operands, self.op_types)):
                # bool is an int, but never a sensible operand
                if not isinstance(a, b) or isinstance(a, bool):
                    raise BadOperandsType(self.name, type(a), b, idx)

        self._operands = tuple(operands)

    @property
    def operands(self) -> tuple:
        return self._operands

    def serialise(self) -> list:
        """Serialise into a JSON-able list"""
        operands = [
            [i.serialise() for i in o] if isinstance(o, tuple) else o
            for o in self.operands
        ]
        return [self.name, operands]

    @classmethod
    def deserialise(cls, obj: list, instruction_set):
        """Deserialise an Instruction

        instruction_set: Module of Instruction types
        """
        name = obj[0]
        operands = [
            tuple(cls.deserialise(i, instruction_set) for i in o)
            if isinstance(o, list)
            else o
            for o in obj[1]
        ]
        return getattr(instruction_set, name)(*operands)

    def __repr__(self):
        ops = ", ".join(map(str, self.operands))
        name = self.name.upper()
        return f"{name:8} {ops}".rstrip()

    def __eq__(self, other):
        return type(self) == type(other) and self.operands == other.operands

    def __hash__(self):
        return hash((type(self), self.operands))

    def as_token(self) -> str:
        """The source token that compiles to this instruction"""
        return self.word or self.name
