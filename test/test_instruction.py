import json

import pytest

import toyforth.machine.instructionset as instructionset
from toyforth.machine.instruction import BadOperandsLength, BadOperandsType, Instruction
from toyforth.machine.instructionset import *


def squared():
    return UserWord("SQUARED", [Dup(), Mul()])


def test_ser():
    instr = PushNumber(5)
    ser = instr.serialise()
    assert ser == ["PushNumber", [5]]
    deser = Instruction.deserialise(ser, instructionset)
    assert instr == deser


def test_jsonable_word():
    word = UserWord("SUM-OF-SQUARES2", [squared(), Swap(), squared(), Add()])
    jser = json.dumps(word.serialise())
    deser = Instruction.deserialise(json.loads(jser), instructionset)
    assert deser == word
    assert deser.body[0].body == (Dup(), Mul())


def test_equality():
    assert PushNumber(1) == PushNumber(1)
    assert PushNumber(1) != PushNumber(2)
    assert Dup() != Drop()
    assert squared() == squared()
    assert len({PushNumber(1), PushNumber(1), Dup()}) == 2


def test_user_word_body_is_frozen():
    body = [Dup(), Mul()]
    word = UserWord("SQUARED", body)
    body.append(Drop())
    assert word.body == (Dup(), Mul())


@pytest.mark.parametrize(
    "make",
    [
        lambda: PushNumber("3"),
        lambda: PushNumber(True),
        lambda: PushNumber(1.5),
        lambda: UserWord(3, []),
        lambda: UserWord("X", [1, 2]),
    ],
)
def test_bad_operand_types(make):
    with pytest.raises(BadOperandsType):
        make()


@pytest.mark.parametrize(
    "make", [lambda: PushNumber(), lambda: PushNumber(1, 2), lambda: Dup(1)],
)
def test_bad_operand_length(make):
    with pytest.raises(BadOperandsLength):
        make()


def test_repr_and_tokens():
    assert repr(PushNumber(5)) == "PUSHNUMBER 5"
    assert repr(Dup()) == "DUP"
    assert repr(squared()) == "USERWORD SQUARED"
    assert [i.as_token() for i in (Print(), PushNumber(7), squared())] == [
        ".",
        "7",
        "SQUARED",
    ]
