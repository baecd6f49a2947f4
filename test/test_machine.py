"""Test that the machine executes words correctly"""

from io import StringIO

import pytest

from toyforth.machine.instructionset import *
from toyforth.machine.machine import DivisionByZero, ForthMachine, UnknownWord
from toyforth.machine.modes import CommentMode, CompileMode, ExecuteMode, ModeViolation
from toyforth.machine.state import StackUnderflow

SQUARE_WORDS = """
: SUM-OF-SQUARES   ( a b -- c )   DUP *   SWAP   DUP *  +  ;
: SQUARED   ( n -- nsquared )     DUP *  ;
: SUM-OF-SQUARES2   ( a b -- c )  SQUARED  SWAP SQUARED  +  ;
"""


def new_machine():
    return ForthMachine(output=StringIO())


def run(*lines):
    """Feed lines into a new machine, returning it and its output"""
    m = new_machine()
    for line in lines:
        m.feed(line)
    return m, m.output.getvalue()


################################################################################
## Scenarios


@pytest.mark.parametrize(
    "source, expected",
    [
        ("3 SQUARED .", " 9"),
        ("3 4 SUM-OF-SQUARES .", " 25"),
        ("3 4 SUM-OF-SQUARES2 .", " 25"),
        ("5 SQUARED SQUARED .", " 625"),
    ],
)
def test_square_words(source, expected):
    m, out = run(SQUARE_WORDS, source)
    assert out == expected
    assert m.state.data_stack == []


def test_comment_has_no_effect():
    m, out = run("1 2 . . ( 1 2 3 )")
    assert out == " 2 1"
    assert m.state.data_stack == []
    assert m.state.mode == ExecuteMode()
    assert m.state.mode_stack == []


def test_default_output_is_stdout(capsys):
    ForthMachine().feed("1 2 + .")
    assert capsys.readouterr().out == " 3"


################################################################################
## Builtins


@pytest.mark.parametrize(
    "source, expected",
    [
        ("1 2 +", [3]),
        ("7 2 -", [5]),
        ("2 7 -", [-5]),
        ("6 7 *", [42]),
        ("7 2 /", [3]),
        ("6 3 /", [2]),
        ("0 7 - 2 /", [-3]),
        ("7 0 2 - /", [-3]),
        ("0 7 - 0 2 - /", [3]),
        ("1 2 DROP", [1]),
        ("1 2 SWAP", [2, 1]),
        ("1 DUP", [1, 1]),
    ],
)
def test_builtins(source, expected):
    m, _ = run(source)
    assert m.state.data_stack == expected


@pytest.mark.parametrize("stack", ["1", "1 2", "5 5 3", "0 100000000000000000000"])
def test_dup(stack):
    m, _ = run(stack)
    depth = m.state.depth
    m.feed("DUP")
    assert m.state.depth == depth + 1
    assert m.state.ds_peek(0) == m.state.ds_peek(1)


@pytest.mark.parametrize("stack", ["1 2", "9 8 7", "3 3"])
def test_swap_swap(stack):
    m, _ = run(stack)
    before = m.state.data_stack
    m.feed("SWAP SWAP")
    assert m.state.data_stack == before


def test_print_format():
    _, out = run("10 0 5 - . .")
    assert out == " -5 10"


def test_word_matches_inlined_body():
    body = "DUP * SWAP DUP * +"
    inlined, _ = run("3 4 " + body)
    called, _ = run(f": F {body} ;", "3 4 F")
    assert inlined.state.data_stack == called.state.data_stack == [25]


################################################################################
## Definitions


def test_definition_body():
    m, _ = run(": SQ ( n -- n*n ) DUP * ;")
    word = m.dictionary["SQ"]
    assert word == UserWord("SQ", [Dup(), Mul()])
    assert m.state.mode == ExecuteMode()
    assert m.state.mode_stack == []


def test_body_is_not_run_while_compiling():
    m, out = run("1 : P . ;")
    assert out == ""
    assert m.state.data_stack == [1]
    m.feed("P")
    assert m.output.getvalue() == " 1"


def test_definition_across_lines():
    m = new_machine()
    m.feed(": DOUBLE")
    assert m.compiling
    m.feed("2 *")
    assert m.compiling
    assert "DOUBLE" not in m.dictionary
    m.feed(";")
    assert not m.compiling
    m.feed("4 DOUBLE .")
    assert m.output.getvalue() == " 8"


def test_name_can_be_any_token():
    m, _ = run(": 5 1 ;")
    assert isinstance(m.dictionary["5"], UserWord)
    # numerals still win
    assert m.resolve("5") == PushNumber(5)


def test_no_self_reference():
    with pytest.raises(UnknownWord):
        run(": LOOP LOOP ;")


def test_redefinition_keeps_old_callers():
    m, _ = run(": A 1 ; : B A ; : A 2 ;", "B A")
    assert m.state.data_stack == [1, 2]


def test_builtins_can_be_shadowed_per_machine():
    m, _ = run(": DUP 7 ;", "1 DUP")
    assert m.state.data_stack == [1, 7]
    assert ForthMachine.builtins["DUP"] == Dup()
    other, _ = run("1 DUP")
    assert other.state.data_stack == [1, 1]


def test_machines_are_independent():
    run(": X 1 ;")
    with pytest.raises(UnknownWord):
        run("X")


def test_deeply_nested_words():
    m = new_machine()
    m.feed(": W0 1 ;")
    for n in range(1, 2000):
        m.feed(f": W{n} W{n - 1} ;")
    m.feed("W1999 .")
    assert m.output.getvalue() == " 1"
    assert m.state.data_stack == []


def test_error_inside_nested_word():
    m, _ = run(": INNER 1 . . . ; : OUTER 5 INNER 6 ;")
    with pytest.raises(StackUnderflow):
        m.feed("OUTER")
    # Nothing after the failing instruction runs
    assert m.output.getvalue() == " 1 5"
    assert m.state.data_stack == []


def test_user_words():
    m, _ = run(SQUARE_WORDS)
    assert list(m.dictionary.user_words()) == [
        "SUM-OF-SQUARES",
        "SQUARED",
        "SUM-OF-SQUARES2",
    ]


################################################################################
## Modes


def test_mode_stack_depth():
    m = new_machine()
    m.feed(": X (")
    assert isinstance(m.state.mode, CommentMode)
    assert [type(x) for x in m.state.mode_stack] == [ExecuteMode, CompileMode]
    m.feed("anything at all )")
    assert m.state.mode == CompileMode("X", [])
    assert len(m.state.mode_stack) == 1
    m.feed("1 ;")
    assert m.state.mode_stack == []


def test_unknown_words_in_comments_are_ignored():
    m, _ = run("( FOO BAR ; : ( ) 1")
    assert m.state.data_stack == [1]


def test_open_paren_inside_comment_is_ignored():
    m, _ = run("( ( 1 ) 2")
    assert m.state.data_stack == [2]


@pytest.mark.parametrize("source", [";", ")", "( ( ) )", ": X 1 ; ;"])
def test_unbalanced(source):
    with pytest.raises(ModeViolation):
        run(source)


def test_no_nested_definitions():
    m, _ = run(": X")
    with pytest.raises(ModeViolation):
        m.evali(Define())


def test_no_nested_comments():
    m, _ = run("(")
    with pytest.raises(ModeViolation):
        m.evali(CommentBegin())


def test_definition_needs_a_name():
    m = new_machine()
    m.state.enter_mode(CompileMode())
    with pytest.raises(ModeViolation):
        m.evali(Return())


################################################################################
## Errors


@pytest.mark.parametrize("source", [".", "DUP", "DROP", "1 SWAP", "1 +", "1 /"])
def test_stack_underflow(source):
    with pytest.raises(StackUnderflow):
        run(source)


def test_division_by_zero():
    m = new_machine()
    with pytest.raises(DivisionByZero):
        m.feed("5 0 /")
    # No rollback
    assert m.state.data_stack == []


def test_unknown_word():
    with pytest.raises(UnknownWord) as exc_info:
        run("1 FOO")
    assert exc_info.value.token == "FOO"
    assert exc_info.value.location == ("<input>", 1, "1 FOO", 3)


def test_negative_literals_are_not_numbers():
    with pytest.raises(UnknownWord):
        run("-5")


def test_words_are_case_sensitive():
    with pytest.raises(UnknownWord):
        run("1 dup")


def test_unknown_word_in_body():
    m = new_machine()
    with pytest.raises(UnknownWord) as exc_info:
        m.feed(": X 1\n2 FOO ;", filename="x.fs")
    assert exc_info.value.location == ("x.fs", 2, "2 FOO ;", 3)
    # The half-built word is not visible, and compilation is still going
    assert "X" not in m.dictionary
    assert m.state.mode == CompileMode("X", [PushNumber(1), PushNumber(2)])


def test_error_stops_the_line():
    m = new_machine()
    with pytest.raises(StackUnderflow):
        m.feed("1 . . 2 3")
    assert m.output.getvalue() == " 1"
    assert m.state.data_stack == []


def test_error_message():
    with pytest.raises(StackUnderflow) as exc_info:
        run(".")
    assert str(exc_info.value).startswith("Stack underflow: needed 1 value(s)")


################################################################################
## Tracing


def test_probe():
    m = ForthMachine(output=StringIO(), trace=True)
    m.feed(": X 1 ; X")
    events = [e.event for e in m.probe.events]
    assert events == ["step", "mode", "step", "define", "step", "step"]
    assert m.probe.events[3].data == {"name": "X", "length": 1}


def test_probe_nested_steps():
    m = ForthMachine(output=StringIO(), trace=True)
    m.feed(": A 1 ; : B A 2 ;")
    m.probe.events.clear()
    m.feed("B")
    steps = [e.data["instr"] for e in m.probe.events]
    assert steps == ["USERWORD B", "USERWORD A", "PUSHNUMBER 1", "PUSHNUMBER 2"]
    assert m.probe.events[-1].data["top_of_stack"] == [1]


def test_probe_disabled_by_default():
    m, _ = run(": X 1 ; X")
    assert m.probe.events == []


@pytest.mark.parametrize(
    "stack, n, expected",
    [
        ("", 3, []),
        ("1 2", 3, [1, 2]),
        ("1 2 3 4", 3, [2, 3, 4]),
        ("1 2", 0, []),
    ],
)
def test_top(stack, n, expected):
    m, _ = run(stack)
    assert m.state.top(n) == expected


def test_state_snapshot():
    m, _ = run("1 2 : X 3 (")
    assert m.state.serialise() == dict(
        ds=[1, 2],
        mode=["CommentMode"],
        mode_stack=[["ExecuteMode"], ["CompileMode", "X", [["PushNumber", [3]]]]],
    )
    assert m.state.to_table() == (
        "Mode: ExecuteMode > CompileMode > CommentMode\nData: [1, 2]"
    )
