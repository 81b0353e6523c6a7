# mypy: allow-untyped-defs

import pytest  # type: ignore

from gtp.node import Leaf, Node
from gtp.parser import ParseError
from scripts.brainfuck import load_grammar, run

HELLO = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>."
    ">---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)


def test_single_character():
    assert run("++++++++[>++++++++<-]>+.") == "A"


def test_hello_world():
    assert run(HELLO) == "Hello World!\n"


def test_whitespace_is_ignored():
    assert run("++++++++ [\n  >++++++++ <-\n]\n>+.") == "A"


def test_input_is_echoed():
    assert run(",.,.", input="hi") == "hi"


def test_loops_stay_nodes():
    tree = load_grammar_tree("[-]")
    assert tree == Node("OP", [Leaf("lb", "["), Leaf("minus", "-"), Leaf("rb", "]")])


def load_grammar_tree(source):
    from gtp.build import parse

    return parse(load_grammar(), source)


def test_single_op_collapses_to_leaf():
    assert load_grammar_tree("+") == Leaf("pluss", "+")


@pytest.mark.parametrize("source", ["[]", "[+", "+]", "x"])
def test_bad_programs(source):
    with pytest.raises(ParseError):
        run(source)


def test_tape_wraps_around():
    assert run("<+.>.", width=4) == "\x01\x00"
    assert run(">>>>+<<<<.", width=4) == "\x01"
