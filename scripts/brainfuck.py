#!/usr/bin/env python3

"""Run a Brainfuck program, parsed with data/brainfuck.gram.

Example:

$ scripts/brainfuck.py '++++++++[>++++++++<-]>+.'
A
$

The grammar is loaded with spaces and newlines skipped and single-child
nodes collapsed, so a loop is the only node with more than one child
that isn't a sequence.
"""

import argparse
import os
import sys

sys.path.insert(0, ".")
from gtp.build import build_grammar_from_file, parse
from gtp.grammar import ParseOptions
from gtp.node import Leaf, Node, TreeVisitor

GRAMMAR_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), os.pardir, "data", "brainfuck.gram")

parser = argparse.ArgumentParser()
parser.add_argument("-w", "--width", type=int, default=256, help="number of cells on the tape")
parser.add_argument("-i", "--input", default="", help="text the program reads with ','")
parser.add_argument("program", help="program to run, or a file containing it")


class Interpreter(TreeVisitor):
    def __init__(self, width: int = 256, input: str = ""):
        self.tape = [0] * width
        self.ptr = 0
        self.input = list(input)
        self.output: list = []

    def visit_START(self, node: Node) -> None:
        for child in node.children:
            self.visit(child)

    def visit_OP(self, node: Node) -> None:
        # A loop: lb, body, rb.
        body = node.children[1]
        while self.tape[self.ptr]:
            self.visit(body)

    def visit_pluss(self, node: Leaf) -> None:
        self.tape[self.ptr] = (self.tape[self.ptr] + 1) % 256

    def visit_minus(self, node: Leaf) -> None:
        self.tape[self.ptr] = (self.tape[self.ptr] - 1) % 256

    def visit_dot(self, node: Leaf) -> None:
        self.output.append(chr(self.tape[self.ptr]))

    def visit_comma(self, node: Leaf) -> None:
        self.tape[self.ptr] = ord(self.input.pop(0)) % 256 if self.input else 0

    def visit_left(self, node: Leaf) -> None:
        self.ptr = (self.ptr - 1) % len(self.tape)

    def visit_right(self, node: Leaf) -> None:
        self.ptr = (self.ptr + 1) % len(self.tape)

    def generic_visit(self, node) -> None:
        raise ValueError(f"Unexpected {node.type} in program")


def load_grammar():
    grammar = build_grammar_from_file(GRAMMAR_FILE)
    return grammar.with_options(ParseOptions(ignore_whitespace=True, ignore_newline=True, collapse=True))


def run(source: str, width: int = 256, input: str = "") -> str:
    tree = parse(load_grammar(), source)
    interpreter = Interpreter(width, input)
    interpreter.visit(tree)
    return "".join(interpreter.output)


def main() -> None:
    args = parser.parse_args()
    source = args.program
    if os.path.isfile(source):
        with open(source) as file:
            source = file.read()
    print(run(source, args.width, args.input), end="")


if __name__ == "__main__":
    main()
