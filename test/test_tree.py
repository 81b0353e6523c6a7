# mypy: allow-untyped-defs

import os
import sys
import textwrap

from gtp.node import collapse, Leaf, Node, TreeVisitor
from gtp.tree_visualizer import ASTTreePrinter, main


def test_to_dict():
    tree = Node("SUM", [Leaf("num", "1"), Node("OP", []), Leaf("num", "2")])
    assert tree.to_dict() == {
        "type": "SUM",
        "children": [
            {"type": "num", "raw": "1"},
            {"type": "OP", "children": []},
            {"type": "num", "raw": "2"},
        ],
    }


def test_str_and_repr():
    tree = Node("A", [Leaf("x", "1"), Node("B", [])])
    assert str(tree) == "A[x:'1', B[]]"
    assert repr(tree) == "Node('A', [Leaf('x', '1'), Node('B', [])])"


def test_collapse():
    tree = Node("A", [Node("B", [Node("C", [Leaf("x", "1")])]), Node("D", [Leaf("y", "2"), Leaf("z", "3")])])
    assert collapse(tree) == Node("A", [Leaf("x", "1"), Node("D", [Leaf("y", "2"), Leaf("z", "3")])])
    assert collapse(Node("A", [Node("B", [Leaf("x", "1")])])) == Leaf("x", "1")
    assert collapse(Node("A", [])) == Node("A", [])
    assert collapse(Leaf("x", "1")) == Leaf("x", "1")


def test_collapse_leaves_input_alone():
    tree = Node("A", [Node("B", [Leaf("x", "1")]), Leaf("y", "2")])
    collapse(tree)
    assert tree == Node("A", [Node("B", [Leaf("x", "1")]), Leaf("y", "2")])


def test_tree_visitor_dispatches_on_type():
    class Sum(TreeVisitor):
        def visit_SUM(self, node):
            return sum(self.visit(child) for child in node.children)

        def visit_num(self, node):
            return int(node.raw)

    tree = Node("SUM", [Leaf("num", "1"), Node("SUM", [Leaf("num", "2"), Leaf("num", "3")])])
    assert Sum().visit(tree) == 6


def test_generic_visit_walks_children():
    class Counter(TreeVisitor):
        count = 0

        def visit_num(self, node):
            self.count += 1

    counter = Counter()
    counter.visit(Node("A", [Leaf("num", "1"), Node("B", [Leaf("num", "2")]), Leaf("op", "+")]))
    assert counter.count == 2


def test_tree_printer():
    tree = Node("SUM", [Leaf("num", "1"), Node("OPA", [Leaf("plus", "+")]), Leaf("num", "2")])
    printer = ASTTreePrinter()
    lines = []
    printer.print_tree(tree, lambda text, end: lines.append(text))
    assert lines[0] == textwrap.dedent(
        """\
        └──SUM
           ├──num '1'
           ├──OPA
           │  └──plus '+'
           └──num '2'
        """
    )


def test_tree_visualizer_main(capsys, data_dir, tmp_path, monkeypatch):
    source = tmp_path / "sample.txt"
    source.write_text("1*2")
    monkeypatch.setattr(
        sys, "argv", ["gtp", os.path.join(data_dir, "arith.gram"), str(source)]
    )
    main()
    assert capsys.readouterr().out == textwrap.dedent(
        """\
        └──START
           └──SUM
              └──PRODUCT
                 ├──NUMBER
                 │  └──num '1'
                 ├──OPB
                 │  └──times '*'
                 └──NUMBER
                    └──num '2'
        """
    )
