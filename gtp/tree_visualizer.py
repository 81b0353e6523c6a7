"""Print the syntax tree of a file as a box-drawing tree.

Run as python -m gtp.tree_visualizer GRAMMAR FILE; the same view is
available from the gtp command with -o tree.
"""

import argparse
import sys

from gtp.build import build_grammar_from_file, parse
from gtp.grammar import GrammarError
from gtp.node import AST, Leaf
from gtp.parser import ParseError

argparser = argparse.ArgumentParser(prog="python -m gtp.tree_visualizer", description="Pretty print the syntax tree of a file")
argparser.add_argument("grammar", help="Grammar description")
argparser.add_argument("filename", help="File to parse")


class ASTTreePrinter:
    def children(self, node: AST):
        yield from node

    def name(self, node: AST) -> str:
        if isinstance(node, Leaf):
            return f"{node.type} {node.raw!r}"
        return node.type

    def print_tree(self, tree: AST, printer=print) -> None:
        printer(self.print_nodes_recursively(tree), end="")

    def print_nodes_recursively(self, node: AST, prefix: str = "", istail: bool = True) -> str:

        children = list(self.children(node))
        value = self.name(node)

        line = prefix + ("└──" if istail else "├──") + value + "\n"
        sufix = "   " if istail else "│  "

        if not children:
            return line

        *children, last = children
        for child in children:
            line += self.print_nodes_recursively(child, prefix + sufix, False)
        line += self.print_nodes_recursively(last, prefix + sufix, True)

        return line


def main() -> None:
    args = argparser.parse_args()

    try:
        grammar = build_grammar_from_file(args.grammar)
        with open(args.filename, encoding="utf-8") as file:
            tree = parse(grammar, file.read(), filename=args.filename)
    except (GrammarError, ParseError) as err:
        print(f"ERROR: {err}", file=sys.stderr)
        sys.exit(1)

    ASTTreePrinter().print_tree(tree)


if __name__ == "__main__":
    main()
