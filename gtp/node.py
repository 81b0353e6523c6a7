from __future__ import annotations  # Requires Python 3.7 or later

from typing import Any, Dict, Iterator, List, Union


class Node:
    """An interior node: the rule that matched and what it produced."""

    def __init__(self, type: str, children: List[AST]):
        self.type = type
        self.children = children

    def __str__(self):
        return f"{self.type}[{', '.join(str(child) for child in self.children)}]"

    def __repr__(self):
        return f"Node({self.type!r}, {self.children!r})"

    def __iter__(self) -> Iterator[AST]:
        yield from self.children

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.type == other.type and self.children == other.children

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "children": [child.to_dict() for child in self.children]}


class Leaf:
    """The text of a token that was kept."""

    def __init__(self, type: str, raw: str):
        self.type = type
        self.raw = raw

    def __str__(self):
        return f"{self.type}:{self.raw!r}"

    def __repr__(self):
        return f"Leaf({self.type!r}, {self.raw!r})"

    def __iter__(self) -> Iterator[AST]:
        return iter(())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Leaf):
            return NotImplemented
        return self.type == other.type and self.raw == other.raw

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "raw": self.raw}


AST = Union[Node, Leaf]


def collapse(tree: AST) -> AST:
    """Replace every node with exactly one child by that child, bottom up."""
    if isinstance(tree, Leaf):
        return tree
    children = [collapse(child) for child in tree.children]
    if len(children) == 1:
        return children[0]
    return Node(tree.type, children)


class TreeVisitor:
    """Walk a syntax tree, dispatching on the type of each node."""

    def visit(self, node: AST, *args: Any, **kwargs: Any) -> Any:
        method = "visit_" + node.type
        visitor = getattr(self, method, self.generic_visit)
        return visitor(node, *args, **kwargs)

    def generic_visit(self, node: AST, *args: Any, **kwargs: Any) -> Any:
        for child in node:
            self.visit(child, *args, **kwargs)
