"""The grammar notation, described by a grammar of its own.

A grammar file is a list of statements, each optionally followed by ';':

    NAME -> production          a rule; the same name may be used again
                                for another alternative
    >name -> 'pattern'          an atom, tried in the order written

A production is one item, or several separated by '|'.  An item is an
identifier or a parenthesized group: '(' production+ ')', optionally
followed by '*' or '?'.  Upper case identifiers refer to rules, all
others to atoms whose text is kept in the tree.

An atom's pattern is everything between the quotes, punctuation of the
notation included.  The notation skips blanks, so spaces between words
of a pattern are dropped ('a b' is the pattern ab); write [ ] or \\x20
for a literal space.
"""

from typing import List, Optional, Union

from gtp.grammar import (
    Alternation,
    Atom,
    Grammar,
    GrammarError,
    Group,
    LiteralAtom,
    Opt,
    ParseOptions,
    PatternAtom,
    Production,
    Repeat,
    Rule,
    RuleRef,
    TokenRef,
)
from gtp.node import AST, Leaf, Node, TreeVisitor


def _body_part() -> Production:
    # Punctuation of the notation is allowed inside a body.
    pieces = ["ALPHA", "NUMBER", "LITERAL", "|", "(", ")", "*", "?", ";", "->", ">"]
    production: Production = TokenRef(pieces[-1], raw=True)
    for piece in reversed(pieces[:-1]):
        production = Alternation(TokenRef(piece, raw=True), production)
    return production


META_GRAMMAR = Grammar(
    [
        Rule("START", RuleRef("DOC")),
        Rule(
            "DOC",
            Group(
                [
                    RuleRef("STMT"),
                    Opt(TokenRef(";")),
                    Repeat(Group([RuleRef("STMT"), Opt(TokenRef(";"))])),
                ]
            ),
        ),
        Rule("STMT", RuleRef("RULE")),
        Rule("STMT", RuleRef("ATOM")),
        Rule("RULE", Group([TokenRef("ALPHA", raw=True), TokenRef("->"), RuleRef("PROD")])),
        Rule(
            "ATOM",
            Group(
                [
                    TokenRef(">"),
                    TokenRef("ALPHA", raw=True),
                    TokenRef("->"),
                    TokenRef("'"),
                    _body_part(),
                    Repeat(_body_part()),
                    TokenRef("'"),
                ]
            ),
        ),
        Rule("PROD", Group([RuleRef("ITEM"), Repeat(Group([TokenRef("|"), RuleRef("ITEM")]))])),
        Rule("ITEM", TokenRef("ALPHA", raw=True)),
        Rule("ITEM", RuleRef("GROUP")),
        Rule(
            "GROUP",
            Group(
                [
                    TokenRef("("),
                    RuleRef("PROD"),
                    Repeat(RuleRef("PROD")),
                    TokenRef(")"),
                    Opt(Alternation(TokenRef("*", raw=True), TokenRef("?", raw=True))),
                ]
            ),
        ),
    ],
    [
        LiteralAtom("|"),
        LiteralAtom("("),
        LiteralAtom(")"),
        LiteralAtom("*"),
        LiteralAtom("?"),
        LiteralAtom(";"),
        LiteralAtom("->"),
        LiteralAtom(">"),
        LiteralAtom("'"),
        PatternAtom("NUMBER", r"\d+"),
        PatternAtom("ALPHA", r"[^\W\d_]+"),
        PatternAtom("LITERAL", r"[^']+"),
    ],
    ParseOptions(ignore_whitespace=True, ignore_newline=True),
)


class GrammarLowering(TreeVisitor):
    """Turn the tree META_GRAMMAR produces into a Grammar."""

    def visit_START(self, node: Node) -> Grammar:
        return self.visit(node.children[0])

    def visit_DOC(self, node: Node) -> Grammar:
        rules: List[Rule] = []
        atoms: List[Atom] = []
        for child in node.children:
            stmt = self.visit(child)
            if isinstance(stmt, Rule):
                rules.append(stmt)
            else:
                atoms.append(stmt)
        return Grammar(rules, atoms)

    def visit_STMT(self, node: Node) -> Union[Rule, Atom]:
        return self.visit(node.children[0])

    def visit_RULE(self, node: Node) -> Rule:
        name, prod = node.children
        assert isinstance(name, Leaf)
        return Rule(name.raw, self.visit(prod))

    def visit_ATOM(self, node: Node) -> Atom:
        name, *body = node.children
        assert isinstance(name, Leaf)
        pattern = "".join(leaf.raw for leaf in body if isinstance(leaf, Leaf))
        return PatternAtom(name.raw, pattern)

    def visit_PROD(self, node: Node) -> Production:
        items = [self.visit(child) for child in node.children]
        production = items.pop()
        while items:
            production = Alternation(items.pop(), production)
        return production

    def visit_ITEM(self, node: Node) -> Production:
        child = node.children[0]
        if isinstance(child, Leaf):
            if child.raw.isupper():
                return RuleRef(child.raw)
            return TokenRef(child.raw, raw=True)
        return self.visit(child)

    def visit_GROUP(self, node: Node) -> Production:
        children = list(node.children)
        modifier: Optional[str] = None
        if isinstance(children[-1], Leaf):
            modifier = children.pop().type
        items = [self.visit(child) for child in children]
        production: Production
        if len(items) == 1:
            production = items[0]
        else:
            production = Group(items)
        if modifier == "*":
            return Repeat(production)
        if modifier == "?":
            return Opt(production)
        return production

    def generic_visit(self, node: AST) -> None:
        raise GrammarError(f"Unexpected {node.type} in grammar tree")
