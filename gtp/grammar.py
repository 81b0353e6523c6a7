from __future__ import annotations  # Requires Python 3.7 or later

import re
from abc import abstractmethod
from itertools import combinations
from typing import AbstractSet, Dict, FrozenSet, Iterable, List, NamedTuple, Pattern, Set, Tuple, Union


class GrammarError(Exception):
    pass


class MalformedGrammarError(GrammarError):
    """The grammar itself is broken; no input can fix this."""


class Conflict(NamedTuple):
    rule: str
    first: str
    second: str
    tokens: FrozenSet[str]

    def __str__(self):
        tokens = ", ".join(sorted(self.tokens))
        return f"{self.rule}: {self.first} and {self.second} can both start with {tokens}"


class AmbiguityError(GrammarError):
    """Two choices of the grammar can start with the same token."""

    def __init__(self, conflicts: List[Conflict]):
        super().__init__("\n".join(str(conflict) for conflict in conflicts))
        self.conflicts = conflicts


class GrammarVisitor:

    def visit(self, node, *args, **kwargs):
        """Visit a node."""
        method = 'visit_' + node.__class__.__name__
        visitor = getattr(self, method, self.generic_visit)
        return visitor(node, *args, **kwargs)

    def generic_visit(self, node, *args, **kwargs):
        """Called if no explicit visitor function exists for a node."""
        for value in node:
            self.visit(value, *args, **kwargs)


# Atoms


class Atom:
    """A lexical rule recognizing one token type."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def match(self, text: str, pos: int) -> int:
        """Return the length of the match at text[pos:], or 0 if there is none."""
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.name == other.name  # type: ignore


class LiteralAtom(Atom):
    """The name is the literal text."""

    def __init__(self, name: str):
        if not name:
            raise GrammarError("A literal atom can't be empty")
        super().__init__(name)

    def match(self, text: str, pos: int) -> int:
        if text.startswith(self.name, pos):
            return len(self.name)
        return 0

    def __str__(self):
        return f"'{self.name}'"

    def __repr__(self):
        return f"LiteralAtom({self.name!r})"


class PatternAtom(Atom):
    """Matches a regular expression anchored at the current position."""

    def __init__(self, name: str, pattern: Union[str, Pattern[str]]):
        super().__init__(name)
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as err:
                raise GrammarError(f"Invalid pattern for atom {name!r}: {err}") from err
        self.pattern = pattern

    def match(self, text: str, pos: int) -> int:
        m = self.pattern.match(text, pos)
        if m is None:
            return 0
        return m.end() - pos

    def __eq__(self, other: object) -> bool:
        return super().__eq__(other) and self.pattern.pattern == other.pattern.pattern  # type: ignore

    def __str__(self):
        return f">{self.name} -> '{self.pattern.pattern}'"

    def __repr__(self):
        return f"PatternAtom({self.name!r}, {self.pattern.pattern!r})"


# Productions


class Production:
    """Right-hand side of a rule, or a piece of one."""

    @abstractmethod
    def nullable(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def first_symbols(self) -> List[Symbol]:
        """The symbols this production can start with, in order."""
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)


class Symbol(Production):

    def __init__(self, name: str):
        self.name = name

    def __str__(self):
        return self.name

    def __iter__(self):
        return iter(())

    def nullable(self) -> bool:
        # Even if the rule it names is nullable.
        return False

    def first_symbols(self) -> List[Symbol]:
        return [self]


class TokenRef(Symbol):
    """Matches one token of type name; raw says whether it ends up in the tree."""

    def __init__(self, name: str, raw: bool = False):
        super().__init__(name)
        self.raw = raw

    def __str__(self):
        if self.raw:
            return self.name
        return f"'{self.name}'"

    def __repr__(self):
        if self.raw:
            return f"TokenRef({self.name!r}, raw=True)"
        return f"TokenRef({self.name!r})"


class RuleRef(Symbol):

    def __repr__(self):
        return f"RuleRef({self.name!r})"


class Group(Production):

    def __init__(self, items: Iterable[Production]):
        self.items = tuple(items)

    def __str__(self):
        return "(" + " ".join(str(item) for item in self.items) + ")"

    def __repr__(self):
        return f"Group({list(self.items)!r})"

    def __iter__(self):
        yield from self.items

    def nullable(self) -> bool:
        return False

    def first_symbols(self) -> List[Symbol]:
        symbols: List[Symbol] = []
        for item in self.items:
            symbols.extend(item.first_symbols())
            if not item.nullable():
                break
        return symbols


class Opt(Production):

    def __init__(self, node: Production):
        self.node = node

    def __str__(self):
        if isinstance(self.node, Group):
            return f"{self.node}?"
        return f"({self.node})?"

    def __repr__(self):
        return f"Opt({self.node!r})"

    def __iter__(self):
        yield self.node

    def nullable(self) -> bool:
        return True

    def first_symbols(self) -> List[Symbol]:
        return self.node.first_symbols()


class Repeat(Production):
    """Zero or more times."""

    def __init__(self, node: Production):
        self.node = node

    def __str__(self):
        if isinstance(self.node, Group):
            return f"{self.node}*"
        return f"({self.node})*"

    def __repr__(self):
        return f"Repeat({self.node!r})"

    def __iter__(self):
        yield self.node

    def nullable(self) -> bool:
        return True

    def first_symbols(self) -> List[Symbol]:
        return self.node.first_symbols()


class Alternation(Production):
    """Ordered choice: left if the lookahead can start it, otherwise right."""

    def __init__(self, left: Production, right: Production):
        self.left = left
        self.right = right

    def __str__(self):
        # Alternations nest to the right when parsed.
        if isinstance(self.left, Alternation):
            return f"({self.left}) | {self.right}"
        return f"{self.left} | {self.right}"

    def __repr__(self):
        return f"Alternation({self.left!r}, {self.right!r})"

    def __iter__(self):
        yield self.left
        yield self.right

    def nullable(self) -> bool:
        return self.left.nullable() or self.right.nullable()

    def first_symbols(self) -> List[Symbol]:
        return self.left.first_symbols() + self.right.first_symbols()


class Rule:

    def __init__(self, name: str, production: Production):
        self.name = name
        self.production = production

    def __str__(self):
        return f"{self.name} -> {self.production}"

    def __repr__(self):
        return f"Rule({self.name!r}, {self.production!r})"

    def __iter__(self):
        yield self.production

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rule):
            return NotImplemented
        return self.name == other.name and self.production == other.production


class ParseOptions(NamedTuple):
    ignore_whitespace: bool = False
    ignore_newline: bool = False
    # Replace every node that has a single child by that child.
    collapse: bool = False


class Grammar:
    """Rules, atoms and options; never modified once built."""

    def __init__(
        self, rules: Iterable[Rule], atoms: Iterable[Atom], options: ParseOptions = ParseOptions()
    ):
        self.rules = tuple(rules)
        self.atoms = tuple(atoms)
        self.options = options
        alternatives: Dict[str, List[Rule]] = {}
        for rule in self.rules:
            alternatives.setdefault(rule.name, []).append(rule)
        self._alternatives = {name: tuple(rules) for name, rules in alternatives.items()}
        self._first_cache: Dict[str, Tuple[str, ...]] = {}

    def __str__(self):
        return "\n".join([str(rule) for rule in self.rules] + [str(atom) for atom in self.atoms])

    def __repr__(self):
        return f"Grammar({list(self.rules)!r}, {list(self.atoms)!r}, {self.options!r})"

    def __iter__(self):
        yield from self.rules

    def with_options(self, options: ParseOptions) -> Grammar:
        grammar = Grammar((), self.atoms, options)
        grammar.rules = self.rules
        grammar._alternatives = self._alternatives
        return grammar

    def alternatives(self, name: str) -> Tuple[Rule, ...]:
        try:
            return self._alternatives[name]
        except KeyError:
            raise MalformedGrammarError(f"No rule named {name!r}") from None

    def first_from_rule(self, name: str, _expanding: AbstractSet[str] = frozenset()) -> List[str]:
        """Token types that can start any of the rules called name.

        A rule already being expanded adds nothing, so cycles terminate.
        Only top-level calls consult the cache; a partial expansion depends
        on what is being expanded around it.
        """
        if not _expanding and name in self._first_cache:
            return list(self._first_cache[name])
        expanding = _expanding | {name}
        types: List[str] = []
        for rule in self.alternatives(name):
            for symbol in rule.production.first_symbols():
                types.extend(self._first_from_symbol(symbol, expanding))
        if not _expanding:
            # Only a complete expansion is worth remembering.
            self._first_cache[name] = tuple(types)
        return types

    def _first_from_symbol(self, symbol: Symbol, expanding: AbstractSet[str]) -> List[str]:
        if isinstance(symbol, TokenRef):
            return [symbol.name]
        if symbol.name in expanding:
            return []
        return self.first_from_rule(symbol.name, expanding)

    def first_tokens(self, production: Production) -> FrozenSet[str]:
        types: Set[str] = set()
        for symbol in production.first_symbols():
            types.update(self._first_from_symbol(symbol, frozenset()))
        return frozenset(types)

    def matches(self, production: Production, token_type: str) -> bool:
        return token_type in self.first_tokens(production)

    def derives_empty(self, production: Production, _expanding: AbstractSet[str] = frozenset()) -> bool:
        """Can production match without consuming a token, looking through rule references?"""
        if isinstance(production, TokenRef):
            return False
        if isinstance(production, RuleRef):
            if production.name in _expanding:
                return False
            expanding = _expanding | {production.name}
            return any(
                self.derives_empty(rule.production, expanding)
                for rule in self.alternatives(production.name)
            )
        if isinstance(production, Group):
            return all(self.derives_empty(item, _expanding) for item in production.items)
        if isinstance(production, (Opt, Repeat)):
            return True
        if isinstance(production, Alternation):
            return self.derives_empty(production.left, _expanding) or self.derives_empty(
                production.right, _expanding
            )
        raise GrammarError(f"Unknown production {production!r}")

    def left_recursive(self, name: str) -> bool:
        """Can rule name reach itself without consuming a token?"""
        seen = {name}
        todo = [name]
        while todo:
            current = todo.pop()
            for rule in self._alternatives.get(current, ()):
                for symbol in rule.production.first_symbols():
                    if not isinstance(symbol, RuleRef):
                        continue
                    if symbol.name == name:
                        return True
                    if symbol.name not in seen:
                        seen.add(symbol.name)
                        todo.append(symbol.name)
        return False

    def conflicts(self) -> List[Conflict]:
        """Choices that one token of lookahead can't tell apart."""
        conflicts = []
        for name, rules in self._alternatives.items():
            firsts = [self.first_tokens(rule.production) for rule in rules]
            for i, j in combinations(range(len(rules)), 2):
                common = firsts[i] & firsts[j]
                if common:
                    conflicts.append(
                        Conflict(name, f"alternative {i + 1}", f"alternative {j + 1}", common)
                    )
        finder = AlternationConflictFinder(self)
        for rule in self.rules:
            finder.visit(rule.production, rule.name)
        return conflicts + finder.conflicts

    def check(self) -> None:
        """Raise GrammarError unless this grammar can be used for predictive parsing."""
        if "START" not in self._alternatives:
            raise MalformedGrammarError("Grammar has no START rule")
        atom_names = {atom.name for atom in self.atoms}
        for rule in self.rules:
            collector = SymbolCollector()
            collector.visit(rule.production)
            for ref in collector.rule_refs:
                if ref not in self._alternatives:
                    raise MalformedGrammarError(f"Rule {rule.name} refers to undefined rule {ref}")
            for ref in collector.token_refs:
                if ref not in atom_names:
                    raise MalformedGrammarError(f"Rule {rule.name} refers to undefined atom {ref}")
        for name in self._alternatives:
            if self.left_recursive(name):
                raise MalformedGrammarError(f"Rule {name} is left-recursive")
        conflicts = self.conflicts()
        if conflicts:
            raise AmbiguityError(conflicts)


class SymbolCollector(GrammarVisitor):

    def __init__(self) -> None:
        self.rule_refs: List[str] = []
        self.token_refs: List[str] = []

    def visit_RuleRef(self, node: RuleRef) -> None:
        self.rule_refs.append(node.name)

    def visit_TokenRef(self, node: TokenRef) -> None:
        self.token_refs.append(node.name)


class AlternationConflictFinder(GrammarVisitor):

    def __init__(self, grammar: Grammar):
        self.grammar = grammar
        self.conflicts: List[Conflict] = []

    def visit_Alternation(self, node: Alternation, rule_name: str) -> None:
        common = self.grammar.first_tokens(node.left) & self.grammar.first_tokens(node.right)
        if common:
            self.conflicts.append(Conflict(rule_name, f"{node.left}", f"{node.right}", common))
        self.generic_visit(node, rule_name)
