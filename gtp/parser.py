from typing import Any, Callable, cast, List, Type, TypeVar

from gtp.grammar import Alternation, Grammar, GrammarError, Group, Opt, Production, Repeat, RuleRef, TokenRef
from gtp.node import AST, collapse, Leaf, Node
from gtp.tokenizer import describe_token, location, Mark, Tokenizer

T = TypeVar("T")
P = TypeVar("P", bound="Parser")
F = TypeVar("F", bound=Callable[..., Any])


class ParseError(SyntaxError):
    """The input doesn't match the grammar.

    Carries the usual SyntaxError fields, so tracebacks show a caret;
    pos is the character offset.
    """

    def __init__(self, message: str, pos: Mark, text: str, filename: str = "<input>"):
        lineno, col, line = location(text, pos)
        super().__init__(message, (filename, lineno, col + 1, line))
        self.pos = pos


class UnrecognizedInput(ParseError):
    pass


class UnexpectedToken(ParseError):
    pass


class NoAlternativeMatches(ParseError):
    pass


class TrailingInput(ParseError):
    pass


def logger(method: F) -> F:
    """Trace entering and leaving a parse method when the parser is verbose."""
    method_name = method.__name__

    def logger_wrapper(self: P, *args: object) -> T:
        if not self._verbose:
            return method(self, *args)
        argsr = ",".join(repr(arg) for arg in args)
        fill = "  " * self._level
        print(f"{fill}{method_name}({argsr}) .... (looking at {self.showpeek()})")
        self._level += 1
        try:
            tree = method(self, *args)
        except ParseError as err:
            print(f"{fill}... {method_name}({argsr}) failed: {err.msg}")
            raise
        finally:
            self._level -= 1
        print(f"{fill}... {method_name}({argsr}) --> {tree!s:.200}")
        return tree

    logger_wrapper.__wrapped__ = method  # type: ignore
    return cast(F, logger_wrapper)


class Parser:
    """Predictive recursive-descent parser driven by a Grammar.

    Every choice is made by looking at the next token only; nothing is
    ever backtracked.  A Parser (and its Tokenizer) is good for one parse.
    """

    def __init__(
        self,
        grammar: Grammar,
        tokenizer: Tokenizer,
        *,
        verbose: bool = False,
        filename: str = "<input>",
    ):
        self._grammar = grammar
        self._tokenizer = tokenizer
        self._verbose = verbose
        self._level = 0
        self._filename = filename

    def start(self) -> AST:
        tree: AST = self.parse_rule("START")
        tok = self._tokenizer.peek()
        if tok is not None:
            raise self.make_syntax_error(
                TrailingInput, f"unexpected {describe_token(tok)} after end of input", tok.start
            )
        if self._tokenizer.error is not None:
            raise self.unrecognized()
        if self._grammar.options.collapse:
            tree = collapse(tree)
        return tree

    def showpeek(self) -> str:
        tok = self._tokenizer.peek()
        if tok is None:
            if self._tokenizer.error is not None:
                return "<unrecognized>"
            return "<end>"
        lineno, col, _ = location(self._tokenizer.text, tok.start)
        return f"{lineno}.{col}: {tok.type}:{tok.string!r}"

    @logger
    def parse_rule(self, name: str) -> Node:
        alternatives = self._grammar.alternatives(name)
        tok = self._tokenizer.peek()
        if tok is None:
            if self._tokenizer.error is not None:
                raise self.unrecognized()
            # Out of input, but the rule may match nothing.
            for rule in alternatives:
                if self._grammar.derives_empty(rule.production):
                    return Node(name, self.walk(rule.production))
            raise self.make_syntax_error(
                NoAlternativeMatches, f"unexpected end of input, expected {name}", self._tokenizer.pos
            )
        for rule in alternatives:
            if self._grammar.matches(rule.production, tok.type):
                return Node(name, self.walk(rule.production))
        raise self.make_syntax_error(
            NoAlternativeMatches, f"no alternative of {name} starts with {describe_token(tok)}", tok.start
        )

    def walk(self, production: Production) -> List[AST]:
        """Match production against the input; return the trees it produces."""
        if isinstance(production, TokenRef):
            return self.expect(production)
        if isinstance(production, RuleRef):
            return [self.parse_rule(production.name)]
        if isinstance(production, Group):
            children: List[AST] = []
            for item in production.items:
                children.extend(self.walk(item))
            return children
        if isinstance(production, Opt):
            if self.lookahead_matches(production.node):
                return self.walk(production.node)
            return []
        if isinstance(production, Repeat):
            children = []
            while self.lookahead_matches(production.node):
                children.extend(self.walk(production.node))
            return children
        if isinstance(production, Alternation):
            tok = self._tokenizer.peek()
            if tok is None:
                raise self.missing(f"{production}")
            if self._grammar.matches(production.left, tok.type):
                return self.walk(production.left)
            return self.walk(production.right)
        raise GrammarError(f"Unknown production {production!r}")

    def expect(self, production: TokenRef) -> List[AST]:
        tok = self._tokenizer.peek()
        if tok is None:
            raise self.missing(f"'{production.name}'")
        if tok.type != production.name:
            raise self.make_syntax_error(
                UnexpectedToken, f"expected '{production.name}', got {describe_token(tok)}", tok.start
            )
        self._tokenizer.getnext()
        if production.raw:
            return [Leaf(tok.type, tok.string)]
        return []

    def lookahead_matches(self, production: Production) -> bool:
        tok = self._tokenizer.peek()
        return tok is not None and self._grammar.matches(production, tok.type)

    def unrecognized(self) -> ParseError:
        pos = self._tokenizer.diagnose()
        text = self._tokenizer.text
        return self.make_syntax_error(
            UnrecognizedInput, f"unrecognized input {text[pos:pos + 10]!r}", pos
        )

    def missing(self, expected: str) -> ParseError:
        if self._tokenizer.error is not None:
            return self.unrecognized()
        return self.make_syntax_error(
            UnexpectedToken, f"unexpected end of input, expected {expected}", self._tokenizer.pos
        )

    def make_syntax_error(self, cls: Type[ParseError], message: str, pos: Mark) -> ParseError:
        return cls(message, pos, self._tokenizer.text, self._filename)
