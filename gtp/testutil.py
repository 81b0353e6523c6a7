import textwrap

from typing import List

from gtp.build import build_grammar, parse
from gtp.grammar import Grammar, ParseOptions
from gtp.node import AST
from gtp.tokenizer import Lexem, Tokenizer


def parse_string(source: str, grammar: Grammar, *, dedent: bool = True, verbose: bool = False) -> AST:
    # Run the parser on a string.
    if dedent:
        source = textwrap.dedent(source)
    return parse(grammar, source, verbose_parser=verbose)


def make_grammar(source: str, *, dedent: bool = True, check: bool = True, **options: bool) -> Grammar:
    # Build a grammar from its description, then set options on it.
    if dedent:
        source = textwrap.dedent(source)
    grammar = build_grammar(source, check=check)
    if options:
        grammar = grammar.with_options(ParseOptions(**options))
    return grammar


def tokenize_string(text: str, grammar: Grammar) -> List[Lexem]:
    tokenizer = Tokenizer(text, grammar)
    tokens = []
    while (tok := tokenizer.getnext()) is not None:
        tokens.append(tok)
    return tokens
