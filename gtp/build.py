from typing import Tuple

from gtp.grammar import Grammar, ParseOptions
from gtp.grammar_parser import GrammarLowering, META_GRAMMAR
from gtp.node import AST
from gtp.parser import Parser
from gtp.tokenizer import Tokenizer


def build_parser(
    grammar: Grammar,
    text: str,
    *,
    filename: str = "<input>",
    verbose_tokenizer: bool = False,
    verbose_parser: bool = False,
) -> Tuple[Parser, Tokenizer]:
    tokenizer = Tokenizer(text, grammar, verbose=verbose_tokenizer)
    parser = Parser(grammar, tokenizer, verbose=verbose_parser, filename=filename)
    return parser, tokenizer


def parse(
    grammar: Grammar,
    text: str,
    *,
    filename: str = "<input>",
    verbose_tokenizer: bool = False,
    verbose_parser: bool = False,
) -> AST:
    """Parse text with grammar, raising ParseError if it doesn't match."""
    parser, _ = build_parser(
        grammar,
        text,
        filename=filename,
        verbose_tokenizer=verbose_tokenizer,
        verbose_parser=verbose_parser,
    )
    return parser.start()


def build_grammar(
    grammar_text: str,
    *,
    filename: str = "<grammar>",
    check: bool = True,
    verbose_tokenizer: bool = False,
    verbose_parser: bool = False,
) -> Grammar:
    """Build a Grammar from its description in the grammar notation.

    With check set (the default) the result is also validated, so a
    grammar that can't be used for predictive parsing raises GrammarError
    here rather than misbehaving later.
    """
    tree = parse(
        META_GRAMMAR,
        grammar_text,
        filename=filename,
        verbose_tokenizer=verbose_tokenizer,
        verbose_parser=verbose_parser,
    )
    grammar = GrammarLowering().visit(tree)
    if check:
        grammar.check()
    return grammar


def build_grammar_from_file(grammar_file: str, **kwargs) -> Grammar:
    with open(grammar_file, encoding="utf-8") as file:
        grammar_text = file.read()
    return build_grammar(grammar_text, filename=grammar_file, **kwargs)


def with_options(grammar: Grammar, options: ParseOptions) -> Grammar:
    return grammar.with_options(options)
