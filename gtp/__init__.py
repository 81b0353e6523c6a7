from gtp.build import build_grammar
from gtp.build import build_grammar_from_file
from gtp.build import parse
from gtp.build import with_options
from gtp.grammar import AmbiguityError
from gtp.grammar import Grammar
from gtp.grammar import GrammarError
from gtp.grammar import MalformedGrammarError
from gtp.grammar import ParseOptions
from gtp.node import Leaf
from gtp.node import Node
from gtp.node import TreeVisitor
from gtp.parser import ParseError
from gtp.parser import Parser
from gtp.tokenizer import Tokenizer

__all__ = [
    "AmbiguityError",
    "build_grammar",
    "build_grammar_from_file",
    "Grammar",
    "GrammarError",
    "Leaf",
    "MalformedGrammarError",
    "Node",
    "parse",
    "ParseError",
    "ParseOptions",
    "Parser",
    "Tokenizer",
    "TreeVisitor",
    "with_options",
]
