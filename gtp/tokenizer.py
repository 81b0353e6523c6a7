from typing import List, NamedTuple, Optional, Sequence, Tuple

from gtp.grammar import Atom, Grammar

Mark = int  # NewType('Mark', int)


class Lexem(NamedTuple):
    type: str
    string: str
    start: Mark

    @property
    def end(self) -> Mark:
        return self.start + len(self.string)

    def __repr__(self) -> str:
        return f"{self.type}({self.string!r:.25})"


def match_atom(atoms: Sequence[Atom], text: str, pos: Mark) -> Optional[Tuple[str, int]]:
    """Return (type, length) for the first atom matching at pos, or None."""
    for atom in atoms:
        length = atom.match(text, pos)
        if length > 0:
            return atom.name, length
    return None


def location(text: str, pos: Mark) -> Tuple[int, int, str]:
    """Return (line number, column, line) for an offset; lines count from 1."""
    lineno = text.count("\n", 0, pos) + 1
    linestart = text.rfind("\n", 0, pos) + 1
    lineend = text.find("\n", pos)
    if lineend < 0:
        lineend = len(text)
    return lineno, pos - linestart, text[linestart:lineend]


def shorttok(text: str, tok: Lexem) -> str:
    lineno, col, _ = location(text, tok.start)
    return "%-25.25s" % f"{lineno}.{col}: {tok.type}:{tok.string!r}"


def describe_token(tok: Lexem) -> str:
    if tok.type == tok.string:
        return repr(tok.string)
    return f"{tok.type} {tok.string!r}"


class Tokenizer:
    """Lexes text on demand with the atoms of a grammar.

    There is one token of lookahead and no way back.
    """

    _tokens: List[Lexem]

    def __init__(self, text: str, grammar: Grammar, *, verbose: bool = False):
        self._text = text
        self._atoms = grammar.atoms
        skip = ""
        if grammar.options.ignore_whitespace:
            skip += " "
        if grammar.options.ignore_newline:
            skip += "\n"
        self._skip = skip
        self._pos = self._skipped(0)
        self._peeked: Optional[Lexem] = None
        self._tokens = []
        self._error: Optional[Mark] = None
        self._verbose = verbose
        if verbose:
            self.report(False)

    @property
    def text(self) -> str:
        return self._text

    @property
    def pos(self) -> Mark:
        return self._pos

    @property
    def error(self) -> Optional[Mark]:
        """Offset of text no atom matches, once the stream has stopped there."""
        return self._error

    @property
    def tokens(self) -> List[Lexem]:
        return list(self._tokens)

    def peek(self) -> Optional[Lexem]:
        """Return the next token *without* consuming it."""
        if self._peeked is None and self._error is None:
            self._peeked = self._scan()
        return self._peeked

    def getnext(self) -> Optional[Lexem]:
        """Return the next token and advance past it."""
        cached = self._peeked is not None
        tok = self.peek()
        if tok is None:
            return None
        self._peeked = None
        self._tokens.append(tok)
        self._pos = self._skipped(tok.end)
        if self._verbose:
            self.report(cached)
        return tok

    def _skipped(self, pos: Mark) -> Mark:
        if self._skip:
            while pos < len(self._text) and self._text[pos] in self._skip:
                pos += 1
        return pos

    def _scan(self) -> Optional[Lexem]:
        pos = self._skipped(self._pos)
        if pos >= len(self._text):
            return None
        found = match_atom(self._atoms, self._text, pos)
        if found is None:
            self._error = pos
            if self._verbose:
                print(f"{'-' * len(self._tokens)}! no atom matches {self._text[pos:pos + 10]!r}")
            return None
        type, length = found
        return Lexem(type, self._text[pos:pos + length], pos)

    def exhausted(self) -> bool:
        return self.peek() is None and self._error is None

    def diagnose(self) -> Mark:
        """The offset an error message should point at."""
        if self._error is not None:
            return self._error
        tok = self.peek()
        if tok is not None:
            return tok.start
        return self._pos

    def report(self, cached: bool) -> None:
        if cached:
            fill = "-" * len(self._tokens) + ">"
        else:
            fill = "-" * len(self._tokens) + "*"
        if not self._tokens:
            print(f"{fill} (Bof)")
        else:
            tok = self._tokens[-1]
            print(f"{fill} {shorttok(self._text, tok)}")
