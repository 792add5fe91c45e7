"""
tinysexp Reader
Tokenizer and stack-based tree builder for parenthesized prefix expressions
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from pyparsing import Literal, MatchFirst, ParserElement, Regex, col, lineno

from error_handling import (
    ERROR,
    DiagnosticLog,
    ErrorKind,
    SexpParseError,
    SexpTokenizerError,
)
from values import SInt, SList, SName, pretty_print_tree, print_form, tree_depth


@dataclass(frozen=True)
class SourceSpan:
    """Source location information for a token"""
    filename: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    text: str = ""

    def __str__(self) -> str:
        return f"{self.filename}:{self.start_line}:{self.start_col}"


class TokenKind(Enum):
    WHITESPACE = "whitespace"
    START_BRACKET = "start bracket"
    END_BRACKET = "end bracket"
    NAME = "name"
    NUMBER = "number"


@dataclass(frozen=True)
class Token:
    """Classified span of source text; text is None for brackets and whitespace"""
    kind: TokenKind
    text: Optional[str] = None
    span: Optional[SourceSpan] = field(default=None, compare=False)

    def __str__(self) -> str:
        if self.text is not None:
            return f"Token({self.kind.value}, {self.text})"
        return f"Token({self.kind.value})"


@dataclass(frozen=True)
class ReadResult:
    """Everything produced by reading one source text"""
    root: SList
    tokens: List[Token]
    diagnostics: List[Dict]

    @property
    def ok(self) -> bool:
        return not any(d['severity'] == ERROR for d in self.diagnostics)


# Characters the tokenizer understands; anything else is dropped before scanning
WHITESPACE_CHARS = " \t\n"
NAME_START_CHARS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ+"
DIGITS = "0123456789"
RECOGNIZED_CHARS = frozenset(WHITESPACE_CHARS + NAME_START_CHARS + DIGITS + "()")


class SexpTokenizer:
    """
    Single-pass tokenizer built from pyparsing lexical classes.

    A digit extends an open name or number, a letter or '+' extends only an
    open name, and whitespace runs collapse into one token. Unrecognized
    characters are removed before scanning, so they never close the open
    token: "ab-c" reads as the single name "abc".
    """

    def __init__(self, filename: str = "<input>", strict: bool = False, debug: bool = False):
        self.filename = filename
        self.strict = strict
        self.debug = debug
        self._setup_token_patterns()

    def _setup_token_patterns(self):
        """Setup the lexical classes"""
        start_bracket = Literal("(").set_parse_action(lambda t: (TokenKind.START_BRACKET, None))
        end_bracket = Literal(")").set_parse_action(lambda t: (TokenKind.END_BRACKET, None))
        number = Regex(r"[0-9]+").set_parse_action(lambda t: (TokenKind.NUMBER, t[0]))
        name = Regex(r"[A-Za-z+][A-Za-z0-9+]*").set_parse_action(lambda t: (TokenKind.NAME, t[0]))
        whitespace = Regex(r"[ \t\n]+").set_parse_action(lambda t: (TokenKind.WHITESPACE, None))

        # Whitespace is significant and tabs must survive with their offsets
        self.lexeme: ParserElement = MatchFirst(
            [start_bracket, end_bracket, number, name, whitespace]
        ).leave_whitespace().parse_with_tabs()

    def _filter_source(self, text: str) -> Tuple[str, List[int]]:
        """Drop unrecognized characters, remembering where each kept one came from"""
        kept = []
        offsets = []
        for pos, char in enumerate(text):
            if char in RECOGNIZED_CHARS:
                kept.append(char)
                offsets.append(pos)
            elif self.strict:
                self._raise_unknown_character(text, pos)
            elif self.debug:
                print(f"Dropping unrecognized character {char!r} at offset {pos}")
        return ''.join(kept), offsets

    def _raise_unknown_character(self, text: str, pos: int):
        log = DiagnosticLog(text)
        diagnostic = log.report(
            ErrorKind.UNKNOWN_CHARACTER,
            f"Unknown character {text[pos]!r}",
            self._make_span(text, pos, pos + 1),
        )
        raise SexpTokenizerError(diagnostic)

    def _make_span(self, text: str, start: int, end: int) -> SourceSpan:
        last = max(start, end - 1)
        return SourceSpan(
            self.filename,
            lineno(start, text), col(start, text),
            lineno(last, text), col(last, text) + 1,
            text[start:end],
        )

    def iter_tokens(self, text: str) -> Iterator[Token]:
        """Lazily yield tokens in source order"""
        filtered, offsets = self._filter_source(text)

        for result, start, end in self.lexeme.scan_string(filtered, always_skip_whitespace=False):
            kind, value = result[0]
            orig_start = offsets[start]
            orig_end = offsets[end - 1] + 1
            yield Token(kind, value, self._make_span(text, orig_start, orig_end))

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize source text into a materialized token list"""
        tokens = list(self.iter_tokens(text))
        if self.debug:
            print(f"Tokenized {len(tokens)} tokens")
        return tokens


class SexpTreeBuilder:
    """
    Builds one root list from a token sequence using a stack of open lists.

    An end bracket with nothing open is reported where it occurs and
    skipped; lists left open at the end are reported against their opening
    bracket. Either way the best-effort tree is returned, unless strict is
    set, in which case the first structural problem raises SexpParseError.
    """

    def __init__(self, log: Optional[DiagnosticLog] = None, strict: bool = False, debug: bool = False):
        self.log = log if log is not None else DiagnosticLog()
        self.strict = strict
        self.debug = debug

    def _report(self, kind: ErrorKind, message: str, span: Optional[SourceSpan]):
        diagnostic = self.log.report(kind, message, span)
        if self.strict:
            raise SexpParseError(diagnostic)

    def _parse_integer(self, token: Token) -> int:
        try:
            return int(token.text, 10)
        except (TypeError, ValueError):
            self._report(
                ErrorKind.BAD_INTEGER,
                f"Bad conversion: {token.text!r} is not an integer",
                token.span,
            )
            return 0

    def build(self, tokens: List[Token]) -> SList:
        root = SList()
        stack = [root]
        # Opening token of every frame above the root
        openers: List[Token] = []

        for token in tokens:
            if token.kind is TokenKind.WHITESPACE:
                continue
            elif token.kind is TokenKind.START_BRACKET:
                lst = SList()
                stack[-1].add(lst)
                stack.append(lst)
                openers.append(token)
            elif token.kind is TokenKind.END_BRACKET:
                if len(stack) == 1:
                    self._report(ErrorKind.UNEXPECTED_CLOSE, "Unbalanced brackets: unexpected ')'", token.span)
                    continue
                stack.pop()
                openers.pop()
            elif token.kind is TokenKind.NAME:
                stack[-1].add(SName(token.text))
            elif token.kind is TokenKind.NUMBER:
                stack[-1].add(SInt(self._parse_integer(token)))

        if len(stack) != 1 or stack[-1] is not root:
            for opener in openers:
                self._report(ErrorKind.UNCLOSED_LIST, "Unbalanced brackets: '(' is never closed", opener.span)

        if self.debug:
            print(f"Built tree with {len(root.items)} top-level forms, depth {tree_depth(root)}")

        return root


class SexpParser:
    """Reader combining the tokenizer and the tree builder"""

    def __init__(self, debug: bool = False, strict: bool = False, echo: bool = False):
        self.debug = debug
        self.strict = strict
        self.echo = echo

    def tokenize(self, text: str, filename: str = "<input>") -> List[Token]:
        """Tokenize source text"""
        tokenizer = SexpTokenizer(filename, strict=self.strict, debug=self.debug)
        return tokenizer.tokenize(text)

    def build(self, tokens: List[Token], log: Optional[DiagnosticLog] = None) -> SList:
        """Build a tree from an already tokenized sequence"""
        builder = SexpTreeBuilder(log, strict=self.strict, debug=self.debug)
        return builder.build(tokens)

    def parse_string(self, text: str, filename: str = "<input>") -> ReadResult:
        """Read source text into a root list"""
        log = DiagnosticLog(text, echo=self.echo and not self.strict)
        tokens = self.tokenize(text, filename)
        root = self.build(tokens, log)
        return ReadResult(root, tokens, log.entries)


# Factory functions for creating parsers
def create_parser(debug: bool = False, strict: bool = False, echo: bool = False) -> SexpParser:
    """Create a reader"""
    return SexpParser(debug=debug, strict=strict, echo=echo)


def create_debug_parser() -> SexpParser:
    """Create a reader with debug tracing enabled"""
    return SexpParser(debug=True)


if __name__ == "__main__":
    parser = create_debug_parser()
    result = parser.parse_string("(+ 2 (+ 30 10))")
    for token in result.tokens:
        print(token)
    print("READ:", print_form(result.root))
    print(pretty_print_tree(result.root))
