import logging
import string
from typing import AbstractSet, List, Optional
from .tokens import TokenKind, Token, SourceLocation, DEFAULT_KEYWORDS, EOF_TEXT
from .errors import UnterminatedString, UnexpectedCharacter

WORD_START = frozenset(string.ascii_letters + "_")
WORD_CHARS = frozenset(string.ascii_letters + string.digits + "_")
DIGITS = frozenset(string.digits)

SEPARATORS = frozenset("(){},;:")
OPERATORS = frozenset("+-*/")

# Longest match first; "->" is punctuation in function headers
TWO_CHAR_TOKENS = {
    "==": TokenKind.OPERATOR,
    "!=": TokenKind.OPERATOR,
    "<=": TokenKind.OPERATOR,
    ">=": TokenKind.OPERATOR,
    "->": TokenKind.SEPARATOR,
}
ONE_CHAR_COMPARISONS = frozenset("=!<>")

SKIPPED = frozenset(" \r\t")


class DppLexer:
    """Character-level scanner turning D++ source into a token list.

    The scan runs left to right without backtracking. Whitespace and line
    comments are consumed but never emitted, and the returned list always
    ends with a synthetic ``Separator("EOF")`` token.
    """

    def __init__(self, source: str, filename: str = "<stdin>",
                 keywords: Optional[AbstractSet[str]] = None):
        self.source = source
        self.filename = filename
        self.keywords = frozenset(keywords) if keywords is not None else DEFAULT_KEYWORDS
        self.logger = logging.getLogger(__name__)

        self._lines = source.split("\n")

        # Lexer state
        self.position = 0
        self.line = 1
        self.column = 1
        self.start = 0
        self.start_location = self._location()
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        while not self._at_end():
            self.start = self.position
            self.start_location = self._location()
            self._scan_token()

        self.tokens.append(Token(TokenKind.SEPARATOR, EOF_TEXT, self._location()))
        self.logger.debug("Scanned %d tokens from %s", len(self.tokens), self.filename)
        return self.tokens

    def _scan_token(self):
        c = self._advance()

        if c in SKIPPED:
            return
        if c == "\n":
            self._newline()
            return
        if c == "/" and self._match("/"):
            self._skip_line_comment()
            return

        two = c + self._peek()
        if two in TWO_CHAR_TOKENS:
            self._advance()
            self._add_token(TWO_CHAR_TOKENS[two])
            return

        if c in ONE_CHAR_COMPARISONS or c in OPERATORS:
            self._add_token(TokenKind.OPERATOR)
        elif c in SEPARATORS:
            self._add_token(TokenKind.SEPARATOR)
        elif c == '"':
            self._string()
        elif c in DIGITS:
            self._number()
        elif c in WORD_START:
            self._word()
        else:
            raise UnexpectedCharacter(c, self.start_location)

    def _string(self):
        while not self._at_end() and self._peek() != '"':
            c = self._advance()
            if c == "\n":
                self._newline()
            elif c == "\\" and not self._at_end():
                # keeps an escaped quote inside the literal; text stays raw
                if self._advance() == "\n":
                    self._newline()

        if self._at_end():
            raise UnterminatedString(self.start_location)

        self._advance()
        self._add_token(TokenKind.LITERAL)

    def _number(self):
        while self._peek() in DIGITS:
            self._advance()

        if self._peek() == "." and self._peek(1) in DIGITS:
            self._advance()
            while self._peek() in DIGITS:
                self._advance()

        self._add_token(TokenKind.LITERAL)

    def _word(self):
        while self._peek() in WORD_CHARS:
            self._advance()

        text = self.source[self.start:self.position]
        kind = TokenKind.KEYWORD if text in self.keywords else TokenKind.IDENTIFIER
        self._add_token(kind)

    def _skip_line_comment(self):
        while not self._at_end() and self._peek() != "\n":
            self._advance()

    # helpers

    def _at_end(self) -> bool:
        return self.position >= len(self.source)

    def _advance(self) -> str:
        c = self.source[self.position]
        self.position += 1
        self.column += 1
        return c

    def _match(self, expected: str) -> bool:
        if self._peek() != expected:
            return False
        self._advance()
        return True

    def _peek(self, offset: int = 0) -> str:
        index = self.position + offset
        if index >= len(self.source):
            return "\0"
        return self.source[index]

    def _newline(self):
        self.line += 1
        self.column = 1

    def _location(self) -> SourceLocation:
        raw_line = self._lines[self.line - 1] if self.line <= len(self._lines) else ""
        return SourceLocation(self.line, self.column, self.filename, raw_line)

    def _add_token(self, kind: TokenKind):
        text = self.source[self.start:self.position]
        self.tokens.append(Token(kind, text, self.start_location))


def tokenize(source: str, filename: str = "<stdin>",
             keywords: Optional[AbstractSet[str]] = None) -> List[Token]:
    return DppLexer(source, filename, keywords).tokenize()
