from enum import Enum
from dataclasses import dataclass, field
from typing import FrozenSet

class TokenKind(Enum):
    IDENTIFIER = "Identifier"
    KEYWORD = "Keyword"
    OPERATOR = "Operator"
    LITERAL = "Literal"
    SEPARATOR = "Separator"
    # Recognized while scanning, never emitted
    COMMENT = "Comment"
    WHITESPACE = "Whitespace"

DEFAULT_KEYWORDS: FrozenSet[str] = frozenset({"fn", "let", "if", "else", "while", "return"})

EOF_TEXT = "EOF"

@dataclass(frozen=True)
class SourceLocation:
    line: int
    column: int
    file: str = "<stdin>"
    raw_line: str = field(default="", compare=False, repr=False)

    def __str__(self):
        return f"{self.file}:{self.line}:{self.column}"

@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    location: SourceLocation

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int:
        return self.location.column

    @property
    def is_eof(self) -> bool:
        return self.kind is TokenKind.SEPARATOR and self.text == EOF_TEXT

    def matches(self, kind: TokenKind, text: str = "") -> bool:
        """True when the kind matches and, if given, the text as well."""
        return self.kind is kind and (not text or self.text == text)

    def __str__(self):
        return f"{self.kind.value}({self.text})"
