from enum import Enum
from typing import Optional
from .tokens import SourceLocation, Token

class Stage(Enum):
    LEX = "lex"
    PARSE = "parse"
    SEMANTIC = "semantic"

class DppError(Exception):
    """Base class for D++ compilation errors"""

    stage: Optional[Stage] = None

    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        self.message = message
        self.location = location
        super().__init__(self._format_error())

    def _format_error(self) -> str:
        if self.location is not None:
            return f"{self.location}: {self.message}"
        return self.message

class LexError(DppError):
    """Tokenizer failure, always tied to a source position"""
    stage = Stage.LEX

class UnterminatedString(LexError):
    def __init__(self, location: SourceLocation):
        super().__init__("Unterminated string", location)

class UnexpectedCharacter(LexError):
    def __init__(self, char: str, location: SourceLocation):
        self.char = char
        super().__init__(f"Unexpected character: {char!r}", location)

class ParseError(DppError):
    stage = Stage.PARSE

    def __init__(self, message: str, token: Optional[Token] = None,
                 expected: Optional[str] = None):
        self.token = token
        self.expected = expected
        self.found = str(token) if token is not None else None
        if token is not None:
            message = f"{message}, found {token.kind.value} '{token.text}'"
        super().__init__(message, token.location if token is not None else None)

class InvalidAssignmentTarget(ParseError):
    def __init__(self, token: Optional[Token] = None):
        super().__init__("Invalid assignment target", token)

class SemanticError(DppError):
    stage = Stage.SEMANTIC

class UndefinedVariable(SemanticError):
    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        self.name = name
        super().__init__(f"Undefined variable: {name}", location)
