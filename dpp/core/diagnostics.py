from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional
from rich.console import Console
from rich.markup import escape
from .errors import DppError
from .tokens import SourceLocation

class DiagnosticLevel(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    NOTE = "note"

_STYLES = {
    DiagnosticLevel.ERROR: "bold red",
    DiagnosticLevel.WARNING: "yellow",
    DiagnosticLevel.INFO: "blue",
    DiagnosticLevel.NOTE: "cyan",
}

@dataclass
class Diagnostic:
    level: DiagnosticLevel
    message: str
    location: Optional[SourceLocation] = None
    notes: List[str] = field(default_factory=list)
    fix_suggestion: Optional[str] = None

    @classmethod
    def from_error(cls, error: DppError) -> "Diagnostic":
        notes = []
        if error.stage is not None:
            notes.append(f"raised during the {error.stage.value} stage")
        return cls(DiagnosticLevel.ERROR, error.message, error.location, notes)

    def format(self, with_colors: bool = True) -> str:
        """Render as rich markup, or plain text when with_colors is off."""
        def styled(level: DiagnosticLevel, text: str) -> str:
            text = escape(text)
            if not with_colors:
                return text
            style = _STYLES[level]
            return f"[{style}]{text}[/{style}]"

        result = styled(self.level, f"{self.level.value}: {self.message}")

        if self.location:
            result = f"{escape(str(self.location))}: {result}"
            if self.location.raw_line:
                result += f"\n  {escape(self.location.raw_line)}"
                result += f"\n  {' ' * (self.location.column - 1)}^"

        for note in self.notes:
            result += "\n" + styled(DiagnosticLevel.NOTE, f"note: {note}")

        if self.fix_suggestion:
            result += "\n" + styled(DiagnosticLevel.INFO, f"suggestion: {self.fix_suggestion}")

        return result

class DiagnosticEngine:
    def __init__(self):
        self.diagnostics: List[Diagnostic] = []
        self.error_count = 0
        self.warning_count = 0

    def report(self, diag: Diagnostic):
        self.diagnostics.append(diag)
        if diag.level == DiagnosticLevel.ERROR:
            self.error_count += 1
        elif diag.level == DiagnosticLevel.WARNING:
            self.warning_count += 1

    def error(self, message: str, location: Optional[SourceLocation] = None, **kwargs):
        self.report(Diagnostic(DiagnosticLevel.ERROR, message, location, **kwargs))

    def warning(self, message: str, location: Optional[SourceLocation] = None, **kwargs):
        self.report(Diagnostic(DiagnosticLevel.WARNING, message, location, **kwargs))

    def info(self, message: str, location: Optional[SourceLocation] = None, **kwargs):
        self.report(Diagnostic(DiagnosticLevel.INFO, message, location, **kwargs))

    def extend(self, other: "DiagnosticEngine"):
        for diag in other.diagnostics:
            self.report(diag)

    def has_errors(self) -> bool:
        return self.error_count > 0

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.level == DiagnosticLevel.WARNING]

    def print_all(self, console: Optional[Console] = None, with_colors: bool = True):
        console = console or Console(stderr=True)
        for diag in self.diagnostics:
            console.print(diag.format(with_colors), highlight=False)
