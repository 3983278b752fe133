"""Core package re-exports for the D++ front-end"""
from .tokens import TokenKind, Token, SourceLocation, DEFAULT_KEYWORDS
from .errors import (
    Stage, DppError, LexError, UnterminatedString, UnexpectedCharacter,
    ParseError, InvalidAssignmentTarget, SemanticError, UndefinedVariable,
)
from .diagnostics import DiagnosticLevel, Diagnostic, DiagnosticEngine
from .lexer import DppLexer, tokenize
from .ast import *
from .visitor import ASTVisitor
from .symbols import Symbol, SymbolTable, SymbolTableBuilder, build_symbol_table
from .parser import DppParser, parse
from .pipeline import (
    CompilerConfig, CompilationResult, DppCompiler, create_default_compiler,
    compile_string, compile_file, load_keywords,
)

__all__ = [
    'TokenKind','Token','SourceLocation','DEFAULT_KEYWORDS',
    'Stage','DppError','LexError','UnterminatedString','UnexpectedCharacter',
    'ParseError','InvalidAssignmentTarget','SemanticError','UndefinedVariable',
    'DiagnosticLevel','Diagnostic','DiagnosticEngine',
    'DppLexer','tokenize',
    'ASTVisitor',
    'Symbol','SymbolTable','SymbolTableBuilder','build_symbol_table',
    'DppParser','parse',
    'CompilerConfig','CompilationResult','DppCompiler','create_default_compiler',
    'compile_string','compile_file','load_keywords',
]
