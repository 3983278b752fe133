"""D++ compiler front-end: tokens, AST, stack-machine IR and x86-64 listing"""
from .core import (
    CompilerConfig, CompilationResult, DppCompiler, DppError,
    compile_string, compile_file,
)

__version__ = "0.1.0"

__all__ = [
    'CompilerConfig','CompilationResult','DppCompiler','DppError',
    'compile_string','compile_file','__version__',
]
