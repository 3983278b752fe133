import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, Dict, List, Optional, Union
from .tokens import Token, DEFAULT_KEYWORDS
from .errors import DppError, SemanticError
from .diagnostics import Diagnostic, DiagnosticEngine
from .lexer import DppLexer
from .parser import DppParser
from .ast import ProgramNode
from .symbols import SymbolTable, SymbolTableBuilder
from ..compiler.semantic import SemanticAnalyzer
from ..compiler.optimizer import Optimizer
from ..compiler.ir import IRGenerator, IRInstruction, format_ir
from ..compiler.codegen import AssemblyCodeGenerator

logger = logging.getLogger(__name__)

class CompilerConfig:
    def __init__(self):
        self.optimization_level = 0
        self.target_arch = "x86_64"
        self.verbose = False
        self.warnings_as_errors = False
        self.keywords: AbstractSet[str] = DEFAULT_KEYWORDS
        self.output_format = "nasm"

def load_keywords(path: Union[str, Path]) -> AbstractSet[str]:
    """Read a reserved-word set, one keyword per line; '#' starts a comment."""
    keywords = set()
    for line in Path(path).read_text(encoding='utf-8').splitlines():
        word = line.split('#', 1)[0].strip()
        if word:
            keywords.add(word)
    return frozenset(keywords)

@dataclass
class CompilationResult:
    tokens: List[Token]
    ast: ProgramNode
    symbols: SymbolTable
    ir: List[IRInstruction]
    assembly: List[str]
    warnings: List[Diagnostic] = field(default_factory=list)

    @property
    def assembly_text(self) -> str:
        return '\n'.join(self.assembly)

    @property
    def ir_text(self) -> List[str]:
        return format_ir(self.ir)

    @property
    def symbol_signatures(self) -> Dict[str, str]:
        return self.symbols.signatures()

class DppCompiler:
    """Runs one compilation unit through every stage.

    Each stage consumes the previous stage's complete output. The first
    DppError aborts the pipeline and propagates to the caller.
    """

    def __init__(self, config: Optional[CompilerConfig] = None):
        self.config = config or CompilerConfig()
        self.diagnostics = DiagnosticEngine()

    def compile(self, source: str, filename: str = "<stdin>") -> CompilationResult:
        self.diagnostics = DiagnosticEngine()
        try:
            return self._compile(source, filename)
        except DppError as e:
            stage = e.stage.value if e.stage else "unknown"
            logger.info("Compilation of %s failed in the %s stage", filename, stage)
            self.diagnostics.report(Diagnostic.from_error(e))
            raise

    def _compile(self, source: str, filename: str) -> CompilationResult:
        self._log("Phase 1: Lexical analysis")
        tokens = DppLexer(source, filename, self.config.keywords).tokenize()
        self._log("  Generated %d tokens", len(tokens))

        self._log("Phase 2: Parsing")
        ast = DppParser(tokens).parse()
        self._log("  Generated AST with %d declarations", len(ast.declarations))

        self._log("Phase 3: Symbol table")
        builder = SymbolTableBuilder()
        symbols = builder.build(ast)
        self.diagnostics.extend(builder.diagnostics)
        self._log("  Collected %d global symbols", len(symbols))
        if self.config.warnings_as_errors and self.diagnostics.warning_count:
            first = self.diagnostics.warnings[0]
            raise SemanticError(first.message, first.location)

        self._log("Phase 4: Semantic analysis")
        SemanticAnalyzer(symbols).check(ast)

        self._log("Phase 5: Optimization (level %d)", self.config.optimization_level)
        ast = Optimizer(self.config.optimization_level).optimize(ast)

        self._log("Phase 6: IR generation")
        ir = IRGenerator().generate(ast)
        self._log("  Generated %d IR instructions", len(ir))

        self._log("Phase 7: Code generation")
        assembly = AssemblyCodeGenerator().generate(ir)
        self._log("Compilation successful: %d assembly lines, %d warnings",
                  len(assembly), self.diagnostics.warning_count)

        return CompilationResult(tokens, ast, symbols, ir, assembly,
                                 warnings=self.diagnostics.warnings)

    def _log(self, message: str, *args):
        # phase progress is INFO in verbose mode, DEBUG otherwise
        level = logging.INFO if self.config.verbose else logging.DEBUG
        logger.log(level, message, *args)

def create_default_compiler() -> DppCompiler:
    config = CompilerConfig()
    return DppCompiler(config)

def _make_config(optimization_level: int = 0, verbose: bool = False,
                 warnings_as_errors: bool = False,
                 keywords: Optional[AbstractSet[str]] = None) -> CompilerConfig:
    config = CompilerConfig()
    config.optimization_level = optimization_level
    config.verbose = verbose
    config.warnings_as_errors = warnings_as_errors
    if keywords is not None:
        config.keywords = frozenset(keywords)
    return config

def compile_string(source: str, filename: str = "<string>", **options) -> CompilationResult:
    compiler = DppCompiler(_make_config(**options))
    return compiler.compile(source, filename)

def compile_file(filepath: Union[str, Path], **options) -> CompilationResult:
    path = Path(filepath)
    source = path.read_text(encoding='utf-8')
    compiler = DppCompiler(_make_config(**options))
    return compiler.compile(source, str(path))
