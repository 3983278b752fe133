#!/usr/bin/env python3
import argparse
import logging
import sys
from pathlib import Path
from typing import List

from .core.errors import DppError
from .core.pipeline import CompilationResult, CompilerConfig, DppCompiler, load_keywords
from .compiler.ir import format_ir
from .utils import term

EMIT_CHOICES = ('asm', 'ir', 'ast', 'tokens', 'symbols')


def write_output(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')


def _text_lines(result: CompilationResult, emit: str) -> List[str]:
    if emit == 'asm':
        return result.assembly
    if emit == 'ir':
        return format_ir(result.ir)
    if emit == 'tokens':
        return [f"{tok.line}:{tok.column} {tok}" for tok in result.tokens]
    if emit == 'symbols':
        return [f"{name}: {sig}" for name, sig in sorted(result.symbols.signatures().items())]
    return term.ast_outline(result.ast)


def _render(result: CompilationResult, emit: str):
    if emit == 'tokens':
        term.console.print(term.token_table(result.tokens))
    elif emit == 'symbols':
        term.console.print(term.symbol_table(result.symbols))
    elif emit == 'ast':
        term.console.print(term.ast_tree(result.ast))
    elif emit == 'ir':
        term.console.print(term.listing_panel(format_ir(result.ir), "IR"))
    else:
        term.console.print(term.listing_panel(result.assembly, "x86-64"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='dpp', description='D++ compiler front-end')
    parser.add_argument('input', help='D++ source file')
    parser.add_argument('-o', '--output', help='Write the emitted artifact to this file instead of the terminal')
    parser.add_argument('--emit', choices=EMIT_CHOICES, default='asm', help='Which pipeline artifact to produce')
    parser.add_argument('-O', '--opt-level', type=int, choices=[0, 1], default=0, help='Optimization level (1 enables constant folding)')
    parser.add_argument('--keywords', help='File with the reserved-word set, one keyword per line')
    parser.add_argument('--warnings-as-errors', action='store_true', help='Fail on symbol redeclaration warnings')
    parser.add_argument('-v', '--verbose', action='store_true')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    input_path = Path(args.input)
    if not input_path.exists():
        term.print_error(f"File not found: {input_path}")
        return 2

    config = CompilerConfig()
    config.optimization_level = args.opt_level
    config.verbose = args.verbose
    config.warnings_as_errors = args.warnings_as_errors
    if args.keywords:
        try:
            config.keywords = load_keywords(args.keywords)
        except OSError as e:
            term.print_error(f"Cannot read keyword file: {e}")
            return 2

    try:
        source = input_path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        term.print_error(f"Cannot read {input_path}: {e}")
        return 2

    compiler = DppCompiler(config)
    try:
        result = compiler.compile(source, str(input_path))
    except DppError:
        compiler.diagnostics.print_all(term.error_console, with_colors=not term.is_minimal())
        return 1

    for warning in result.warnings:
        term.print_warning(f"{warning.location}: {warning.message}" if warning.location else warning.message)

    if args.output:
        out_path = Path(args.output)
        write_output(out_path, '\n'.join(_text_lines(result, args.emit)) + '\n')
        term.print_success(f"{args.emit} written to: {out_path}")
    else:
        _render(result, args.emit)
    return 0


if __name__ == '__main__':
    sys.exit(main())
