from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree
from dataclasses import fields
from typing import Iterable, Iterator, List, Tuple
import os
from ..core.ast import ASTNode
from ..core.symbols import SymbolTable
from ..core.tokens import Token

console = Console()
error_console = Console(stderr=True)

def is_minimal() -> bool:
    env = os.environ.get('DPP_MINIMAL_UI')
    if env is not None:
        return env.strip() in ('1', 'true', 'yes', 'on')
    return False

def print_error(message: str):
    if is_minimal():
        error_console.print(f"[ERROR] {message}", markup=False)
        return
    error_console.print(f"[red]Error:[/red] {escape(message)}")

def print_warning(message: str):
    if is_minimal():
        error_console.print(f"[WARN] {message}", markup=False)
        return
    error_console.print(f"[#9b59b6]Warning:[/#9b59b6] {escape(message)}")

def print_success(message: str):
    if is_minimal():
        console.print(f"[OK] {message}", markup=False)
        return
    console.print(f"[green]Success:[/green] {escape(message)}")

def token_table(tokens: Iterable[Token]) -> Table:
    table = Table(title="Tokens")
    table.add_column("Line", justify="right")
    table.add_column("Col", justify="right")
    table.add_column("Kind", style="cyan")
    table.add_column("Text")
    for tok in tokens:
        table.add_row(str(tok.line), str(tok.column), tok.kind.value, escape(tok.text))
    return table

def symbol_table(symbols: SymbolTable) -> Table:
    table = Table(title="Symbols")
    table.add_column("Name", style="bold")
    table.add_column("Signature", style="green")
    for name, signature in sorted(symbols.signatures().items()):
        table.add_row(escape(name), escape(signature))
    return table

def _node_label(node: ASTNode, markup: bool = True) -> str:
    # scalar fields go in the label, child nodes become branches
    attrs = []
    for f in fields(node):
        value = getattr(node, f.name)
        if f.name == 'location' or isinstance(value, (ASTNode, list)) or value is None:
            continue
        attrs.append(f"{f.name}={value!r}")
    name = type(node).__name__
    text = ", ".join(attrs)
    if not markup:
        return f"{name} {text}" if attrs else name
    label = f"[bold]{name}[/bold]"
    if attrs:
        label += " " + escape(text)
    return label

def _walk(node: ASTNode) -> Iterator[Tuple[ASTNode, int]]:
    # explicit stack, operator chains can nest past the recursion limit
    stack = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        yield current, depth
        for child in reversed(current.get_children()):
            stack.append((child, depth + 1))

def ast_tree(node: ASTNode) -> Tree:
    levels: List[Tree] = []
    for current, depth in _walk(node):
        label = _node_label(current)
        branch = Tree(label) if depth == 0 else levels[depth - 1].add(label)
        del levels[depth:]
        levels.append(branch)
    return levels[0]

def ast_outline(node: ASTNode) -> List[str]:
    return ["  " * depth + _node_label(current, markup=False) for current, depth in _walk(node)]

def listing_panel(lines: List[str], title: str) -> Panel:
    return Panel(escape('\n'.join(lines)), title=title, expand=False)
