import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional
from .tokens import SourceLocation
from .diagnostics import DiagnosticEngine
from .ast import ASTNode, ProgramNode, BlockNode, FunctionDeclarationNode, VarDeclarationNode, TypeNode

@dataclass
class Symbol:
    name: str
    signature: str
    scope_level: int = 0
    location: Optional[SourceLocation] = None
    is_function: bool = False
    is_parameter: bool = False

class SymbolTable:
    """Stack of lexical scopes; scope 0 holds the program's global declarations"""

    def __init__(self, global_scope: Optional[Dict[str, Symbol]] = None):
        self.scopes: List[Dict[str, Symbol]] = [global_scope if global_scope is not None else {}]
        self.current_scope_level = 0
        self.global_scope = self.scopes[0]

    def enter_scope(self):
        self.current_scope_level += 1
        self.scopes.append({})

    def exit_scope(self):
        if self.current_scope_level > 0:
            self.scopes.pop()
            self.current_scope_level -= 1

    def define(self, symbol: Symbol) -> bool:
        """Define a symbol in the current scope.

        The last definition of a name wins; returns False when an earlier
        definition in the same scope was replaced.
        """
        symbol.scope_level = self.current_scope_level
        current = self.scopes[self.current_scope_level]
        is_new = symbol.name not in current
        current[symbol.name] = symbol
        return is_new

    def lookup(self, name: str) -> Optional[Symbol]:
        for scope in reversed(self.scopes):
            if name in scope:
                return scope[name]
        return None

    def lookup_current_scope(self, name: str) -> Optional[Symbol]:
        return self.scopes[self.current_scope_level].get(name)

    def fork(self) -> "SymbolTable":
        """New table sharing this table's global scope, for scoped walks."""
        return SymbolTable(self.global_scope)

    def signatures(self) -> Dict[str, str]:
        return {name: sym.signature for name, sym in self.global_scope.items()}

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def __getitem__(self, name: str) -> str:
        symbol = self.lookup(name)
        if symbol is None:
            raise KeyError(name)
        return symbol.signature

    def __iter__(self) -> Iterator[str]:
        return iter(self.global_scope)

    def __len__(self) -> int:
        return len(self.global_scope)

def type_name(node: Optional[ASTNode], default: str = "void") -> str:
    if isinstance(node, TypeNode):
        return node.name
    return default

def function_signature(node: FunctionDeclarationNode) -> str:
    param_types = [type_name(p.var_type) for p in node.parameters
                   if isinstance(p.var_type, TypeNode)]
    return f"fn({', '.join(param_types)}) -> {type_name(node.return_type)}"

class SymbolTableBuilder:
    """Collects the program's declarations into a single global scope.

    Function bodies are not entered: parameters and locals are resolved by
    the semantic checker's own scopes.
    """

    def __init__(self):
        self.diagnostics = DiagnosticEngine()
        self.logger = logging.getLogger(__name__)

    def build(self, program: ProgramNode) -> SymbolTable:
        table = SymbolTable()
        self._traverse(program, table)
        self.logger.debug("Symbol table holds %d globals", len(table))
        return table

    def _traverse(self, node: ASTNode, table: SymbolTable):
        if isinstance(node, VarDeclarationNode):
            if isinstance(node.var_type, TypeNode):
                self._define(table, Symbol(node.name, node.var_type.name, location=node.location))
        elif isinstance(node, FunctionDeclarationNode):
            self._define(table, Symbol(node.name, function_signature(node),
                                       location=node.location, is_function=True))
        elif isinstance(node, (ProgramNode, BlockNode)):
            for child in node.get_children():
                self._traverse(child, table)

    def _define(self, table: SymbolTable, symbol: Symbol):
        if not table.define(symbol):
            self.diagnostics.warning(f"'{symbol.name}' redeclared; the last declaration wins",
                                     symbol.location)

def build_symbol_table(program: ProgramNode) -> SymbolTable:
    return SymbolTableBuilder().build(program)
