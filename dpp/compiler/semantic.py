import logging
from ..core.errors import UndefinedVariable
from ..core.symbols import Symbol, SymbolTable
from ..core.visitor import ASTVisitor
from ..core.ast import (
    ProgramNode, FunctionDeclarationNode, VarDeclarationNode, TypeNode, BlockNode,
    ExpressionStatementNode, BinaryOpNode, UnaryOpNode, LiteralNode, IdentifierNode,
    FunctionCallNode, left_spine, unary_chain,
)


class SemanticAnalyzer(ASTVisitor):
    """Checks that every identifier reference resolves to a declaration.

    Globals come from the symbol table built for this same program. Function
    parameters and block locals live in scopes pushed on entry and popped on
    exit, and lookups walk from the innermost scope outward. No type
    compatibility checking is done. The first unresolved name raises
    UndefinedVariable.
    """

    def __init__(self, symbol_table: SymbolTable):
        self.symbol_table = symbol_table
        self.scopes = symbol_table.fork()
        self.logger = logging.getLogger(__name__)

    def check(self, program: ProgramNode):
        program.accept(self)

    def visit_program(self, node: ProgramNode):
        for decl in node.declarations:
            decl.accept(self)

    def visit_function_declaration(self, node: FunctionDeclarationNode):
        self.scopes.enter_scope()
        try:
            for param in node.parameters:
                self.scopes.define(Symbol(param.name, _type_of(param), location=param.location,
                                          is_parameter=True))
            node.body.accept(self)
        finally:
            self.scopes.exit_scope()

    def visit_block(self, node: BlockNode):
        self.scopes.enter_scope()
        try:
            for stmt in node.statements:
                stmt.accept(self)
        finally:
            self.scopes.exit_scope()

    def visit_var_declaration(self, node: VarDeclarationNode):
        if node.initializer is not None:
            node.initializer.accept(self)
        # globals are already in the table; locals become visible after their initializer
        if self.scopes.current_scope_level > 0:
            if self.scopes.lookup_current_scope(node.name):
                self.logger.debug("Local '%s' redeclared in the same scope", node.name)
            self.scopes.define(Symbol(node.name, _type_of(node), location=node.location))

    def visit_expression_statement(self, node: ExpressionStatementNode):
        node.expression.accept(self)

    def visit_binary_op(self, node: BinaryOpNode):
        spine = left_spine(node)
        spine[-1].left.accept(self)
        for binary in reversed(spine):
            binary.right.accept(self)

    def visit_unary_op(self, node: UnaryOpNode):
        unary_chain(node)[-1].operand.accept(self)

    def visit_function_call(self, node: FunctionCallNode):
        for arg in node.arguments:
            arg.accept(self)
        self._resolve(node.name, node.location)

    def visit_identifier(self, node: IdentifierNode):
        self._resolve(node.name, node.location)

    def visit_literal(self, node: LiteralNode):
        pass

    def _resolve(self, name: str, location):
        if self.scopes.lookup(name) is None:
            raise UndefinedVariable(name, location)


def _type_of(node: VarDeclarationNode) -> str:
    return node.var_type.name if isinstance(node.var_type, TypeNode) else "void"


def check_program(program: ProgramNode, symbol_table: SymbolTable):
    SemanticAnalyzer(symbol_table).check(program)
