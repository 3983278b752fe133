from abc import ABC, abstractmethod
from .ast import (
    ProgramNode, FunctionDeclarationNode, VarDeclarationNode, TypeNode, BlockNode,
    ExpressionStatementNode, BinaryOpNode, UnaryOpNode, LiteralNode, IdentifierNode,
    FunctionCallNode,
)

class ASTVisitor(ABC):
    @abstractmethod
    def visit_program(self, node: ProgramNode): pass

    @abstractmethod
    def visit_function_declaration(self, node: FunctionDeclarationNode): pass

    @abstractmethod
    def visit_var_declaration(self, node: VarDeclarationNode): pass

    @abstractmethod
    def visit_block(self, node: BlockNode): pass

    @abstractmethod
    def visit_expression_statement(self, node: ExpressionStatementNode): pass

    @abstractmethod
    def visit_binary_op(self, node: BinaryOpNode): pass

    @abstractmethod
    def visit_unary_op(self, node: UnaryOpNode): pass

    @abstractmethod
    def visit_literal(self, node: LiteralNode): pass

    @abstractmethod
    def visit_identifier(self, node: IdentifierNode): pass

    @abstractmethod
    def visit_function_call(self, node: FunctionCallNode): pass

    # Type references carry no behaviour for most passes
    def visit_type(self, node: TypeNode):
        return None
