from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional
from .tokens import SourceLocation

class ASTNode(ABC):
    """Base class for all AST nodes"""

    @abstractmethod
    def accept(self, visitor):
        """Accept a visitor for the visitor pattern"""
        pass

    def get_children(self) -> List["ASTNode"]:
        return []

def _location():
    # Positions are informational; two trees with the same shape compare equal
    return field(default=None, compare=False, repr=False)

@dataclass
class ProgramNode(ASTNode):
    """Root node, one per compilation"""
    declarations: List[ASTNode] = field(default_factory=list)
    location: Optional[SourceLocation] = _location()

    def accept(self, visitor):
        return visitor.visit_program(self)

    def get_children(self):
        return list(self.declarations)

@dataclass
class TypeNode(ASTNode):
    """Named type reference: int, bool, ..."""
    name: str
    location: Optional[SourceLocation] = _location()

    def accept(self, visitor):
        return visitor.visit_type(self)

@dataclass
class VarDeclarationNode(ASTNode):
    """let name: type [= initializer];  Also used for function parameters."""
    name: str
    var_type: ASTNode
    initializer: Optional[ASTNode] = None
    location: Optional[SourceLocation] = _location()

    def accept(self, visitor):
        return visitor.visit_var_declaration(self)

    def get_children(self):
        children = [self.var_type]
        if self.initializer is not None:
            children.append(self.initializer)
        return children

@dataclass
class BlockNode(ASTNode):
    statements: List[ASTNode] = field(default_factory=list)
    location: Optional[SourceLocation] = _location()

    def accept(self, visitor):
        return visitor.visit_block(self)

    def get_children(self):
        return list(self.statements)

@dataclass
class FunctionDeclarationNode(ASTNode):
    """fn name(params) -> return_type { body }"""
    name: str
    parameters: List[VarDeclarationNode] = field(default_factory=list)
    return_type: Optional[ASTNode] = None
    body: BlockNode = field(default_factory=BlockNode)
    location: Optional[SourceLocation] = _location()

    def accept(self, visitor):
        return visitor.visit_function_declaration(self)

    def get_children(self):
        children: List[ASTNode] = list(self.parameters)
        if self.return_type is not None:
            children.append(self.return_type)
        children.append(self.body)
        return children

@dataclass
class ExpressionStatementNode(ASTNode):
    expression: ASTNode
    location: Optional[SourceLocation] = _location()

    def accept(self, visitor):
        return visitor.visit_expression_statement(self)

    def get_children(self):
        return [self.expression]

@dataclass
class BinaryOpNode(ASTNode):
    left: ASTNode
    operator: str
    right: ASTNode
    location: Optional[SourceLocation] = _location()

    def accept(self, visitor):
        return visitor.visit_binary_op(self)

    def get_children(self):
        return [self.left, self.right]

    @property
    def is_assignment(self) -> bool:
        return self.operator == "="

@dataclass
class UnaryOpNode(ASTNode):
    operator: str
    operand: ASTNode
    location: Optional[SourceLocation] = _location()

    def accept(self, visitor):
        return visitor.visit_unary_op(self)

    def get_children(self):
        return [self.operand]

@dataclass
class LiteralNode(ASTNode):
    """Numeric or string literal, kept as raw source text"""
    value: str
    location: Optional[SourceLocation] = _location()

    def accept(self, visitor):
        return visitor.visit_literal(self)

    @property
    def is_integer(self) -> bool:
        text = self.value[1:] if self.value.startswith("-") else self.value
        return text.isdigit()

@dataclass
class IdentifierNode(ASTNode):
    name: str
    location: Optional[SourceLocation] = _location()

    def accept(self, visitor):
        return visitor.visit_identifier(self)

@dataclass
class FunctionCallNode(ASTNode):
    name: str
    arguments: List[ASTNode] = field(default_factory=list)
    location: Optional[SourceLocation] = _location()

    def accept(self, visitor):
        return visitor.visit_function_call(self)

    def get_children(self):
        return list(self.arguments)

def left_spine(node: BinaryOpNode) -> List[BinaryOpNode]:
    """Binary nodes reached by following left operands, outermost first.

    Passes loop over this chain; a long left-associative sum nests deeper
    than the interpreter's recursion limit. The chain stops at an
    assignment, whose left side is only ever a name.
    """
    spine = [node]
    while isinstance(node.left, BinaryOpNode) and not node.left.is_assignment:
        node = node.left
        spine.append(node)
    return spine

def unary_chain(node: UnaryOpNode) -> List[UnaryOpNode]:
    """Directly nested unary nodes, outermost first."""
    chain = [node]
    while isinstance(node.operand, UnaryOpNode):
        node = node.operand
        chain.append(node)
    return chain
