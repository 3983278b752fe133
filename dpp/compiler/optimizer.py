import logging
from abc import ABC, abstractmethod
from typing import List, Optional
from ..core.ast import (
    ASTNode, ProgramNode, FunctionDeclarationNode, VarDeclarationNode, BlockNode,
    ExpressionStatementNode, BinaryOpNode, UnaryOpNode, LiteralNode, FunctionCallNode,
    left_spine, unary_chain,
)


class OptimizationPass(ABC):
    """Base class for optimization passes"""

    name = "pass"

    @abstractmethod
    def optimize(self, ast: ProgramNode) -> ProgramNode:
        pass


class RewritePass(OptimizationPass):
    """Walks the tree, letting ``rewrite`` replace expression subtrees.

    Each child is visited first and the node returned by ``rewrite`` is
    installed by the parent in place of the old child, so a node never ends
    up with two parents.
    """

    def optimize(self, ast: ProgramNode) -> ProgramNode:
        ast.declarations = [self._visit_node(decl) for decl in ast.declarations]
        return ast

    def _visit_node(self, node: ASTNode) -> ASTNode:
        if isinstance(node, FunctionDeclarationNode):
            node.body = self._visit_node(node.body)
        elif isinstance(node, BlockNode):
            node.statements = [self._visit_node(stmt) for stmt in node.statements]
        elif isinstance(node, VarDeclarationNode):
            if node.initializer is not None:
                node.initializer = self._visit_node(node.initializer)
        elif isinstance(node, ExpressionStatementNode):
            node.expression = self._visit_node(node.expression)
        elif isinstance(node, BinaryOpNode):
            spine = left_spine(node)
            current = self._visit_node(spine[-1].left)
            for binary in reversed(spine):
                binary.left = current
                binary.right = self._visit_node(binary.right)
                current = self.rewrite(binary)
            return current
        elif isinstance(node, UnaryOpNode):
            chain = unary_chain(node)
            current = self._visit_node(chain[-1].operand)
            for unary in reversed(chain):
                unary.operand = current
                current = self.rewrite(unary)
            return current
        elif isinstance(node, FunctionCallNode):
            node.arguments = [self._visit_node(arg) for arg in node.arguments]
        return node

    def rewrite(self, node: ASTNode) -> ASTNode:
        return node


class ConstantFoldingPass(RewritePass):
    """Fold integer-literal arithmetic at compile time"""

    name = "constant-folding"

    def rewrite(self, node: ASTNode) -> ASTNode:
        if isinstance(node, BinaryOpNode):
            return self._fold_binary_op(node)
        if isinstance(node, UnaryOpNode):
            return self._fold_unary_op(node)
        return node

    def _fold_binary_op(self, node: BinaryOpNode) -> ASTNode:
        left, right = node.left, node.right
        if not (_foldable(left) and _foldable(right)):
            return node

        try:
            a, b = int(left.value), int(right.value)
        except ValueError:
            return node
        if node.operator == '+':
            result = a + b
        elif node.operator == '-':
            result = a - b
        elif node.operator == '*':
            result = a * b
        elif node.operator == '/':
            if b == 0:
                return node
            result = _truncating_div(a, b)
        else:
            return node

        return _literal(result, node)

    def _fold_unary_op(self, node: UnaryOpNode) -> ASTNode:
        if node.operator != '-' or not _foldable(node.operand):
            return node
        try:
            value = int(node.operand.value)
        except ValueError:
            return node
        return _literal(-value, node)


# Python's default int/str conversion limit; longer literals are left as written
MAX_FOLD_DIGITS = 4300


def _foldable(node: ASTNode) -> bool:
    return (isinstance(node, LiteralNode) and node.is_integer
            and len(node.value.lstrip('-')) <= MAX_FOLD_DIGITS)


def _literal(value: int, node: ASTNode) -> ASTNode:
    try:
        text = str(value)
    except ValueError:
        return node
    if len(text.lstrip('-')) > MAX_FOLD_DIGITS:
        return node
    return LiteralNode(text, location=node.location)


def _truncating_div(a: int, b: int) -> int:
    # idiv semantics: the quotient rounds toward zero
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


class Optimizer:
    """Runs the passes enabled by the optimization level.

    Level 0 runs nothing and leaves the tree untouched. Level 1 adds
    constant folding.
    """

    def __init__(self, optimization_level: int = 0, passes: Optional[List[OptimizationPass]] = None):
        self.optimization_level = optimization_level
        self.logger = logging.getLogger(__name__)
        if passes is not None:
            self.passes = list(passes)
        else:
            self.passes = []
            if optimization_level >= 1:
                self.passes.append(ConstantFoldingPass())

    def optimize(self, ast: ProgramNode) -> ProgramNode:
        """Run all optimization passes"""
        for pass_obj in self.passes:
            self.logger.debug("Running optimization pass: %s", pass_obj.name)
            ast = pass_obj.optimize(ast)
        return ast
