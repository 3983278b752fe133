import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, List, Tuple
from ..core.visitor import ASTVisitor
from ..core.ast import (
    ProgramNode, FunctionDeclarationNode, VarDeclarationNode, BlockNode,
    ExpressionStatementNode, BinaryOpNode, UnaryOpNode, LiteralNode, IdentifierNode,
    FunctionCallNode, left_spine, unary_chain,
)

class Opcode(Enum):
    FUNCTION = auto()
    PARAM = auto()
    END_FUNCTION = auto()
    PUSH = auto()
    LOAD = auto()
    STORE = auto()
    BINARY = auto()
    UNARY = auto()
    CALL = auto()

@dataclass(frozen=True)
class IRInstruction:
    """One stack-machine instruction.

    ``str()`` gives the textual mnemonic. Binary operations print the
    operator mnemonic followed by its operand symbol, so ``+`` shows as
    ``+ +``; unary operations print the bare operator.
    """
    opcode: Opcode
    operands: Tuple[Any, ...] = ()

    @property
    def operand(self) -> Any:
        return self.operands[0] if self.operands else None

    def __str__(self):
        op = self.opcode
        if op is Opcode.FUNCTION:
            return f"function {self.operand}:"
        if op is Opcode.END_FUNCTION:
            return "end_function"
        if op is Opcode.BINARY:
            return f"{self.operand} {self.operand}"
        if op is Opcode.UNARY:
            return str(self.operand)
        args = " ".join(str(o) for o in self.operands)
        return f"{op.name.lower()} {args}"

def push(value: str) -> IRInstruction:
    return IRInstruction(Opcode.PUSH, (value,))

def load(name: str) -> IRInstruction:
    return IRInstruction(Opcode.LOAD, (name,))

def store(name: str) -> IRInstruction:
    return IRInstruction(Opcode.STORE, (name,))

def format_ir(instructions: List[IRInstruction]) -> List[str]:
    return [str(instr) for instr in instructions]


class IRGenerator(ASTVisitor):
    """Lowers the AST into a flat stack-machine instruction list.

    Expressions are evaluated left then right; after lowering any
    expression the top of the implicit stack holds its value.
    """

    def __init__(self):
        self.instructions: List[IRInstruction] = []
        self.logger = logging.getLogger(__name__)

    def generate(self, program: ProgramNode) -> List[IRInstruction]:
        self.instructions = []
        program.accept(self)
        self.logger.debug("Lowered program to %d IR instructions", len(self.instructions))
        return self.instructions

    def emit(self, instruction: IRInstruction):
        self.instructions.append(instruction)

    def visit_program(self, node: ProgramNode):
        for decl in node.declarations:
            decl.accept(self)

    def visit_function_declaration(self, node: FunctionDeclarationNode):
        self.emit(IRInstruction(Opcode.FUNCTION, (node.name,)))
        for param in node.parameters:
            self.emit(IRInstruction(Opcode.PARAM, (param.name,)))
        node.body.accept(self)
        self.emit(IRInstruction(Opcode.END_FUNCTION))

    def visit_block(self, node: BlockNode):
        for stmt in node.statements:
            stmt.accept(self)

    def visit_var_declaration(self, node: VarDeclarationNode):
        if node.initializer is None:
            return
        node.initializer.accept(self)
        self.emit(store(node.name))

    def visit_expression_statement(self, node: ExpressionStatementNode):
        node.expression.accept(self)

    def visit_binary_op(self, node: BinaryOpNode):
        if node.is_assignment:
            # Deliberately not left/right/operator: '=' has no stack operator.
            # The value is stored, then reloaded as the assignment's result.
            node.right.accept(self)
            self.emit(store(node.left.name))
            self.emit(load(node.left.name))
            return
        spine = left_spine(node)
        spine[-1].left.accept(self)
        for binary in reversed(spine):
            binary.right.accept(self)
            self.emit(IRInstruction(Opcode.BINARY, (binary.operator,)))

    def visit_unary_op(self, node: UnaryOpNode):
        chain = unary_chain(node)
        chain[-1].operand.accept(self)
        for unary in reversed(chain):
            self.emit(IRInstruction(Opcode.UNARY, (unary.operator,)))

    def visit_literal(self, node: LiteralNode):
        self.emit(push(node.value))

    def visit_identifier(self, node: IdentifierNode):
        self.emit(load(node.name))

    def visit_function_call(self, node: FunctionCallNode):
        for arg in node.arguments:
            arg.accept(self)
        self.emit(IRInstruction(Opcode.CALL, (node.name, len(node.arguments))))


def generate_ir(program: ProgramNode) -> List[IRInstruction]:
    return IRGenerator().generate(program)
