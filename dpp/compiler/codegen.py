import logging
from typing import Callable, Dict, List
from .ir import IRInstruction, Opcode

INDENT = "    "

ARITHMETIC = {
    '+': ['add rax, rbx'],
    '-': ['sub rax, rbx'],
    '*': ['imul rax, rbx'],
    # idiv divides rdx:rax, so the remainder register is cleared first
    '/': ['xor rdx, rdx', 'idiv rbx'],
}

SET_CONDITION = {
    '<': 'setl',
    '>': 'setg',
    '<=': 'setle',
    '>=': 'setge',
    '==': 'sete',
    '!=': 'setne',
}

WORD_SIZE = 8


class AssemblyCodeGenerator:
    """Translates stack-machine IR into an x86-64 listing.

    The operand stack is simulated with the machine stack and two registers:
    rax is the accumulator and rbx the scratch register. Every instruction
    maps to a fixed template; instructions without one are skipped.
    """

    def __init__(self):
        self.text_section: List[str] = []
        self.logger = logging.getLogger(__name__)
        self._templates: Dict[Opcode, Callable[[IRInstruction], None]] = {
            Opcode.FUNCTION: self._emit_function,
            Opcode.END_FUNCTION: self._emit_end_function,
            Opcode.PUSH: self._emit_push,
            Opcode.LOAD: self._emit_load,
            Opcode.STORE: self._emit_store,
            Opcode.BINARY: self._emit_binary,
            Opcode.UNARY: self._emit_unary,
            Opcode.CALL: self._emit_call,
        }

    def generate(self, ir: List[IRInstruction]) -> List[str]:
        self.text_section = []
        for instruction in ir:
            emit = self._templates.get(instruction.opcode)
            if emit is None:
                self.logger.debug("No template for '%s', skipped", instruction)
                continue
            emit(instruction)
        return self.text_section

    def _ins(self, *lines: str):
        self.text_section.extend(INDENT + line for line in lines)

    def _emit_function(self, instr: IRInstruction):
        self.text_section.append(f'{instr.operand}:')
        self._ins('push rbp', 'mov rbp, rsp')

    def _emit_end_function(self, instr: IRInstruction):
        self._ins('mov rsp, rbp', 'pop rbp', 'ret')

    def _emit_push(self, instr: IRInstruction):
        self._ins(f'push {instr.operand}')

    def _emit_load(self, instr: IRInstruction):
        self._ins(f'mov rax, [{instr.operand}]', 'push rax')

    def _emit_store(self, instr: IRInstruction):
        self._ins('pop rax', f'mov [{instr.operand}], rax')

    def _emit_binary(self, instr: IRInstruction):
        op = instr.operand
        if op in ARITHMETIC:
            body = ARITHMETIC[op]
        elif op in SET_CONDITION:
            body = ['cmp rax, rbx', f'{SET_CONDITION[op]} al', 'movzx rax, al']
        else:
            self.logger.debug("No template for binary operator '%s', skipped", op)
            return
        self._ins('pop rbx', 'pop rax', *body, 'push rax')

    def _emit_unary(self, instr: IRInstruction):
        op = instr.operand
        if op == '-':
            body = ['neg rax']
        elif op == '!':
            body = ['cmp rax, 0', 'sete al', 'movzx rax, al']
        else:
            self.logger.debug("No template for unary operator '%s', skipped", op)
            return
        self._ins('pop rax', *body, 'push rax')

    def _emit_call(self, instr: IRInstruction):
        name, argc = instr.operands
        self._ins(f'call {name}')
        if argc:
            self._ins(f'add rsp, {argc * WORD_SIZE}')
        self._ins('push rax')


def generate_assembly(ir: List[IRInstruction]) -> List[str]:
    return AssemblyCodeGenerator().generate(ir)
