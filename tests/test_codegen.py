"""x86-64 template code generation tests."""

import pytest

from dpp.compiler.codegen import AssemblyCodeGenerator, generate_assembly
from dpp.compiler.ir import IRInstruction, Opcode, generate_ir, load, push, store
from dpp.core.lexer import tokenize
from dpp.core.parser import parse


def _asm(*instructions):
    return generate_assembly(list(instructions))


def _stripped(lines):
    return [line.strip() for line in lines]


def test_function_prologue_and_epilogue():
    assert _asm(IRInstruction(Opcode.FUNCTION, ("f",)), IRInstruction(Opcode.END_FUNCTION)) == [
        "f:",
        "    push rbp",
        "    mov rbp, rsp",
        "    mov rsp, rbp",
        "    pop rbp",
        "    ret",
    ]


def test_push_load_store_templates():
    assert _stripped(_asm(push("1"), load("x"), store("y"))) == [
        "push 1",
        "mov rax, [x]",
        "push rax",
        "pop rax",
        "mov [y], rax",
    ]


@pytest.mark.parametrize(
    "op,mnemonic",
    [("+", "add rax, rbx"), ("-", "sub rax, rbx"), ("*", "imul rax, rbx")],
)
def test_arithmetic_templates(op, mnemonic):
    assert _stripped(_asm(IRInstruction(Opcode.BINARY, (op,)))) == [
        "pop rbx", "pop rax", mnemonic, "push rax",
    ]


def test_division_clears_rdx():
    assert _stripped(_asm(IRInstruction(Opcode.BINARY, ("/",)))) == [
        "pop rbx", "pop rax", "xor rdx, rdx", "idiv rbx", "push rax",
    ]


@pytest.mark.parametrize(
    "op,setcc",
    [("<", "setl"), (">", "setg"), ("<=", "setle"), (">=", "setge"), ("==", "sete"), ("!=", "setne")],
)
def test_comparison_templates(op, setcc):
    assert _stripped(_asm(IRInstruction(Opcode.BINARY, (op,)))) == [
        "pop rbx", "pop rax", "cmp rax, rbx", f"{setcc} al", "movzx rax, al", "push rax",
    ]


def test_unary_templates():
    assert _stripped(_asm(IRInstruction(Opcode.UNARY, ("-",)))) == ["pop rax", "neg rax", "push rax"]
    assert _stripped(_asm(IRInstruction(Opcode.UNARY, ("!",)))) == [
        "pop rax", "cmp rax, 0", "sete al", "movzx rax, al", "push rax",
    ]


def test_call_cleans_up_arguments():
    assert _stripped(_asm(IRInstruction(Opcode.CALL, ("g", 2)))) == [
        "call g", "add rsp, 16", "push rax",
    ]
    assert _stripped(_asm(IRInstruction(Opcode.CALL, ("h", 0)))) == ["call h", "push rax"]


def test_instructions_without_template_are_skipped():
    assert _asm(IRInstruction(Opcode.PARAM, ("x",))) == []
    assert _asm(IRInstruction(Opcode.BINARY, ("%",))) == []
    assert _asm(IRInstruction(Opcode.UNARY, ("~",))) == []


def test_generator_can_be_reused():
    gen = AssemblyCodeGenerator()
    first = gen.generate([push("1")])
    second = gen.generate([push("2")])
    assert first == ["    push 1"]
    assert second == ["    push 2"]


def test_end_to_end_from_source():
    ir = generate_ir(parse(tokenize("fn main() -> int { 1 + 2; }")))
    assert generate_assembly(ir) == [
        "main:",
        "    push rbp",
        "    mov rbp, rsp",
        "    push 1",
        "    push 2",
        "    pop rbx",
        "    pop rax",
        "    add rax, rbx",
        "    push rax",
        "    mov rsp, rbp",
        "    pop rbp",
        "    ret",
    ]
