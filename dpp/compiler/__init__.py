"""Compiler passes that run after parsing"""
from .semantic import SemanticAnalyzer, check_program
from .optimizer import Optimizer, OptimizationPass, RewritePass, ConstantFoldingPass
from .ir import Opcode, IRInstruction, IRGenerator, generate_ir, format_ir
from .codegen import AssemblyCodeGenerator, generate_assembly

__all__ = [
    'SemanticAnalyzer','check_program',
    'Optimizer','OptimizationPass','RewritePass','ConstantFoldingPass',
    'Opcode','IRInstruction','IRGenerator','generate_ir','format_ir',
    'AssemblyCodeGenerator','generate_assembly',
]
