# tracepeg/llvm/__init__.py
"""Example grammar: a small subset of LLVM IR."""

from ..parser import Parser
from .syntax import (
    SyntaxNode, ExpressionSyntax, InstructionSyntax,
    IdentifierSyntax, IntegerLiteralSyntax, TypeSyntax,
    AllocaInstructionSyntax, LoadInstructionSyntax, StoreInstructionSyntax,
)
from .factory import LlvmIrTreeFactory
from .grammar import LlvmIrGrammar


def create_parser() -> Parser:
    return Parser(LlvmIrGrammar, LlvmIrTreeFactory(), root_rule=LlvmIrGrammar.instructions)
