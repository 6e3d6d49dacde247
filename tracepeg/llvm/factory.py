# tracepeg/llvm/factory.py
from __future__ import annotations
from typing import Optional

from ..lex import SyntaxToken
from .syntax import (
    AllocaInstructionSyntax, ExpressionSyntax, IdentifierSyntax, IntegerLiteralSyntax,
    LoadInstructionSyntax, StoreInstructionSyntax, TypeSyntax,
)


class LlvmIrTreeFactory:
    """Builds LLVM IR syntax nodes from the children matched by each rule."""

    def alloca_instruction(
        self, result: IdentifierSyntax, equal_token: SyntaxToken, alloca_token: SyntaxToken,
        type: TypeSyntax, comma_token: SyntaxToken, align_token: SyntaxToken,
        alignment: SyntaxToken,
    ) -> AllocaInstructionSyntax:
        return AllocaInstructionSyntax(
            result, equal_token, alloca_token, type, comma_token, align_token, alignment)

    def load_instruction(
        self, result: IdentifierSyntax, equal_token: SyntaxToken, load_token: SyntaxToken,
        pointer_type: TypeSyntax, pointer: IdentifierSyntax,
        comma_token: SyntaxToken, align_token: SyntaxToken, alignment: SyntaxToken,
    ) -> LoadInstructionSyntax:
        return LoadInstructionSyntax(
            result, equal_token, load_token, pointer_type, pointer,
            comma_token, align_token, alignment)

    def store_instruction(
        self, store_token: SyntaxToken,
        value_type: TypeSyntax, value: ExpressionSyntax,
        comma_token1: SyntaxToken, pointer_type: TypeSyntax, pointer: IdentifierSyntax,
        comma_token2: SyntaxToken, align_token: SyntaxToken, alignment: SyntaxToken,
    ) -> StoreInstructionSyntax:
        return StoreInstructionSyntax(
            store_token, value_type, value, comma_token1, pointer_type, pointer,
            comma_token2, align_token, alignment)

    def identifier(self, token: SyntaxToken) -> IdentifierSyntax:
        return IdentifierSyntax(token)

    def integer_literal(self, token: SyntaxToken) -> IntegerLiteralSyntax:
        return IntegerLiteralSyntax(token)

    def type_syntax(self, name_token: SyntaxToken, star_token: Optional[SyntaxToken]) -> TypeSyntax:
        return TypeSyntax(name_token, star_token)
