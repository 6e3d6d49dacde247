# tracepeg/llvm/syntax.py
"""Syntax tree of a small LLVM IR subset (alloca / load / store)."""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Union

from ..lex import SyntaxToken


class SyntaxNode:
    def children(self) -> List["SyntaxElement"]:
        raise NotImplementedError

    def tokens(self) -> List[SyntaxToken]:
        """Tokens of this subtree, left to right."""
        out: List[SyntaxToken] = []
        for child in self.children():
            if isinstance(child, SyntaxToken):
                out.append(child)
            elif child is not None:
                out.extend(child.tokens())
        return out


SyntaxElement = Union[SyntaxNode, SyntaxToken]


class ExpressionSyntax(SyntaxNode):
    pass


class InstructionSyntax(SyntaxNode):
    pass


@dataclass
class IdentifierSyntax(ExpressionSyntax):
    token: SyntaxToken

    @property
    def name(self) -> str:
        return self.token.text

    def children(self) -> List[SyntaxElement]:
        return [self.token]


@dataclass
class IntegerLiteralSyntax(ExpressionSyntax):
    token: SyntaxToken

    @property
    def value(self) -> int:
        return int(self.token.text)

    def children(self) -> List[SyntaxElement]:
        return [self.token]


@dataclass
class TypeSyntax(SyntaxNode):
    """`i32` or `i32*`"""
    name_token: SyntaxToken
    star_token: Optional[SyntaxToken] = None

    @property
    def name(self) -> str:
        return self.name_token.text + ("*" if self.star_token is not None else "")

    @property
    def is_pointer(self) -> bool:
        return self.star_token is not None

    def children(self) -> List[SyntaxElement]:
        if self.star_token is None:
            return [self.name_token]
        return [self.name_token, self.star_token]


@dataclass
class AllocaInstructionSyntax(InstructionSyntax):
    """`%1 = alloca i32, align 4`"""
    result: IdentifierSyntax
    equal_token: SyntaxToken
    alloca_token: SyntaxToken
    type: TypeSyntax
    comma_token: SyntaxToken
    align_token: SyntaxToken
    alignment: SyntaxToken

    def children(self) -> List[SyntaxElement]:
        return [
            self.result, self.equal_token, self.alloca_token, self.type,
            self.comma_token, self.align_token, self.alignment,
        ]


@dataclass
class LoadInstructionSyntax(InstructionSyntax):
    """`%2 = load i32* %1, align 4`"""
    result: IdentifierSyntax
    equal_token: SyntaxToken
    load_token: SyntaxToken
    pointer_type: TypeSyntax
    pointer: IdentifierSyntax
    comma_token: SyntaxToken
    align_token: SyntaxToken
    alignment: SyntaxToken

    def children(self) -> List[SyntaxElement]:
        return [
            self.result, self.equal_token, self.load_token,
            self.pointer_type, self.pointer,
            self.comma_token, self.align_token, self.alignment,
        ]


@dataclass
class StoreInstructionSyntax(InstructionSyntax):
    """`store i32 42, i32* %1, align 4`"""
    store_token: SyntaxToken
    value_type: TypeSyntax
    value: ExpressionSyntax
    comma_token1: SyntaxToken
    pointer_type: TypeSyntax
    pointer: IdentifierSyntax
    comma_token2: SyntaxToken
    align_token: SyntaxToken
    alignment: SyntaxToken

    def children(self) -> List[SyntaxElement]:
        return [
            self.store_token,
            self.value_type, self.value,
            self.comma_token1, self.pointer_type, self.pointer,
            self.comma_token2, self.align_token, self.alignment,
        ]
