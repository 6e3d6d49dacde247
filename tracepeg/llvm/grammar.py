# tracepeg/llvm/grammar.py
from __future__ import annotations

from ..grammar import GrammarBase, GrammarRecorder
from .factory import LlvmIrTreeFactory


class LlvmIrGrammar(GrammarBase):
    """alloca / load / store instructions, one or more, any whitespace between tokens.

        %1 = alloca i32, align 4
        %2 = load i32* %1, align 4
        store i32 42, i32* %1, align 4
    """

    b: GrammarRecorder
    f: LlvmIrTreeFactory

    def instructions(self):
        return self.b.nonterminal().is_(
            self.b.one_or_more(
                self.b.first_of(
                    self.alloca_instruction(),
                    self.load_instruction(),
                    self.store_instruction())))

    def alloca_instruction(self):
        return self.b.nonterminal().is_(
            self.f.alloca_instruction(
                self.identifier(), self.b.token("="), self.b.token("alloca"), self.llvm_type(),
                self.b.token(","), self.b.token("align"), self.b.pattern("[0-9]+")))

    def load_instruction(self):
        return self.b.nonterminal().is_(
            self.f.load_instruction(
                self.identifier(), self.b.token("="), self.b.token("load"),
                self.llvm_type(), self.identifier(),
                self.b.token(","), self.b.token("align"), self.b.pattern("[0-9]+")))

    def store_instruction(self):
        return self.b.nonterminal().is_(
            self.f.store_instruction(
                self.b.token("store"),
                self.llvm_type(), self.value(),
                self.b.token(","), self.llvm_type(), self.identifier(),
                self.b.token(","), self.b.token("align"), self.b.pattern("[0-9]+")))

    def value(self):
        return self.b.nonterminal().is_(
            self.b.first_of(self.identifier(), self.integer_literal()))

    def identifier(self):
        return self.b.nonterminal().is_(
            self.f.identifier(self.b.pattern(r"[%@][-a-zA-Z$._0-9]+")))

    def integer_literal(self):
        return self.b.nonterminal().is_(
            self.f.integer_literal(self.b.pattern("-?[0-9]+")))

    def llvm_type(self):
        return self.b.nonterminal().is_(
            self.f.type_syntax(self.b.pattern("i[0-9]+"), self.b.optional(self.b.token("*"))))
