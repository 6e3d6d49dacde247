# tracepeg/peg/runtime.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

import regex

from ..errors import GrammarError
from ..lex import Input, format_parse_error
from .ast import (
    Literal, Pattern, Ref, Repeat, Seq, Choice,
    RuleDef, PegGrammar, Node, format_expr,
)
from .engine import Packrat, ParseNode


class RuleBuilder:
    """`registry.rule(key).is_(expr)`"""
    def __init__(self, registry: "GrammarRegistry", key: Any):
        self.registry = registry
        self.key = key

    def is_(self, expr: Node) -> None:
        rules = self.registry.grammar.rules
        if self.key in rules:
            raise GrammarError(
                f"The rule {self.key!r} has already been defined somewhere in the grammar."
            )
        rules[self.key] = RuleDef(self.key, expr)


class GrammarRegistry:
    """Collects named rules and expression combinators into a PEG grammar."""
    def __init__(self):
        self.grammar = PegGrammar()
        self._built = False

    def rule(self, key: Any) -> RuleBuilder:
        if self._built:
            raise GrammarError("grammar is already built")
        return RuleBuilder(self, key)

    def has_rule(self, key: Any) -> bool:
        return key in self.grammar.rules

    def set_root(self, key: Any) -> None:
        self.grammar.start = key

    # ---- combinators ----

    @staticmethod
    def literal(text: str) -> Node:
        return Literal(text)

    @staticmethod
    def pattern(source: str) -> Node:
        try:
            regex.compile(source)
        except regex.error as e:
            raise GrammarError(f"invalid pattern {source!r}: {e}") from e
        return Pattern(source)

    @staticmethod
    def sequence(*items: Node) -> Node:
        return Seq(list(items))

    @staticmethod
    def first_of(*alts: Node) -> Node:
        return Choice(list(alts))

    @staticmethod
    def optional(node: Node) -> Node:
        return Repeat(node, "?")

    @staticmethod
    def one_or_more(node: Node) -> Node:
        return Repeat(node, "+")

    @staticmethod
    def zero_or_more(node: Node) -> Node:
        return Repeat(node, "*")

    @staticmethod
    def invoke(key: Any) -> Node:
        return Ref(key=key)

    @staticmethod
    def invoke_method(method: Callable) -> Node:
        return Ref(method=method)

    # ---- build ----

    def build(self, resolve: Optional[Callable[[Callable], Any]] = None) -> "PegProgram":
        """Resolve by-method invocations, check every referenced rule exists and
        compile the patterns once for all later parses."""
        g = self.grammar
        if g.start is None:
            raise GrammarError("no root rule set")
        patterns: Dict[str, Any] = {}
        for rule in list(g.rules.values()):
            rule.expr = self._resolve(rule.expr, resolve, patterns)
        g.require_rule(g.start)
        self._built = True
        return PegProgram(g, patterns)

    def _resolve(
        self, node: Node, resolve: Optional[Callable[[Callable], Any]], patterns: Dict[str, Any],
    ) -> Node:
        if isinstance(node, Pattern):
            if node.regex not in patterns:
                patterns[node.regex] = regex.compile(node.regex)
            return node
        if isinstance(node, Ref):
            if node.resolved:
                key = node.key
            else:
                key = resolve(node.method) if resolve is not None else None
                if key is None:
                    raise GrammarError(
                        f"Unknown rule for method {getattr(node.method, '__qualname__', node.method)!r}"
                    )
            if key not in self.grammar.rules:
                raise GrammarError(f"The rule {key!r} is referenced but never defined")
            return node if node.resolved else Ref(key=key)
        if isinstance(node, Repeat):
            return Repeat(self._resolve(node.node, resolve, patterns), node.kind)
        if isinstance(node, Seq):
            return Seq([self._resolve(it, resolve, patterns) for it in node.items])
        if isinstance(node, Choice):
            return Choice([self._resolve(it, resolve, patterns) for it in node.alts])
        return node


@dataclass
class PegProgram:
    """Compiled PEG program."""
    grammar: PegGrammar
    patterns: Dict[str, Any] = field(default_factory=dict)  # regex source -> compiled

    def describe(self) -> List[str]:
        return [f"{key} <- {format_expr(rule.expr)}" for key, rule in self.grammar.rules.items()]


@dataclass(frozen=True)
class Matched:
    root: ParseNode
    consumed: int

@dataclass(frozen=True)
class Failed:
    error_index: int
    message: str

ParseResult = Union[Matched, Failed]


class PegRunner:
    """Execute PEG program on input text from its root rule."""
    def __init__(self, program: PegProgram):
        self.program = program

    def run(self, source: Union[str, Input]) -> ParseResult:
        if isinstance(source, str):
            source = Input(source)
        engine = Packrat(self.program.grammar, self.program.patterns)
        ok, end, root = engine.parse(self.program.grammar.start, source.text)
        if ok:
            return Matched(root, end)
        index = max(engine.error_pos, 0)
        return Failed(index, format_parse_error(source, index, engine.expected))
