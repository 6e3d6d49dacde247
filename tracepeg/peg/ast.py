# tracepeg/peg/ast.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from ..errors import GrammarError

# ---- PEG expression node definitions ----

@dataclass(frozen=True)
class Literal:
    text: str

@dataclass(frozen=True)
class Pattern:
    regex: str  # source text, compiled by the engine with `regex`

@dataclass(frozen=True)
class Ref:
    """Rule invocation.

    Either bound to a rule key right away, or bound to a grammar method and
    resolved to that method's key when the program is built.
    """
    key: Any = None
    method: Optional[Callable] = None

    @property
    def resolved(self) -> bool:
        return self.key is not None

@dataclass(frozen=True)
class Repeat:
    node: "Node"
    kind: str  # '?', '*', '+'

@dataclass(frozen=True)
class Seq:
    items: List["Node"]

@dataclass(frozen=True)
class Choice:
    alts: List["Node"]

Node = Union[Literal, Pattern, Ref, Repeat, Seq, Choice]

@dataclass
class RuleDef:
    key: Any
    expr: Node

@dataclass
class PegGrammar:
    rules: Dict[Any, RuleDef] = field(default_factory=dict)
    start: Any = None

    def require_rule(self, key: Any) -> RuleDef:
        try:
            return self.rules[key]
        except KeyError:
            raise GrammarError(f"PEG: undefined rule {key!r}")


def format_expr(node: Node) -> str:
    """Render an expression in PEG notation (debug output only)."""
    if isinstance(node, Literal):
        return repr(node.text)
    if isinstance(node, Pattern):
        return f"/{node.regex}/"
    if isinstance(node, Ref):
        if node.key is not None:
            return str(node.key)
        return f"<{getattr(node.method, '__qualname__', node.method)}>"
    if isinstance(node, Repeat):
        return f"{_format_atom(node.node)}{node.kind}"
    if isinstance(node, Seq):
        if not node.items:
            return "()"
        return " ".join(_format_atom(it) for it in node.items)
    if isinstance(node, Choice):
        return " / ".join(format_expr(it) for it in node.alts)
    raise AssertionError(f"unknown node: {node!r}")

def _format_atom(node: Node) -> str:
    if (isinstance(node, Seq) and len(node.items) > 1) or \
            (isinstance(node, Choice) and len(node.alts) > 1):
        return f"({format_expr(node)})"
    return format_expr(node)
