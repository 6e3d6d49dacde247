# tracepeg/peg/engine.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

import regex

from .ast import (
    Literal, Pattern, Ref, Repeat, Seq, Choice,
    PegGrammar, Node, format_expr,
)

# Packrat engine:
# - Memoize only rule applications (rule_key, pos) -> (ok, end_pos, node)
# - Left recursion is not supported (typical PEG restriction).
# - Rule applications and terminal matches produce parse nodes; sequence,
#   choice and repetition splice their children into the enclosing rule node.

@dataclass
class ParseNode:
    key: Any          # rule key, None for a terminal leaf
    start: int
    end: int
    children: List["ParseNode"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return self.key is None

# result of evaluating one expression: (ok, end, matched nodes)
_Match = Tuple[bool, int, List[ParseNode]]

_NO_NODES: List[ParseNode] = []


class Packrat:
    def __init__(self, g: PegGrammar, patterns: Optional[Dict[str, Any]] = None):
        self.g = g
        # memo: (rule_key, pos) -> (visited_flag:int, ok:bool, end:int, node)
        # visited_flag: 1=in progress, 2=done
        self.memo: Dict[Tuple[Any, int], Tuple[int, bool, int, Optional[ParseNode]]] = {}
        # regex source -> compiled pattern, shared with the program when given
        self.patterns: Dict[str, Any] = patterns if patterns is not None else {}
        # furthest failure, for error reporting
        self.error_pos: int = -1
        self.expected: Set[str] = set()

    # ---- Public entrypoint for one rule ----
    def parse(self, rule_key: Any, text: str, pos: int = 0) -> Tuple[bool, int, Optional[ParseNode]]:
        # Clear memo per top-level run
        self.memo.clear()
        self.error_pos = -1
        self.expected = set()
        return self._apply_rule(rule_key, text, pos)

    # ---- Rule application with memoization ----
    def _apply_rule(self, key: Any, text: str, pos: int) -> Tuple[bool, int, Optional[ParseNode]]:
        memo_key = (key, pos)
        m = self.memo.get(memo_key)
        if m is not None:
            flag, ok, end, node = m
            if flag == 1:
                # left recursion or re-entry -> fail (PEG disallows left recursion)
                return False, pos, None
            return ok, end, node

        # mark in-progress
        self.memo[memo_key] = (1, False, pos, None)
        rule = self.g.require_rule(key)
        ok, end, children = self._eval(rule.expr, text, pos)
        node = ParseNode(key, pos, end, list(children)) if ok else None
        self.memo[memo_key] = (2, ok, end, node)
        return ok, end, node

    def _fail(self, node: Node, pos: int) -> _Match:
        if pos > self.error_pos:
            self.error_pos = pos
            self.expected = set()
        if pos == self.error_pos:
            self.expected.add(format_expr(node))
        return False, pos, _NO_NODES

    def _regex(self, source: str):
        compiled = self.patterns.get(source)
        if compiled is None:
            compiled = self.patterns[source] = regex.compile(source)
        return compiled

    # ---- Evaluator for expressions ----
    def _eval(self, node: Node, text: str, pos: int) -> _Match:
        if isinstance(node, Literal):
            if text.startswith(node.text, pos):
                end = pos + len(node.text)
                return True, end, [ParseNode(None, pos, end)]
            return self._fail(node, pos)

        if isinstance(node, Pattern):
            m = self._regex(node.regex).match(text, pos)
            if m is not None:
                return True, m.end(), [ParseNode(None, pos, m.end())]
            return self._fail(node, pos)

        if isinstance(node, Ref):
            if not node.resolved:
                raise AssertionError(f"unresolved rule invocation {format_expr(node)}")
            ok, end, child = self._apply_rule(node.key, text, pos)
            if not ok:
                return False, pos, _NO_NODES
            return True, end, [child]

        if isinstance(node, Repeat):
            if node.kind == "?":
                ok, end, nodes = self._eval(node.node, text, pos)
                if ok:
                    return True, end, nodes
                return True, pos, _NO_NODES
            elif node.kind == "*":
                cur = pos
                out: List[ParseNode] = []
                while True:
                    ok, end, nodes = self._eval(node.node, text, cur)
                    if not ok or end == cur:
                        break
                    out.extend(nodes)
                    cur = end
                return True, cur, out
            elif node.kind == "+":
                ok, end, nodes = self._eval(node.node, text, pos)
                if not ok:
                    return False, pos, _NO_NODES
                out = list(nodes)
                cur = end
                while True:
                    ok2, end2, nodes2 = self._eval(node.node, text, cur)
                    if not ok2 or end2 == cur:
                        break
                    out.extend(nodes2)
                    cur = end2
                return True, cur, out
            else:
                raise AssertionError(f"unknown repeat kind {node.kind!r}")

        if isinstance(node, Seq):
            cur = pos
            out = []
            for it in node.items:
                ok, end, nodes = self._eval(it, text, cur)
                if not ok:
                    return False, pos, _NO_NODES
                out.extend(nodes)
                cur = end
            return True, cur, out

        if isinstance(node, Choice):
            for it in node.alts:
                ok, end, nodes = self._eval(it, text, pos)
                if ok:
                    return True, end, nodes
            return False, pos, _NO_NODES

        raise AssertionError(f"unknown node: {node!r}")
