# tracepeg/lowering.py
"""Parse tree -> syntax tree.

Every rule node of the parse tree is lowered according to what recorded it:

- token / pattern rule   -> `SyntaxToken` of the lexeme (whitespace dropped)
- optional rule          -> the child's value, or None
- oneOrMore / zeroOrMore -> list of the children's values
- user rule              -> the value of its body (exactly one child)
- action rule            -> factory method called with the children's values

Leaves only occur below token / pattern rules, where they are collapsed into
the enclosing token.
"""

from __future__ import annotations
from typing import Any, Generic, List, TypeVar

from .grammar.model import GrammarModel, OPTIONAL, ONE_OR_MORE, ZERO_OR_MORE
from .lex import Input, SyntaxToken
from .peg.engine import ParseNode

T = TypeVar("T")


class SyntaxTreeCreator(Generic[T]):
    def __init__(self, tree_factory: Any, model: GrammarModel):
        self.tree_factory = tree_factory
        self.model = model

    def create(self, root: ParseNode, source: Input) -> T:
        return self._visit(root, source)

    def _visit(self, node: ParseNode, source: Input) -> Any:
        if node.is_leaf:
            return source.token(node.start, node.end)

        key = node.key
        model = self.model
        if model.is_token(key):
            return self._token(node, source)

        kind = model.kind_of(key)
        if kind == OPTIONAL:
            if len(node.children) > 1:
                raise AssertionError(f"optional rule {key!r} matched {len(node.children)} children")
            if not node.children:
                return None
            return self._visit(node.children[0], source)
        if kind in (ONE_OR_MORE, ZERO_OR_MORE):
            return [self._visit(child, source) for child in node.children]

        children = self._semantic_children(node, source)
        if model.has_method_for_rule_key(key):
            if len(children) != 1:
                raise AssertionError(
                    f"rule {key!r} lowered to {len(children)} values, expected exactly one"
                )
            return children[0]

        action = model.action_for_rule_key(key)
        if action is None:
            raise AssertionError(f"no method recorded for rule {key!r}")
        return action(self.tree_factory, *children)

    def _semantic_children(self, node: ParseNode, source: Input) -> List[Any]:
        return [self._visit(child, source) for child in node.children if not child.is_leaf]

    @staticmethod
    def _token(node: ParseNode, source: Input) -> SyntaxToken:
        # body is (whitespace, lexeme, whitespace)
        if len(node.children) == 3:
            lexeme = node.children[1]
            return source.token(lexeme.start, lexeme.end)
        return source.token(node.start, node.end)
