# tracepeg/grammar/model.py
"""Rule keys and the method <-> rule mapping produced by recording a grammar.

Rule keys compare by identity: two `token("x")` sites are two distinct rules.
"""

from __future__ import annotations
import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Iterator, Optional, TypeVar

from ..peg.ast import Node, format_expr

OPTIONAL = "optional"
ONE_OR_MORE = "oneOrMore"
ZERO_OR_MORE = "zeroOrMore"
TOKEN = "token"
PATTERN = "pattern"


@dataclass(eq=False)
class RuleKey:
    """Opaque rule handle. Users may pass their own to `nonterminal(key)`."""
    name: Optional[str] = None

    def __repr__(self) -> str:
        return self.name or f"<rule {id(self):#x}>"

    __str__ = __repr__


@dataclass(eq=False, repr=False)
class UserRuleKey(RuleKey):
    method: Optional[Callable] = None

    def __repr__(self) -> str:
        if self.name:
            return self.name
        return getattr(self.method, "__name__", super().__repr__())

    __str__ = __repr__


@dataclass(eq=False, repr=False)
class SyntheticRuleKey(RuleKey):
    operator: str = ""
    expression: Optional[Node] = None

    def __repr__(self) -> str:
        return f"{self.operator}({format_expr(self.expression)})"

    __str__ = __repr__


@dataclass(eq=False, repr=False)
class ActionRuleKey(RuleKey):
    method: Optional[Callable] = None

    def __repr__(self) -> str:
        params = list(inspect.signature(self.method).parameters)[1:]
        return f"f.{self.method.__name__}({', '.join(params)})"

    __str__ = __repr__


K = TypeVar("K")
V = TypeVar("V")


class BiMap(Generic[K, V]):
    """Bijective dict; `put` refuses to map a value to a second key."""

    def __init__(self):
        self._forward: Dict[K, V] = {}
        self._inverse: Dict[V, K] = {}

    def put(self, key: K, value: V) -> None:
        other = self._inverse.get(value)
        if other is not None and other is not key:
            raise ValueError(f"value already present: {value!r}")
        old = self._forward.get(key)
        if old is not None:
            del self._inverse[old]
        self._forward[key] = value
        self._inverse[value] = key

    def get(self, key: K) -> Optional[V]:
        return self._forward.get(key)

    def inverse_get(self, value: V) -> Optional[K]:
        return self._inverse.get(value)

    def contains_value(self, value: V) -> bool:
        return value in self._inverse

    def __contains__(self, key: object) -> bool:
        return key in self._forward

    def __len__(self) -> int:
        return len(self._forward)

    def __iter__(self) -> Iterator[K]:
        return iter(self._forward)

    def items(self):
        return self._forward.items()


@dataclass
class GrammarModel:
    """What a recorded grammar knows about its rules.

    - user_rules   : grammar method <-> rule key (one per declared nonterminal)
    - action_rules : factory method <-> rule key (one per intercepted factory method)
    - synthetic_kinds : rule key -> optional / oneOrMore / zeroOrMore / token / pattern
    """
    user_rules: BiMap = field(default_factory=BiMap)
    action_rules: BiMap = field(default_factory=BiMap)
    synthetic_kinds: Dict[Any, str] = field(default_factory=dict)

    def rule_key_for_method(self, method: Callable) -> Optional[Any]:
        return self.user_rules.get(method)

    def method_for_rule_key(self, key: Any) -> Optional[Callable]:
        return self.user_rules.inverse_get(key)

    def has_method_for_rule_key(self, key: Any) -> bool:
        return self.user_rules.contains_value(key)

    def action_for_rule_key(self, key: Any) -> Optional[Callable]:
        return self.action_rules.inverse_get(key)

    def kind_of(self, key: Any) -> Optional[str]:
        return self.synthetic_kinds.get(key)

    def is_token(self, key: Any) -> bool:
        return self.synthetic_kinds.get(key) in (TOKEN, PATTERN)
