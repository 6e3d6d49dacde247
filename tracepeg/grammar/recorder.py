# tracepeg/grammar/recorder.py
"""Grammar recorder.

A grammar is a class whose public methods read like PEG rules:

    class Calc(GrammarBase):
        def number(self):
            return self.b.nonterminal().is_(self.f.number(self.b.pattern("[0-9]+")))

Recording runs every such method once on an intercepting subclass. The outer
call of a method is a *declaration*: its body runs and registers one rule.
Calls made from inside a body are *references*: they push a late-bound rule
invocation instead of running the callee.

Arguments of a call are evaluated before the call itself, so by the time a
combinator runs its operands have already pushed their expressions onto the
stack in source order; popping n and reversing restores that order.
"""

from __future__ import annotations
import functools
import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..errors import BootstrapFailed, GrammarError
from ..peg.ast import Node, format_expr
from ..peg.runtime import GrammarRegistry
from .model import (
    ActionRuleKey, GrammarModel, RuleKey, SyntheticRuleKey, UserRuleKey,
    OPTIONAL, ONE_OR_MORE, ZERO_OR_MORE, TOKEN, PATTERN,
)

logger = logging.getLogger(__name__)

# whitespace around every token / pattern; nowhere else
WHITESPACE = r"\s*+"


class GrammarBase:
    """Base class of user grammars: `b` is the builder, `f` the tree factory."""

    def __init__(self, b: "GrammarRecorder", f: Any):
        self.b = b
        self.f = f


def public_methods(cls: type, stop: type = GrammarBase) -> List[Tuple[str, Callable]]:
    """Public functions of cls in definition order, overrides in place."""
    skip = set(vars(object))
    if stop is not None:
        skip |= set(vars(stop))
    found: Dict[str, Callable] = {}
    for klass in reversed(cls.__mro__):
        if klass is object or klass is stop:
            continue
        for name, value in vars(klass).items():
            if name.startswith("_") or name in skip:
                continue
            if inspect.isfunction(value):
                found[name] = value
    return list(found.items())


class NonterminalBuilder:
    def __init__(self, recorder: "GrammarRecorder"):
        self._recorder = recorder

    def is_(self, placeholder: Any = None) -> None:
        return self._recorder.is_(placeholder)


class GrammarRecorder:
    """Turns calls made by grammar methods into registered PEG rules."""

    def __init__(self, registry: Optional[GrammarRegistry] = None):
        self.registry = registry if registry is not None else GrammarRegistry()
        self.model = GrammarModel()

        self._stack: List[Node] = []
        self.building_method: Optional[Callable] = None
        self.building_rule_key: Optional[Any] = None
        self._finished = False

    # ---- interception ----

    def intercept(self, method: Callable) -> Callable:
        """Wrap a grammar method: declare on the outer call, reference when nested."""

        @functools.wraps(method)
        def interceptor(instance, *args, **kwargs):
            if self.building_method is not None:
                self.push(self.registry.invoke_method(method))
                return None

            self.building_method = method
            self.building_rule_key = None
            try:
                method(instance, *args, **kwargs)
            except Exception as e:
                raise BootstrapFailed(method.__name__, e) from e
            if self.building_method is not None:
                raise BootstrapFailed(method.__name__, GrammarError(
                    f"rule method {method.__name__!r} returned without calling nonterminal().is_()"
                ))
            return None

        return interceptor

    def recording_class(self, grammar_class: type) -> type:
        namespace = {name: self.intercept(fn) for name, fn in public_methods(grammar_class)}
        return type(f"Recording{grammar_class.__name__}", (grammar_class,), namespace)

    def record(self, grammar_class: type, factory: Any) -> GrammarModel:
        """Run every public method of grammar_class once against this recorder."""
        methods = public_methods(grammar_class)
        cls = self.recording_class(grammar_class)
        grammar = cls(self, factory)
        for name, _ in methods:
            logger.debug("recording rule %s.%s", grammar_class.__name__, name)
            getattr(grammar, name)()
        return self.finish()

    def finish(self) -> GrammarModel:
        if self._stack:
            raise GrammarError(f"Unexpected stack size: {len(self._stack)}, got: {self._describe_stack()}")
        if self.building_method is not None:
            raise GrammarError(f"rule {self.building_method.__name__!r} is still being built")
        self._stack = []
        self._finished = True
        logger.debug(
            "recorded %d rules, %d actions, %d synthetic rules",
            len(self.model.user_rules), len(self.model.action_rules), len(self.model.synthetic_kinds),
        )
        return self.model

    # ---- builder API used by grammar bodies ----

    def nonterminal(self, key: Optional[Any] = None) -> NonterminalBuilder:
        method = self.building_method
        if method is None:
            raise GrammarError("nonterminal() called outside of a rule method")
        if self.building_rule_key is not None:
            raise GrammarError(f"nonterminal() called twice in rule {method.__name__!r}")
        if key is None:
            key = UserRuleKey(method=method)
        try:
            self.model.user_rules.put(method, key)
        except ValueError:
            raise GrammarError(f"rule key {key!r} is already bound to another method")
        self.building_rule_key = key
        return NonterminalBuilder(self)

    def is_(self, placeholder: Any = None) -> None:
        method = self.building_method
        if method is None or self.building_rule_key is None:
            raise GrammarError("is_() called without a pending nonterminal()")
        if len(self._stack) != 1:
            raise GrammarError(
                f"rule {method.__name__!r}: unexpected stack size: {len(self._stack)}, "
                f"got: {self._describe_stack()}"
            )
        expr = self.pop()
        self.registry.rule(self.building_rule_key).is_(expr)
        logger.debug("rule %r <- %s", self.building_rule_key, format_expr(expr))

        self.building_method = None
        self.building_rule_key = None
        return None

    def first_of(self, *alternatives: Any) -> None:
        self.push(self.registry.first_of(*self.pop_many(len(alternatives))))
        return None

    def optional(self, item: Any) -> None:
        self._synthetic(OPTIONAL, self.registry.optional)
        return None

    def one_or_more(self, item: Any) -> None:
        self._synthetic(ONE_OR_MORE, self.registry.one_or_more)
        return None

    def zero_or_more(self, item: Any) -> None:
        self._synthetic(ZERO_OR_MORE, self.registry.zero_or_more)
        return None

    def token(self, value: str) -> None:
        r = self.registry
        expr = r.sequence(r.pattern(WHITESPACE), r.literal(value), r.pattern(WHITESPACE))
        self._define(SyntheticRuleKey(operator=TOKEN, expression=expr), TOKEN, expr)
        return None

    def pattern(self, regex: str) -> None:
        r = self.registry
        expr = r.sequence(r.pattern(WHITESPACE), r.pattern(regex), r.pattern(WHITESPACE))
        self._define(SyntheticRuleKey(operator=PATTERN, expression=expr), PATTERN, expr)
        return None

    # ---- action rules (see factory.py) ----

    def rule_key_for_action(self, method: Callable) -> Any:
        key = self.model.action_rules.get(method)
        if key is None:
            key = ActionRuleKey(method=method)
            self.model.action_rules.put(method, key)
        return key

    def replace_by_rule(self, key: Any, stack_elements: int) -> None:
        """Pop the arguments of an action call and push an invocation of its rule."""
        r = self.registry
        if stack_elements == 1:
            expr = self.pop()
        else:
            expr = r.sequence(*self.pop_many(stack_elements))
        r.rule(key).is_(expr)
        self.push(r.invoke(key))

    # ---- stack ----

    def push(self, expr: Node) -> None:
        if self._finished:
            raise GrammarError("grammar recording is finished")
        self._stack.append(expr)

    def pop(self) -> Node:
        if not self._stack:
            raise GrammarError(f"expression stack is empty{self._where()}")
        return self._stack.pop()

    def pop_many(self, n: int) -> List[Node]:
        if n > len(self._stack):
            raise GrammarError(
                f"expected {n} expressions on the stack, found {len(self._stack)}{self._where()}"
            )
        if n == 0:
            return []
        out = self._stack[-n:]
        del self._stack[-n:]
        return out

    @property
    def stack_size(self) -> int:
        return len(self._stack)

    def _synthetic(self, operator: str, combinator: Callable[[Node], Node]) -> None:
        operand = self.pop()
        self._define(SyntheticRuleKey(operator=operator, expression=operand), operator, combinator(operand))

    def _define(self, key: RuleKey, kind: str, expr: Node) -> None:
        self.model.synthetic_kinds[key] = kind
        self.registry.rule(key).is_(expr)
        self.push(self.registry.invoke(key))

    def _where(self) -> str:
        if self.building_method is None:
            return ""
        return f" in rule {self.building_method.__name__!r}"

    def _describe_stack(self) -> str:
        return "[" + ", ".join(format_expr(e) for e in self._stack) + "]"
