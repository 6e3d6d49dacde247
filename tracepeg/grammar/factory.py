# tracepeg/grammar/factory.py
"""Recording stand-in for the tree factory.

Inside a rule body, `self.f.load(a, b, c)` does not build anything. The call
becomes an *action rule* whose body is the sequence of the expressions pushed
by `a, b, c`; after parsing, a match of that rule calls the real `load` with
the lowered children.
"""

from __future__ import annotations
import functools
import inspect
import logging
from typing import Any, Callable

from ..errors import GrammarError
from .recorder import GrammarRecorder, public_methods

logger = logging.getLogger(__name__)


def arity_of(method: Callable, args: tuple) -> int:
    """Number of children an action call consumes; the call must bind to the signature."""
    try:
        inspect.signature(method).bind(None, *args)
    except TypeError as e:
        raise GrammarError(f"arity mismatch calling factory method {method.__name__!r}: {e}")
    return len(args)


class FactoryRecorder:
    """Builds the intercepting stand-in of a tree factory."""

    def __init__(self, recorder: GrammarRecorder):
        self.recorder = recorder

    def intercept(self, method: Callable) -> Callable:
        recorder = self.recorder

        @functools.wraps(method)
        def interceptor(instance, *args, **kwargs):
            if kwargs:
                raise GrammarError(
                    f"factory method {method.__name__!r} called with keyword arguments; "
                    f"children are positional"
                )
            n = arity_of(method, args)
            key = recorder.rule_key_for_action(method)
            recorder.replace_by_rule(key, n)
            logger.debug("action rule %r consumes %d expressions", key, n)
            return None

        return interceptor

    def create(self, factory: Any) -> Any:
        """Stand-in instance of a synthetic subclass of type(factory); __init__ is not run."""
        factory_class = type(factory)
        namespace = {
            name: self.intercept(fn)
            for name, fn in public_methods(factory_class, stop=None)
        }
        cls = type(f"Recording{factory_class.__name__}", (factory_class,), namespace)
        return cls.__new__(cls)
