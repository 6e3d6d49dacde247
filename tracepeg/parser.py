# tracepeg/parser.py
"""Parser driver: record a grammar once, then parse any number of inputs.

    parser = Parser(LlvmIrGrammar, LlvmIrTreeFactory(), root_rule=LlvmIrGrammar.instructions)
    tree = parser.parse("%1 = alloca i32, align 4")

Construction records every public method of the grammar class (see
grammar/recorder.py) and builds the PEG program. After that the parser holds
no mutable state; `parse` runs the packrat engine and lowers the parse tree.
"""

from __future__ import annotations
import logging
import sys
from typing import Any, Callable, Generic, List, Optional, TypeVar, Union

from .errors import GrammarError, IncompleteParse, NestingTooDeep, ParseFailed
from .grammar.factory import FactoryRecorder
from .grammar.model import GrammarModel
from .grammar.recorder import GrammarRecorder, public_methods
from .lex import Input, load_input
from .lowering import SyntaxTreeCreator
from .peg.runtime import Failed, GrammarRegistry, PegProgram, PegRunner

logger = logging.getLogger(__name__)

T = TypeVar("T")

RootRule = Union[None, str, Callable, Any]


class Parser(Generic[T]):
    def __init__(
        self,
        grammar_class: type,
        tree_factory: Any,
        root_rule: RootRule = None,
        charset: str = "utf-8",
        registry: Optional[GrammarRegistry] = None,
    ):
        self.charset = charset
        self.grammar_class = grammar_class
        self.tree_factory = tree_factory

        recorder = GrammarRecorder(registry)
        factory_stand_in = FactoryRecorder(recorder).create(tree_factory)
        self.model: GrammarModel = recorder.record(grammar_class, factory_stand_in)

        registry = recorder.registry
        registry.set_root(self._resolve_root(root_rule))
        self.program: PegProgram = registry.build(self.model.rule_key_for_method)
        self._runner = PegRunner(self.program)
        self._creator: SyntaxTreeCreator[T] = SyntaxTreeCreator(tree_factory, self.model)
        logger.debug(
            "parser for %s ready | rules=%d root=%r",
            grammar_class.__name__, len(self.program.grammar.rules), self.program.grammar.start,
        )

    def _resolve_root(self, root_rule: RootRule) -> Any:
        if root_rule is None:
            methods = public_methods(self.grammar_class)
            if not methods:
                raise GrammarError(f"grammar {self.grammar_class.__name__} declares no rules")
            root_rule = methods[0][1]
        elif isinstance(root_rule, str):
            fn = getattr(self.grammar_class, root_rule, None)
            if fn is None:
                raise GrammarError(f"grammar {self.grammar_class.__name__} has no rule {root_rule!r}")
            root_rule = fn
        if callable(root_rule):
            key = self.model.rule_key_for_method(root_rule)
            if key is None:
                raise GrammarError(f"{root_rule!r} is not a rule of {self.grammar_class.__name__}")
            return key
        return root_rule

    # ---- parsing ----

    def parse(self, source: Union[str, bytes]) -> T:
        if isinstance(source, bytes):
            source = source.decode(self.charset)
        return self.parse_input(Input(source))

    def parse_file(self, path: str) -> T:
        return self.parse_input(load_input(path, self.charset))

    def parse_input(self, source: Input) -> T:
        try:
            return self._parse_input(source)
        except RecursionError as e:
            raise NestingTooDeep(sys.getrecursionlimit()) from e

    def _parse_input(self, source: Input) -> T:
        result = self._runner.run(source)

        if isinstance(result, Failed):
            line = source.line_of(result.error_index)
            logger.debug("parse failed at offset %d (line %d)", result.error_index, line)
            raise ParseFailed(line, result.message)

        total = len(source)
        if result.consumed != total:
            raise IncompleteParse(result.consumed, total)

        return self._creator.create(result.root, source)

    def describe_rules(self) -> List[str]:
        return self.program.describe()
