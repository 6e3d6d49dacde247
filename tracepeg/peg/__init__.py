# tracepeg/peg/__init__.py
"""PEG expression registry for tracepeg.

This package provides:
- expression nodes for the PEG subset used by recorded grammars
- a registry that collects rules and resolves late-bound rule invocations
- a Packrat (memoizing) PEG engine producing parse trees
"""

from .ast import (
    Literal, Pattern, Seq, Choice, Repeat, Ref,
    RuleDef, PegGrammar, format_expr,
)
from .engine import ParseNode, Packrat
from .runtime import GrammarRegistry, PegProgram, PegRunner, Matched, Failed, ParseResult
