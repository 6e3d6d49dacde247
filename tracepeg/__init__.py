# tracepeg/__init__.py
"""tracepeg: PEG grammars written as Python methods, typed syntax trees out.

A grammar class declares one rule per public method; a tree factory builds
the syntax nodes. `Parser` records both once and parses any number of inputs.
"""

from .errors import (
    TracepegError, GrammarError, BootstrapFailed, ParseFailed, IncompleteParse, NestingTooDeep,
)
from .grammar import GrammarBase, GrammarModel, RuleKey
from .lex import Input, SyntaxToken
from .parser import Parser

__all__ = [
    "TracepegError", "GrammarError", "BootstrapFailed", "ParseFailed", "IncompleteParse", "NestingTooDeep",
    "GrammarBase", "GrammarModel", "RuleKey",
    "Input", "SyntaxToken",
    "Parser",
]
