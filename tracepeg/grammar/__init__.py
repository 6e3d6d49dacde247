# tracepeg/grammar/__init__.py
"""Recording grammar classes and tree factories into PEG rules."""

from .model import (
    RuleKey, UserRuleKey, SyntheticRuleKey, ActionRuleKey, GrammarModel, BiMap,
    OPTIONAL, ONE_OR_MORE, ZERO_OR_MORE, TOKEN, PATTERN,
)
from .recorder import GrammarBase, GrammarRecorder, NonterminalBuilder, public_methods
from .factory import FactoryRecorder
