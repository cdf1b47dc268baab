"""Rewrite modern Korean text in Middle Korean orthography."""

from .rule_objects import Mode, Rule, RuleTable
from .translator import RuleEngine, RuleSourceError, AppliedRule, translate

__version__ = "0.1.0"
