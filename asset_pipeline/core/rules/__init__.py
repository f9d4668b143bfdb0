"""
Cleaning rule engine and rule/alias configuration management.
"""

from .rule_config import RuleConfigBuilder, RuleConfigLoader, default_aliases
from .rule_engine import CleaningRuleEngine

__all__ = [
    "CleaningRuleEngine",
    "RuleConfigLoader",
    "RuleConfigBuilder",
    "default_aliases",
]
