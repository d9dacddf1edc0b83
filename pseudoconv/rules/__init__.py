"""
Rule catalog for the pattern-based conversion strategy.
"""

from .catalog import (
    CONVERSION_RULES,
    DEFAULT_CATALOG,
    Rule,
    RuleCatalog,
    RuleCategory,
    RuleExample,
)

__all__ = [
    "CONVERSION_RULES",
    "DEFAULT_CATALOG",
    "Rule",
    "RuleCatalog",
    "RuleCategory",
    "RuleExample",
]
