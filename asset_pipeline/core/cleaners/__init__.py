"""
Cleaner implementations, one per cleaning rule type.
"""

from .base_cleaner import BaseCleaner, CleaningOutcome
from .match_cleaner import ExactMatchCleaner, FuzzyMatchCleaner
from .regex_replace_cleaner import RegexReplaceCleaner
from .required_field_cleaner import RequiredFieldCleaner
from .trim_cleaner import TrimCleaner
from .type_check_cleaner import DataTypeCheckCleaner

__all__ = [
    "BaseCleaner",
    "CleaningOutcome",
    "TrimCleaner",
    "RegexReplaceCleaner",
    "ExactMatchCleaner",
    "FuzzyMatchCleaner",
    "RequiredFieldCleaner",
    "DataTypeCheckCleaner",
]
