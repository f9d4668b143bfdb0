"""
Exact and fuzzy matching cleaners that normalize values to canonical terms.
"""

from difflib import SequenceMatcher
from typing import Any

from asset_pipeline.core.models import CleaningRule

from .base_cleaner import BaseCleaner, CleaningOutcome

DEFAULT_FUZZY_THRESHOLD = 0.8


def reference_pairs(parameters: dict[str, Any]) -> list[tuple[str, str]]:
    """
    (candidate, canonical) pairs from `replacements` and `terms`.

    `replacements` may be a {from: to} mapping or a list of
    {"from": ..., "to": ...} entries; each term maps to itself.
    """
    pairs: list[tuple[str, str]] = []
    replacements = parameters.get("replacements") or {}
    if isinstance(replacements, dict):
        pairs.extend((str(k), str(v)) for k, v in replacements.items())
    else:
        pairs.extend((str(r["from"]), str(r["to"])) for r in replacements)
    pairs.extend((str(t), str(t)) for t in parameters.get("terms") or [])
    return pairs


class ExactMatchCleaner(BaseCleaner):
    """
    Replaces a value equal to a reference candidate with its canonical term.

    Parameters:
    - terms: Canonical terms (each matches itself)
    - replacements: {from: to} mapping of variants to canonical terms
    - case_sensitive: Compare case-sensitively (default True)
    """

    def __init__(self, rule: CleaningRule):
        super().__init__(rule)
        self.case_sensitive = self.parameters.get("case_sensitive", True)
        self.lookup: dict[str, str] = {}
        for candidate, canonical in reference_pairs(self.parameters):
            self.lookup.setdefault(self._key(candidate), canonical)

    def _key(self, text: str) -> str:
        return text if self.case_sensitive else text.casefold()

    def clean(self, field: str, value: str) -> CleaningOutcome:
        return CleaningOutcome(self.lookup.get(self._key(value), value))

    @property
    def rule_type(self) -> str:
        return "exact_match"


class FuzzyMatchCleaner(BaseCleaner):
    """
    Replaces a value with the closest reference term by similarity ratio.

    Comparison uses difflib's SequenceMatcher ratio on trimmed,
    case-folded strings. The best candidate wins (first configured on
    ties) and is applied only when its ratio reaches `threshold`;
    otherwise the value is left unchanged.

    Parameters:
    - terms / replacements: as for ExactMatchCleaner
    - threshold: Minimum ratio in [0, 1] (default 0.8)
    """

    def __init__(self, rule: CleaningRule, default_threshold: float = DEFAULT_FUZZY_THRESHOLD):
        super().__init__(rule)
        self.threshold = float(self.parameters.get("threshold", default_threshold))
        self.candidates = [
            (candidate.strip().casefold(), canonical)
            for candidate, canonical in reference_pairs(self.parameters)
        ]

    def best_match(self, value: str) -> tuple[str | None, float]:
        needle = value.strip().casefold()
        best, best_ratio = None, 0.0
        for candidate, canonical in self.candidates:
            ratio = SequenceMatcher(None, needle, candidate).ratio()
            if ratio > best_ratio:
                best, best_ratio = canonical, ratio
        return best, best_ratio

    def clean(self, field: str, value: str) -> CleaningOutcome:
        if not value.strip():
            return CleaningOutcome(value)
        match, ratio = self.best_match(value)
        if match is not None and ratio >= self.threshold:
            return CleaningOutcome(match)
        return CleaningOutcome(value)

    @property
    def rule_type(self) -> str:
        return "fuzzy_match"
