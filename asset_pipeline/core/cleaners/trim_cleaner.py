"""
TrimCleaner - strips whitespace (or configured characters) from values.
"""

from .base_cleaner import BaseCleaner, CleaningOutcome


class TrimCleaner(BaseCleaner):
    """
    Parameters:
    - sides: "both" (default), "left" or "right"
    - chars: Characters to strip (default: whitespace)
    """

    def clean(self, field: str, value: str) -> CleaningOutcome:
        sides = self.parameters.get("sides", "both")
        chars = self.parameters.get("chars")
        if sides == "left":
            return CleaningOutcome(value.lstrip(chars))
        if sides == "right":
            return CleaningOutcome(value.rstrip(chars))
        return CleaningOutcome(value.strip(chars))

    @property
    def rule_type(self) -> str:
        return "trim"
