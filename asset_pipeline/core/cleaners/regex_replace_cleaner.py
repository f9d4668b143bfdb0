"""
RegexReplaceCleaner - substitutes every regex match in a value.
"""

import re

from asset_pipeline.core.models import CleaningRule, Severity

from .base_cleaner import BaseCleaner, CleaningOutcome


class RegexReplaceCleaner(BaseCleaner):
    """
    Replaces all matches of `rule.pattern` with `rule.replacement`.

    Parameters:
    - ignore_case: Match case-insensitively (default False)

    A pattern that does not compile leaves values untouched and flags a
    warning instead of failing the job.
    """

    def __init__(self, rule: CleaningRule):
        super().__init__(rule)
        self.pattern_error: str | None = None
        self.regex: re.Pattern[str] | None = None
        flags = re.IGNORECASE if self.parameters.get("ignore_case") else 0
        if not rule.pattern:
            self.pattern_error = "regex_replace rule has no pattern"
            return
        try:
            self.regex = re.compile(rule.pattern, flags)
        except re.error as e:
            self.pattern_error = f"Invalid pattern '{rule.pattern}': {e}"

    def clean(self, field: str, value: str) -> CleaningOutcome:
        if self.regex is None:
            return self.flag(
                field, value, f"Rule '{self.rule.name}' skipped: {self.pattern_error}",
                Severity.WARNING,
            )
        try:
            return CleaningOutcome(self.regex.sub(self.rule.replacement, value))
        except (re.error, IndexError) as e:
            return self.flag(
                field, value, f"Rule '{self.rule.name}' skipped: bad replacement ({e})",
                Severity.WARNING,
            )

    @property
    def rule_type(self) -> str:
        return "regex_replace"
