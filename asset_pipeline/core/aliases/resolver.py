"""
Field alias resolver: maps CSV headers to canonical asset fields.
"""

from collections.abc import Iterable, Sequence

from asset_pipeline.core.models import FieldMapping, MappingSummary

DEFAULT_COVERAGE_THRESHOLD = 0.5


class FieldAliasResolver:
    """
    Resolves CSV headers against a confidence-scored alias table.

    A header matches an alias exactly after trimming; if nothing matches
    exactly, a case-insensitive match is tried. Among matching aliases the
    highest confidence wins, and equal confidences go to the alias
    registered first. Resolution is pure: the same headers and alias table
    always give the same result.
    """

    def __init__(
        self,
        aliases: Iterable[FieldMapping],
        coverage_threshold: float = DEFAULT_COVERAGE_THRESHOLD,
    ):
        self.aliases = list(aliases)
        self.coverage_threshold = coverage_threshold
        self._exact: dict[str, FieldMapping] = {}
        self._folded: dict[str, FieldMapping] = {}
        for alias in self.aliases:
            key = alias.csv_alias.strip()
            self._register(self._exact, key, alias)
            self._register(self._folded, key.casefold(), alias)

    @staticmethod
    def _register(index: dict[str, FieldMapping], key: str, alias: FieldMapping) -> None:
        current = index.get(key)
        if current is None or alias.confidence > current.confidence:
            index[key] = alias

    def resolve_header(self, header: str) -> FieldMapping:
        key = header.strip()
        match = self._exact.get(key) or self._folded.get(key.casefold())
        if match is None:
            return FieldMapping.unmapped(header)
        return FieldMapping(
            csv_alias=header,
            asset_field=match.asset_field,
            confidence=match.confidence,
            is_mapped=True,
        )

    def resolve(self, csv_headers: Sequence[str]) -> list[FieldMapping]:
        """One FieldMapping per header, in header order."""
        return [self.resolve_header(header) for header in csv_headers]

    def header_fields(self, csv_headers: Sequence[str]) -> dict[str, str | None]:
        """Header -> canonical field (None when unmapped)."""
        return {m.csv_alias: (m.asset_field if m.is_mapped else None) for m in self.resolve(csv_headers)}

    @staticmethod
    def coverage(mappings: Sequence[FieldMapping]) -> float:
        """Fraction of headers that resolved to a field."""
        if not mappings:
            return 0.0
        return sum(1 for m in mappings if m.is_mapped) / len(mappings)

    def summarize(self, csv_headers: Sequence[str]) -> MappingSummary:
        """
        Mapping summary for a file's headers.

        An advisory is attached when coverage falls below the threshold.
        It never blocks the import: unmapped columns are dropped.
        """
        mappings = self.resolve(csv_headers)
        mapped = [m for m in mappings if m.is_mapped]
        unmapped = [m.csv_alias for m in mappings if not m.is_mapped]
        coverage = self.coverage(mappings)

        advisory = None
        if coverage < self.coverage_threshold:
            advisory = (
                f"Only {len(mapped)} of {len(mappings)} columns match known asset fields "
                f"({coverage:.0%}); unmapped columns will be ignored: {', '.join(unmapped)}"
            )

        return MappingSummary(
            mapped_fields=mapped,
            unmapped_fields=unmapped,
            total_csv_columns=len(mappings),
            mapped_count=len(mapped),
            coverage=round(coverage, 4),
            advisory=advisory,
        )
