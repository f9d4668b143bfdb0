"""
TRANSFORM phase: alias resolution, normalization and row validation.

Produces one StagedRow per cleaned row plus the issues behind its
validity, and aggregates them into a ValidationSummary.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from asset_pipeline.core.aliases import FieldAliasResolver
from asset_pipeline.core.coercion import canonical_date, canonical_number
from asset_pipeline.core.constants import DATE_FIELDS, ENUM_FIELDS, NUMERIC_FIELDS
from asset_pipeline.core.models import (
    CleanedRow,
    FieldMapping,
    MappedRow,
    MappingSummary,
    PipelinePhase,
    RowSample,
    StagedRow,
    ValidationError,
    ValidationSummary,
)
from asset_pipeline.core.validators import RowValidator

TRUNCATION_SUFFIX = "..."


def truncate(value: str, max_length: int) -> str:
    if len(value) <= max_length:
        return value
    return value[:max_length] + TRUNCATION_SUFFIX


def normalize_value(field_name: str, value: str) -> str:
    """
    Default normalization of a mapped value.

    Trims whitespace, upper-cases enumerated fields and rewrites parseable
    prices and dates in canonical form. Unparseable values are left for
    the validator to report.
    """
    value = value.strip()
    if not value:
        return value
    if field_name in ENUM_FIELDS:
        return value.upper()
    try:
        if field_name in NUMERIC_FIELDS:
            return canonical_number(value)
        if field_name in DATE_FIELDS:
            return canonical_date(value)
    except ValueError:
        return value
    return value


@dataclass
class TransformResult:
    staged_rows: list[StagedRow]
    summary: ValidationSummary


class ValidationSummaryBuilder:
    """
    Accumulates staged rows into a ValidationSummary.

    Errors and warnings are capped at `max_errors` / `max_warnings`
    entries and row samples at `sample_size` per kind; counts always
    cover every row.
    """

    def __init__(self, max_errors: int = 20, max_warnings: int = 10, sample_size: int = 5):
        self.max_errors = max_errors
        self.max_warnings = max_warnings
        self.sample_size = sample_size
        self.total_rows = 0
        self.valid_count = 0
        self.invalid_count = 0
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.sample_valid_rows: list[RowSample] = []
        self.sample_invalid_rows: list[RowSample] = []

    def add(self, row: StagedRow, issues: Sequence[ValidationError]) -> None:
        self.total_rows += 1
        for issue in issues:
            message = f"Row {row.row_number}: {issue.field}: {issue.error}"
            if issue.is_error and len(self.errors) < self.max_errors:
                self.errors.append(message)
            elif not issue.is_error and len(self.warnings) < self.max_warnings:
                self.warnings.append(message)

        sample = RowSample(
            row_number=row.row_number,
            raw_data=row.raw_data,
            mapped_data=row.mapped_data,
            errors=row.errors or [],
        )
        if row.is_valid:
            self.valid_count += 1
            if len(self.sample_valid_rows) < self.sample_size:
                self.sample_valid_rows.append(sample)
        else:
            self.invalid_count += 1
            if len(self.sample_invalid_rows) < self.sample_size:
                self.sample_invalid_rows.append(sample)

    def build(
        self,
        mapping: MappingSummary | None = None,
        parse_errors: Sequence[str] = (),
    ) -> ValidationSummary:
        return ValidationSummary(
            total_rows=self.total_rows,
            valid_count=self.valid_count,
            invalid_count=self.invalid_count,
            is_valid=self.invalid_count == 0 and not parse_errors,
            errors=list(self.errors),
            warnings=list(self.warnings),
            sample_valid_rows=list(self.sample_valid_rows),
            sample_invalid_rows=list(self.sample_invalid_rows),
            parse_errors=list(parse_errors),
            mapping=mapping,
        )


class TransformPhase:
    """
    Maps cleaned rows onto canonical fields and validates them.

    When several headers map to the same field, the highest-confidence
    header with a non-blank value supplies it. Unmapped columns are
    dropped, along with any cleaning issues raised on them.
    """

    phase = PipelinePhase.TRANSFORM

    def __init__(
        self,
        resolver: FieldAliasResolver,
        validator: RowValidator,
        raw_value_max_length: int = 200,
    ):
        self.resolver = resolver
        self.validator = validator
        self.raw_value_max_length = raw_value_max_length

    def resolve(self, headers: Sequence[str]) -> list[FieldMapping]:
        """Mapped headers ordered by descending confidence (stable)."""
        mappings = [m for m in self.resolver.resolve(headers) if m.is_mapped]
        return sorted(mappings, key=lambda m: -m.confidence)

    def map_row(self, row: CleanedRow, mappings: Sequence[FieldMapping]) -> MappedRow:
        mapped: dict[str, str] = {}
        for mapping in mappings:
            value = normalize_value(mapping.asset_field, row.values.get(mapping.csv_alias, ""))
            if not mapped.get(mapping.asset_field):
                mapped[mapping.asset_field] = value

        issues = []
        seen = set()
        for issue in row.issues:
            key = (issue.field, issue.error, issue.severity)
            if issue.field in mapped and key not in seen:
                seen.add(key)
                issues.append(issue)
        return MappedRow(row_number=row.row_number, raw=row.raw, mapped=mapped, issues=tuple(issues))

    def transform_row(
        self,
        job_id: str,
        row: CleanedRow,
        mappings: Sequence[FieldMapping],
    ) -> tuple[StagedRow, list[ValidationError]]:
        """
        Transform one cleaned row into a staged row.

        Returns:
            The StagedRow and every issue (cleaning and validation) behind it
        """
        mapped_row = self.map_row(row, mappings)
        issues = list(mapped_row.issues)
        seen = {(i.field, i.error, i.severity) for i in issues}
        for issue in self.validator.validate(mapped_row):
            key = (issue.field, issue.error, issue.severity)
            if key not in seen:
                seen.add(key)
                issues.append(issue)

        is_valid = not any(issue.is_error for issue in issues)
        staged = StagedRow(
            job_id=job_id,
            row_number=row.row_number,
            raw_data={k: truncate(v, self.raw_value_max_length) for k, v in row.raw.items()},
            mapped_data=mapped_row.mapped,
            is_valid=is_valid,
            errors=[issue.format() for issue in issues] or None,
        )
        return staged, issues

    def run(
        self,
        job_id: str,
        headers: Sequence[str],
        rows: Sequence[CleanedRow],
        summary_builder: ValidationSummaryBuilder | None = None,
        parse_errors: Sequence[str] = (),
    ) -> TransformResult:
        """Transform every row in one go (used for dry-run validation)."""
        builder = summary_builder or ValidationSummaryBuilder()
        mappings = self.resolve(headers)
        staged_rows = []
        for row in rows:
            staged, issues = self.transform_row(job_id, row, mappings)
            builder.add(staged, issues)
            staged_rows.append(staged)
        summary = builder.build(self.resolver.summarize(headers), parse_errors)
        return TransformResult(staged_rows=staged_rows, summary=summary)
