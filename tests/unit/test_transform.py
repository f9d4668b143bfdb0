"""
Unit tests for TRANSFORM: normalization, row mapping, validation and
the validation summary.
"""

from datetime import date

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from asset_pipeline.core.aliases import FieldAliasResolver
from asset_pipeline.core.models import CleanedRow, FieldMapping, Severity, ValidationError
from asset_pipeline.core.rules import default_aliases
from asset_pipeline.core.validators import RowValidator
from asset_pipeline.pipeline.transform import (
    TransformPhase,
    ValidationSummaryBuilder,
    normalize_value,
    truncate,
)


@pytest.fixture
def phase() -> TransformPhase:
    validator = RowValidator.default(today=lambda: date(2024, 6, 1))
    return TransformPhase(FieldAliasResolver(default_aliases()), validator, raw_value_max_length=20)


def cleaned(row_number: int, values: dict[str, str], issues=()) -> CleanedRow:
    return CleanedRow(row_number=row_number, raw=dict(values), values=values, issues=tuple(issues))


@pytest.mark.unit
class TestNormalization:
    """Tests for default value normalization"""

    def test_truncate(self):
        assert truncate("abcdef", 3) == "abc..."
        assert truncate("abc", 3) == "abc"

    @pytest.mark.parametrize("field,raw,expected", [
        ("status", " active ", "ACTIVE"),
        ("condition", "good", "GOOD"),
        ("purchasePrice", "$1,249.00", "1249"),
        ("purchasePrice", "abc", "abc"),
        ("purchaseDate", "03/15/2024", "2024-03-15"),
        ("warrantyExpiration", "someday", "someday"),
        ("name", "  Dell Latitude ", "Dell Latitude"),
        ("notes", "   ", ""),
    ])
    def test_normalize_value(self, field, raw, expected):
        assert normalize_value(field, raw) == expected


@pytest.mark.unit
class TestTransformPhase:
    """Tests for TransformPhase"""

    def test_resolve_orders_by_confidence(self, phase):
        mappings = phase.resolve(["ID", "Colour", "Asset Tag", "Name"])
        assert [(m.csv_alias, m.asset_field) for m in mappings] == [
            ("Asset Tag", "assetTag"),
            ("Name", "name"),
            ("ID", "assetTag"),
        ]

    def test_highest_confidence_non_blank_value_wins(self, phase):
        mappings = phase.resolve(["Asset Tag", "ID", "Name"])
        row = phase.map_row(cleaned(2, {"Asset Tag": "", "ID": "A-1", "Name": "Laptop"}), mappings)
        assert row.mapped == {"assetTag": "A-1", "name": "Laptop"}

        row = phase.map_row(cleaned(3, {"Asset Tag": "T-1", "ID": "A-1", "Name": "Laptop"}), mappings)
        assert row.mapped["assetTag"] == "T-1"

    def test_unmapped_columns_and_their_issues_dropped(self, phase):
        mappings = phase.resolve(["Name", "Colour"])
        issue = ValidationError(field="Colour", value="", error="Missing required field: Colour")
        row = phase.map_row(cleaned(2, {"Name": "Laptop", "Colour": ""}, [issue]), mappings)
        assert row.mapped == {"name": "Laptop"}
        assert row.issues == ()

    def test_valid_row(self, phase):
        mappings = phase.resolve(["Asset Tag", "Name", "Status", "Purchase Price"])
        staged, issues = phase.transform_row(
            "job_1",
            cleaned(2, {"Asset Tag": "LAP-1", "Name": "Laptop", "Status": "active", "Purchase Price": "$10.50"}),
            mappings,
        )
        assert issues == []
        assert staged.is_valid
        assert staged.will_import
        assert staged.errors is None
        assert staged.mapped_data == {
            "assetTag": "LAP-1", "name": "Laptop", "status": "ACTIVE", "purchasePrice": "10.5",
        }

    def test_invalid_row_carries_formatted_errors(self, phase):
        mappings = phase.resolve(["Asset Tag", "Name", "Status"])
        staged, issues = phase.transform_row(
            "job_1", cleaned(3, {"Asset Tag": "", "Name": "Laptop", "Status": "lost"}), mappings
        )
        assert not staged.is_valid
        assert not staged.will_import
        assert staged.errors == [
            "assetTag: Missing required field: Asset Tag",
            "status: Invalid value 'LOST'. Must be one of: "
            "ACTIVE, INACTIVE, MAINTENANCE, DISPOSED, PENDING, RESERVED, RETIRED",
        ]

    def test_warnings_do_not_invalidate(self, phase):
        mappings = phase.resolve(["Asset Tag", "Name", "Status"])
        staged, issues = phase.transform_row(
            "job_1", cleaned(2, {"Asset Tag": "A", "Name": "B", "Status": ""}), mappings
        )
        assert staged.is_valid
        assert [i.severity for i in issues] == [Severity.WARNING]
        assert staged.errors == ["status: Status not provided; defaults to ACTIVE (warning)"]

    def test_cleaning_and_validation_issues_deduplicated(self, phase):
        mappings = phase.resolve(["Asset Tag", "Name"])
        issue = ValidationError(field="assetTag", value="", error="Missing required field: Asset Tag")
        staged, issues = phase.transform_row(
            "job_1", cleaned(2, {"Asset Tag": "", "Name": "B"}, [issue]), mappings
        )
        assert len(issues) == 1
        assert staged.errors == ["assetTag: Missing required field: Asset Tag"]

    def test_raw_values_truncated(self, phase):
        mappings = phase.resolve(["Asset Tag", "Name", "Notes"])
        long_note = "x" * 30
        staged, _ = phase.transform_row(
            "job_1", cleaned(2, {"Asset Tag": "A", "Name": "B", "Notes": long_note}), mappings
        )
        assert staged.raw_data["Notes"] == "x" * 20 + "..."
        assert staged.mapped_data["notes"] == long_note

    def test_run_builds_summary(self, phase):
        rows = [
            cleaned(2, {"Asset Tag": "A", "Name": "Laptop"}),
            cleaned(3, {"Asset Tag": "", "Name": "Monitor"}),
        ]
        result = phase.run("job_1", ["Asset Tag", "Name"], rows, parse_errors=["Row 4: Expected 2 columns but got 1"])
        summary = result.summary
        assert summary.total_rows == 2
        assert summary.valid_count == 1
        assert summary.invalid_count == 1
        assert summary.is_valid is False
        assert summary.errors == ["Row 3: assetTag: Missing required field: Asset Tag"]
        assert summary.parse_errors == ["Row 4: Expected 2 columns but got 1"]
        assert summary.mapping.mapped_count == 2
        assert [r.row_number for r in summary.sample_valid_rows] == [2]
        assert [r.row_number for r in summary.sample_invalid_rows] == [3]
        assert len(result.staged_rows) == 2


@pytest.mark.unit
class TestValidationSummaryBuilder:
    """Tests for summary caps"""

    def test_caps_errors_and_samples(self, phase):
        builder = ValidationSummaryBuilder(max_errors=3, max_warnings=1, sample_size=2)
        rows = [cleaned(n, {"Asset Tag": "", "Name": "", "Status": ""}) for n in range(2, 12)]
        result = phase.run("job_1", ["Asset Tag", "Name", "Status"], rows, summary_builder=builder)
        summary = result.summary
        assert summary.invalid_count == 10
        assert len(summary.errors) == 3
        assert len(summary.warnings) == 1
        assert len(summary.sample_invalid_rows) == 2
        assert summary.sample_valid_rows == []

    def test_clean_file_is_valid(self):
        summary = ValidationSummaryBuilder().build()
        assert summary.is_valid
        assert summary.total_rows == 0

    @settings(max_examples=50)
    @given(st.lists(
        st.tuples(
            st.sampled_from(["", "A-1", "  ", "TAG"]),
            st.sampled_from(["", "Laptop"]),
            st.sampled_from(["", "ACTIVE", "lost", "Retired"]),
            st.sampled_from(["", "12", "abc", "-1"]),
        ),
        max_size=15,
    ))
    def test_property_valid_plus_invalid_equals_total(self, values):
        """Property test: every row is counted exactly once"""
        phase = TransformPhase(
            FieldAliasResolver(default_aliases()),
            RowValidator.default(today=lambda: date(2024, 6, 1)),
        )
        headers = ["Asset Tag", "Name", "Status", "Purchase Price"]
        rows = [cleaned(n, dict(zip(headers, row))) for n, row in enumerate(values, start=2)]
        result = phase.run("job_1", headers, rows)
        summary = result.summary
        assert summary.valid_count + summary.invalid_count == summary.total_rows == len(rows)
        assert all(row.will_import == row.is_valid for row in result.staged_rows)
        assert all(row.is_valid == (not row.errors or all(e.endswith("(warning)") for e in row.errors))
                   for row in result.staged_rows)


@pytest.mark.unit
def test_field_mapping_roundtrip_preserves_alias():
    """Test resolution results keep the original header text"""
    mapping = FieldMapping(csv_alias="Tag #", asset_field="assetTag", confidence=90)
    assert mapping.model_dump(by_alias=True)["csvAlias"] == "Tag #"
