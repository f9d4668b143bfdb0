"""
Unit tests for the field alias resolver.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from asset_pipeline.core.aliases import FieldAliasResolver
from asset_pipeline.core.models import FieldMapping
from asset_pipeline.core.rules import default_aliases


@pytest.fixture
def resolver() -> FieldAliasResolver:
    return FieldAliasResolver(default_aliases())


@pytest.mark.unit
class TestFieldAliasResolver:
    """Tests for FieldAliasResolver"""

    def test_exact_match(self, resolver):
        mapping = resolver.resolve_header("Asset Tag")
        assert mapping.is_mapped
        assert mapping.asset_field == "assetTag"
        assert mapping.confidence == 100

    def test_header_is_trimmed(self, resolver):
        mapping = resolver.resolve_header("  Purchase Cost ")
        assert mapping.asset_field == "purchasePrice"
        assert mapping.confidence == 95
        assert mapping.csv_alias == "  Purchase Cost "

    def test_case_insensitive_fallback(self, resolver):
        assert resolver.resolve_header("asset id").asset_field == "assetTag"
        assert resolver.resolve_header("SERIAL NUMBER").asset_field == "serialNumber"

    def test_unknown_header_unmapped(self, resolver):
        mapping = resolver.resolve_header("Colour")
        assert mapping == FieldMapping.unmapped("Colour")

    def test_highest_confidence_wins(self):
        resolver = FieldAliasResolver([
            FieldMapping(csv_alias="Ref", asset_field="serialNumber", confidence=70),
            FieldMapping(csv_alias="Ref", asset_field="assetTag", confidence=90),
        ])
        assert resolver.resolve_header("Ref").asset_field == "assetTag"

    def test_first_registered_wins_ties(self):
        resolver = FieldAliasResolver([
            FieldMapping(csv_alias="Ref", asset_field="serialNumber", confidence=80),
            FieldMapping(csv_alias="Ref", asset_field="assetTag", confidence=80),
        ])
        assert resolver.resolve_header("Ref").asset_field == "serialNumber"

    def test_exact_match_beats_case_insensitive(self):
        resolver = FieldAliasResolver([
            FieldMapping(csv_alias="TAG", asset_field="assetTag", confidence=100),
            FieldMapping(csv_alias="tag", asset_field="notes", confidence=50),
        ])
        assert resolver.resolve_header("tag").asset_field == "notes"
        assert resolver.resolve_header("Tag").asset_field == "assetTag"

    def test_resolve_keeps_header_order(self, resolver):
        mappings = resolver.resolve(["Name", "Colour", "Asset Tag"])
        assert [m.asset_field for m in mappings] == ["name", "", "assetTag"]

    def test_header_fields(self, resolver):
        assert resolver.header_fields(["Name", "Colour"]) == {"Name": "name", "Colour": None}

    def test_summary_full_coverage(self, resolver):
        summary = resolver.summarize(["Asset Tag", "Name", "Status"])
        assert summary.mapped_count == 3
        assert summary.total_csv_columns == 3
        assert summary.coverage == 1.0
        assert summary.unmapped_fields == []
        assert summary.advisory is None

    def test_summary_low_coverage_advisory(self, resolver):
        """Test low coverage is advisory and lists the ignored columns"""
        summary = resolver.summarize(["Asset Tag", "Colour", "Weight", "Owner"])
        assert summary.coverage == 0.25
        assert summary.unmapped_fields == ["Colour", "Weight", "Owner"]
        assert summary.advisory == (
            "Only 1 of 4 columns match known asset fields (25%); "
            "unmapped columns will be ignored: Colour, Weight, Owner"
        )

    def test_coverage_threshold_configurable(self):
        resolver = FieldAliasResolver(default_aliases(), coverage_threshold=0.9)
        assert resolver.summarize(["Asset Tag", "Name", "Colour"]).advisory is not None

    def test_empty_headers(self, resolver):
        summary = resolver.summarize([])
        assert summary.coverage == 0.0
        assert summary.mapped_count == 0

    @given(st.lists(st.sampled_from(
        ["Asset Tag", "asset tag", "Name", "ID", "Colour", " Status ", "Purchase Cost", ""]
    ), max_size=10))
    def test_property_resolution_is_deterministic(self, headers):
        """Property test: the same headers and table always resolve the same way"""
        first = FieldAliasResolver(default_aliases()).resolve(headers)
        second = FieldAliasResolver(default_aliases()).resolve(headers)
        assert first == second
        assert len(first) == len(headers)
        assert all(m.is_mapped == bool(m.asset_field) for m in first)
