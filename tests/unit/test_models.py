"""
Unit tests for Pydantic data models.

Covers the job state machine, staged row eligibility, the Asset model
built from mapped data, and the camelCase serialization of API models.
"""

from datetime import date
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError as ModelValidationError

from asset_pipeline.core.errors import ConflictError, InvalidTransitionError
from asset_pipeline.core.models import (
    Asset,
    CleaningRule,
    FieldMapping,
    ImportJob,
    JobStatus,
    MappedRow,
    PipelinePhase,
    RawRow,
    RuleType,
    Severity,
    StagedRow,
    StagedRowsPage,
    ValidationError,
)

STATUS_ORDER = [
    JobStatus.PENDING,
    JobStatus.RUNNING,
    JobStatus.STAGED,
    JobStatus.APPROVED,
    JobStatus.COMPLETED,
]


@pytest.mark.unit
class TestJobStatus:
    """Tests for the job status state machine"""

    @pytest.mark.parametrize("current,target", [
        (JobStatus.PENDING, JobStatus.RUNNING),
        (JobStatus.RUNNING, JobStatus.STAGED),
        (JobStatus.STAGED, JobStatus.APPROVED),
        (JobStatus.APPROVED, JobStatus.COMPLETED),
        (JobStatus.PENDING, JobStatus.FAILED),
        (JobStatus.RUNNING, JobStatus.FAILED),
        (JobStatus.STAGED, JobStatus.FAILED),
        (JobStatus.APPROVED, JobStatus.FAILED),
    ])
    def test_forward_transitions_allowed(self, current, target):
        """Test every forward step of the lifecycle is legal"""
        assert current.can_transition_to(target)

    @pytest.mark.parametrize("current,target", [
        (JobStatus.RUNNING, JobStatus.PENDING),
        (JobStatus.STAGED, JobStatus.RUNNING),
        (JobStatus.PENDING, JobStatus.STAGED),
        (JobStatus.RUNNING, JobStatus.APPROVED),
        (JobStatus.STAGED, JobStatus.COMPLETED),
        (JobStatus.STAGED, JobStatus.STAGED),
    ])
    def test_backward_and_skipping_transitions_rejected(self, current, target):
        """Test a job never skips or re-enters a status"""
        assert not current.can_transition_to(target)

    @pytest.mark.parametrize("terminal", [JobStatus.COMPLETED, JobStatus.FAILED])
    def test_terminal_statuses_accept_nothing(self, terminal):
        """Test COMPLETED and FAILED are terminal"""
        assert terminal.is_terminal
        assert not any(terminal.can_transition_to(target) for target in JobStatus)

    @given(st.lists(st.sampled_from(list(JobStatus)), max_size=12))
    def test_property_status_never_moves_backwards(self, targets):
        """Property test: applying any sequence of transitions only moves forward"""
        job = ImportJob(source_file_id="assets")
        for target in targets:
            before = job.status
            try:
                job.transition(target)
            except InvalidTransitionError:
                assert job.status == before
                continue
            if before.is_terminal:
                pytest.fail("terminal job accepted a transition")
            if target != JobStatus.FAILED:
                assert STATUS_ORDER.index(target) == STATUS_ORDER.index(before) + 1


@pytest.mark.unit
class TestImportJob:
    """Tests for ImportJob"""

    def test_new_job_defaults(self):
        """Test a new job starts PENDING in EXTRACT with empty progress"""
        job = ImportJob(source_file_id="assets")
        assert job.id.startswith("job_")
        assert job.status == JobStatus.PENDING
        assert job.phase == PipelinePhase.EXTRACT
        assert job.progress.total_rows == 0
        assert job.errors == []
        assert job.completed_at is None

    def test_transition_updates_phase_and_timestamp(self):
        """Test transition() moves status, phase and updated_at"""
        job = ImportJob(source_file_id="assets")
        created = job.updated_at
        job.transition(JobStatus.RUNNING, PipelinePhase.EXTRACT)
        assert job.status == JobStatus.RUNNING
        assert job.updated_at >= created

    def test_illegal_transition_raises_conflict(self):
        """Test an illegal transition raises InvalidTransitionError (a ConflictError)"""
        job = ImportJob(source_file_id="assets")
        with pytest.raises(ConflictError) as exc_info:
            job.transition(JobStatus.COMPLETED)
        assert isinstance(exc_info.value, InvalidTransitionError)
        assert "PENDING" in str(exc_info.value)
        assert job.status == JobStatus.PENDING

    def test_terminal_transition_sets_completed_at(self):
        """Test reaching a terminal status stamps completed_at"""
        job = ImportJob(source_file_id="assets")
        job.transition(JobStatus.FAILED)
        assert job.completed_at == job.updated_at

    def test_advance_is_monotonic(self):
        """Test processed_rows never decreases"""
        job = ImportJob(source_file_id="assets")
        job.advance(10)
        job.advance(4)
        assert job.progress.processed_rows == 10

    def test_snapshot_is_independent(self):
        """Test snapshots do not share mutable state with the job"""
        job = ImportJob(source_file_id="assets")
        copy = job.snapshot()
        job.record_error("boom")
        job.progress.total_rows = 5
        assert copy.errors == []
        assert copy.progress.total_rows == 0

    def test_serializes_with_camel_case_keys(self):
        """Test API serialization uses camelCase"""
        job = ImportJob(source_file_id="assets")
        data = job.model_dump(by_alias=True, mode="json")
        assert data["sourceFileId"] == "assets"
        assert data["progress"] == {"totalRows": 0, "processedRows": 0}
        assert "loadDecision" in data


@pytest.mark.unit
class TestRows:
    """Tests for per-phase row types"""

    def test_raw_row_is_frozen(self):
        """Test row types cannot be mutated"""
        row = RawRow(row_number=2, values={"Name": "Laptop"})
        with pytest.raises(ModelValidationError):
            row.row_number = 3

    def test_row_number_must_be_positive(self):
        """Test row numbers start at 1"""
        with pytest.raises(ModelValidationError):
            RawRow(row_number=0, values={})

    def test_mapped_row_rejects_unknown_fields(self):
        """Test mapped rows only carry canonical asset fields"""
        with pytest.raises(ModelValidationError) as exc_info:
            MappedRow(row_number=2, raw={}, mapped={"colour": "red"})
        assert "colour" in str(exc_info.value)


@pytest.mark.unit
class TestStagedRow:
    """Tests for StagedRow import eligibility"""

    def test_will_import_defaults_to_is_valid(self):
        """Test will_import follows is_valid when not given"""
        valid = StagedRow(job_id="job_1", row_number=2, raw_data={}, mapped_data={}, is_valid=True)
        invalid = StagedRow(job_id="job_1", row_number=3, raw_data={}, mapped_data={}, is_valid=False)
        assert valid.will_import is True
        assert invalid.will_import is False

    def test_invalid_row_cannot_be_imported(self):
        """Test will_import=True is rejected for an invalid row"""
        with pytest.raises(ModelValidationError) as exc_info:
            StagedRow(
                job_id="job_1", row_number=2, raw_data={}, mapped_data={},
                is_valid=False, will_import=True,
            )
        assert "invalid row" in str(exc_info.value)

    def test_valid_row_may_be_excluded(self):
        """Test a valid row can still be excluded from import"""
        row = StagedRow(
            job_id="job_1", row_number=2, raw_data={}, mapped_data={},
            is_valid=True, will_import=False,
        )
        assert row.will_import is False

    def test_page_serializes_rows_as_data(self):
        """Test the staged page uses the data key"""
        page = StagedRowsPage(valid_count=1, invalid_count=0)
        data = page.model_dump(by_alias=True)
        assert set(data) == {"data", "validCount", "invalidCount"}


@pytest.mark.unit
class TestAsset:
    """Tests for Asset built from mapped data"""

    def test_from_mapped_data_parses_types(self):
        """Test canonical strings become typed attributes"""
        asset = Asset.from_mapped_data({
            "assetTag": "LAP-001",
            "name": "Dell Latitude",
            "purchaseDate": "2024-01-15",
            "purchasePrice": "1249",
            "status": "MAINTENANCE",
        })
        assert asset.asset_tag == "LAP-001"
        assert asset.purchase_date == date(2024, 1, 15)
        assert asset.purchase_price == Decimal("1249")
        assert asset.status == "MAINTENANCE"

    def test_blank_values_fall_back_to_defaults(self):
        """Test blank status and condition default to ACTIVE and GOOD"""
        asset = Asset.from_mapped_data({
            "assetTag": "LAP-001",
            "name": "Dell Latitude",
            "status": "",
            "condition": "   ",
            "notes": "",
        })
        assert asset.status == "ACTIVE"
        assert asset.condition == "GOOD"
        assert asset.notes is None

    def test_missing_tag_is_rejected(self):
        """Test the asset tag is mandatory"""
        with pytest.raises(ModelValidationError):
            Asset.from_mapped_data({"name": "Dell Latitude"})

    def test_tag_longer_than_50_is_rejected(self):
        """Test asset tag length limit"""
        with pytest.raises(ModelValidationError):
            Asset.from_mapped_data({"assetTag": "X" * 51, "name": "Laptop"})


@pytest.mark.unit
class TestSmallModels:
    """Tests for ValidationError, FieldMapping and CleaningRule"""

    def test_validation_error_format(self):
        """Test staged error strings mark warnings"""
        error = ValidationError(field="name", error="Missing required field: Name")
        warning = ValidationError(field="status", error="defaulted", severity=Severity.WARNING)
        assert error.is_error
        assert error.format() == "name: Missing required field: Name"
        assert warning.format() == "status: defaulted (warning)"

    def test_unmapped_field_mapping(self):
        """Test unmapped headers carry no field and zero confidence"""
        mapping = FieldMapping.unmapped("Colour")
        assert mapping.is_mapped is False
        assert mapping.asset_field == ""
        assert mapping.confidence == 0

    def test_confidence_bounded(self):
        """Test confidence must be within 0-100"""
        with pytest.raises(ModelValidationError):
            FieldMapping(csv_alias="Tag", asset_field="assetTag", confidence=101)

    def test_cleaning_rule_type_alias(self):
        """Test rule_type is read from and written as 'type'"""
        rule = CleaningRule.model_validate({"name": "trim_all", "field": "*", "type": "trim"})
        assert rule.rule_type == RuleType.TRIM
        assert rule.model_dump(by_alias=True)["type"] == RuleType.TRIM
        assert rule.targets("anything")

    def test_cleaning_rule_unknown_type_rejected(self):
        """Test unknown rule types fail at configuration time"""
        with pytest.raises(ModelValidationError):
            CleaningRule(name="x", field="name", rule_type="shout")
