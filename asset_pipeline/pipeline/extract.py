"""
EXTRACT phase: read the source file into raw rows.
"""

from asset_pipeline.core.csv_parser import CsvContent
from asset_pipeline.core.errors import PhaseFailure
from asset_pipeline.core.models import PipelinePhase
from asset_pipeline.store.files import FileStore


class ExtractPhase:
    phase = PipelinePhase.EXTRACT

    def __init__(self, file_store: FileStore):
        self.file_store = file_store

    def run(self, file_id: str) -> CsvContent:
        """
        Read and parse the file.

        Malformed rows are reported in `errors` and skipped; a file that
        yields no data rows at all fails the phase.

        Raises:
            PhaseFailure: If no rows could be extracted
        """
        content = self.file_store.read_csv(file_id)
        if not content.rows:
            reason = "; ".join(content.errors) if content.errors else "CSV file contains no data rows"
            raise PhaseFailure(self.phase, reason)
        return content
