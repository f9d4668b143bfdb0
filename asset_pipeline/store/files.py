"""
File store: where importable CSV files live.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from asset_pipeline.core.csv_parser import CsvContent, parse_csv_text
from asset_pipeline.core.errors import NotFoundError, PipelineError
from asset_pipeline.core.models import FileInfo
from asset_pipeline.utils.validation import InputValidationError, validate_identifier

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024


class FileStore(Protocol):
    def list_files(self) -> list[FileInfo]: ...

    def describe(self, file_id: str) -> FileInfo: ...

    def read_csv(self, file_id: str) -> CsvContent: ...


class LocalFileStore:
    """
    CSV files in one directory.

    A file's id is its name without the ".csv" extension. Only regular
    .csv files up to `max_file_size` bytes are importable.
    """

    def __init__(self, root: str | Path, max_file_size: int = DEFAULT_MAX_FILE_SIZE):
        self.root = Path(root)
        self.max_file_size = max_file_size

    def _path_for(self, file_id: str) -> Path:
        try:
            file_id = validate_identifier(file_id, "file_id")
        except InputValidationError:
            raise NotFoundError("CSV file", file_id) from None
        path = self.root / f"{file_id}.csv"
        if not path.is_file():
            raise NotFoundError("CSV file", file_id)
        return path

    @staticmethod
    def _info(path: Path) -> FileInfo:
        stat = path.stat()
        return FileInfo(
            id=path.stem,
            name=path.name,
            size=stat.st_size,
            modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )

    def list_files(self) -> list[FileInfo]:
        """Importable files, newest first."""
        if not self.root.is_dir():
            return []
        files = [
            self._info(path)
            for path in self.root.iterdir()
            if path.is_file() and path.suffix.lower() == ".csv" and path.stat().st_size <= self.max_file_size
        ]
        return sorted(files, key=lambda f: f.modified_at, reverse=True)

    def describe(self, file_id: str) -> FileInfo:
        """
        Raises:
            NotFoundError: If the id does not name an importable CSV
        """
        return self._info(self._path_for(file_id))

    def read_csv(self, file_id: str) -> CsvContent:
        """
        Read and parse a CSV file.

        Raises:
            NotFoundError: If the id does not name a CSV file
            PipelineError: If the file is too large or not UTF-8 text
        """
        path = self._path_for(file_id)
        size = path.stat().st_size
        if size > self.max_file_size:
            raise PipelineError(
                f"File {path.name} is {size} bytes; the limit is {self.max_file_size} bytes"
            )
        try:
            text = path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as e:
            raise PipelineError(f"File {path.name} is not valid UTF-8: {e}") from e

        content = parse_csv_text(text, file_id=path.stem)
        logger.info(
            "CSV file parsed",
            extra={"file_id": path.stem, "rows": content.total_rows, "parse_errors": len(content.errors)},
        )
        return content
