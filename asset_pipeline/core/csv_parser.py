"""
CSV parsing into RawRow records.

Parsing is tolerant: rows whose column count does not match the header
are reported and skipped while the remaining rows are kept.
"""

import csv
import io
from dataclasses import dataclass, field

from asset_pipeline.core.constants import HEADER_ROW_OFFSET
from asset_pipeline.core.models import RawRow


@dataclass(frozen=True)
class CsvContent:
    """Parsed CSV: trimmed headers, data rows and parse errors."""

    file_id: str
    headers: tuple[str, ...]
    rows: tuple[RawRow, ...]
    errors: tuple[str, ...] = field(default=())

    @property
    def total_rows(self) -> int:
        return len(self.rows)


def _is_blank_line(cells: list[str]) -> bool:
    return not cells or all(not cell.strip() for cell in cells)


def parse_csv_text(text: str, file_id: str = "", delimiter: str = ",") -> CsvContent:
    """
    Parse CSV text.

    The first non-blank line is the header. Blank lines are skipped.
    Data rows are numbered from HEADER_ROW_OFFSET in data-row order, so the
    first data row is row 2; skipped malformed rows still consume a number.

    Args:
        text: Decoded file contents
        file_id: Source file id recorded on the result
        delimiter: Field delimiter

    Returns:
        CsvContent (headers are empty when the file has no header line)
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    reader = csv.reader(io.StringIO(text), delimiter=delimiter)
    lines = [cells for cells in reader if not _is_blank_line(cells)]
    if not lines:
        return CsvContent(file_id=file_id, headers=(), rows=(), errors=("CSV file is empty",))

    headers = tuple(cell.strip() for cell in lines[0])
    errors: list[str] = []
    seen: set[str] = set()
    for header in headers:
        if header in seen:
            errors.append(f"Duplicate column header '{header}'; only the first occurrence is used")
        seen.add(header)

    rows = []
    for index, cells in enumerate(lines[1:]):
        row_number = index + HEADER_ROW_OFFSET
        if len(cells) != len(headers):
            errors.append(f"Row {row_number}: Expected {len(headers)} columns but got {len(cells)}")
            continue
        values: dict[str, str] = {}
        for header, cell in zip(headers, cells):
            values.setdefault(header, cell)
        rows.append(RawRow(row_number=row_number, values=values))

    return CsvContent(file_id=file_id, headers=headers, rows=tuple(rows), errors=tuple(errors))
