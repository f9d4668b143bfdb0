"""
FileInfo model describing an importable CSV in the file store.
"""

from datetime import datetime

from .base import CamelModel


class FileInfo(CamelModel):
    id: str
    name: str
    size: int
    modified_at: datetime
