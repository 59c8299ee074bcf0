from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from .exceptions import PathAccessError

@dataclass
class FileRecord:
    """
    Represents a regular file found during a scan.
    """
    filepath: str           # path as traversed, not canonicalized
    filename: str
    size: int
    modified_time: datetime
    created_time: datetime  # status-change time, or modified_time when unavailable


@dataclass
class ScanResult:
    """Outcome of one scan invocation."""
    records: int = 0
    commits: int = 0
    errors: List[PathAccessError] = field(default_factory=list)
