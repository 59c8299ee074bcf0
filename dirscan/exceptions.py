"""
Custom exception hierarchy for the directory scanner.

Every error is fatal to the invocation unless the walker's error policy
says otherwise for path access failures.
"""
from pathlib import Path
from typing import Optional


class DirScanError(Exception):
    """Base exception for all directory scanner errors."""
    pass


class StoreOpenError(DirScanError):
    """Raised when the store file cannot be opened or created."""
    pass


class ConfigurationError(DirScanError):
    """Raised when a store setting is invalid or the engine refuses it."""
    pass


class SchemaError(DirScanError):
    """Raised when the record table cannot be created."""
    pass


class TransactionError(DirScanError):
    """Raised when a transaction cannot begin or commit, or the insert cannot be prepared."""
    pass


class PathAccessError(DirScanError):
    """Raised when an entry cannot be statted or a directory cannot be read."""

    def __init__(self, path: Optional[Path], message: str):
        super().__init__(message)
        self.path = path


class InsertError(DirScanError):
    """Raised when writing a record fails mid-walk."""
    pass
