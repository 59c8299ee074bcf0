"""
dirscan: one-shot recursive file metadata ingest into SQLite.
"""
from .config import FAST_PROFILE, SAFE_PROFILE, StoreConfig
from .core import DirScanApp, scan_directory
from .database.db import DBManager
from .models import FileRecord, ScanResult
from .scanning.filesystem import DiskScanner, ErrorPolicy

__version__ = "0.1.0"
