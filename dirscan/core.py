import sqlite3
import logging
from pathlib import Path
from typing import Optional, Union

from .config import FAST_PROFILE, StoreConfig
from .database.db import DBManager
from .database.ops import BatchWriter
from .models import ScanResult
from .scanning.filesystem import DiskScanner, ErrorPolicy
from .scanning.timestamps import StatusTimeProvider

def scan_directory(conn: sqlite3.Connection,
                   root: Union[Path, str],
                   error_policy: ErrorPolicy = ErrorPolicy.ABORT,
                   batch_size: Optional[int] = None,
                   time_provider: Optional[StatusTimeProvider] = None) -> ScanResult:
    """
    Walks root once and inserts one record per regular file.

    The walk runs inside the writer's transaction: any error that escapes
    (path access under ABORT, insert or commit failure) rolls back every
    record not yet committed. With the default batch_size=None that is the
    whole scan.
    """
    scanner = DiskScanner(time_provider=time_provider, error_policy=error_policy)
    logging.info(f"Scanning {root} (on_error={error_policy.value}, timestamps={scanner.time_provider.name})...")

    with BatchWriter(conn, batch_size=batch_size) as writer:
        for record in scanner.scan(root):
            writer.insert(record)

    result = ScanResult(records=writer.inserted, commits=writer.commits, errors=scanner.errors)
    logging.info(f"Scan complete. Inserted {result.records} records in {result.commits} commit(s).")
    if result.errors:
        logging.warning(f"{len(result.errors)} path(s) could not be read and were skipped.")
    return result


class DirScanApp:
    def __init__(self, db_path: Union[Path, str], store_config: StoreConfig = FAST_PROFILE):
        self.db_manager = DBManager(db_path, store_config)

    def scan(self,
             src_root: Union[Path, str],
             error_policy: ErrorPolicy = ErrorPolicy.ABORT,
             batch_size: Optional[int] = None,
             time_provider: Optional[StatusTimeProvider] = None) -> ScanResult:
        """
        Opens the store, scans src_root into it and closes the store,
        whether or not the scan succeeds.
        """
        with self.db_manager as conn:
            return scan_directory(
                conn,
                src_root,
                error_policy=error_policy,
                batch_size=batch_size,
                time_provider=time_provider,
            )
