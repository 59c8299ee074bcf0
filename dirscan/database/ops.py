import sqlite3
import logging
from datetime import datetime
from typing import Optional

from ..exceptions import InsertError, TransactionError
from ..models import FileRecord

INSERT_SQL = """
    INSERT INTO files (filepath, filename, size, modified_time, created_time)
    VALUES (?, ?, ?, ?, ?)
"""

def format_timestamp(dt: datetime) -> str:
    """Stored as ISO-8601 text with the UTC offset, e.g. '2024-12-26 10:04:05.123456+00:00'."""
    return dt.isoformat(sep=' ')


class BatchWriter:
    """
    Writes FileRecords inside explicit transactions.

    With batch_size=None the whole scan is one transaction: nothing persists
    unless the walk finishes. With batch_size=N a COMMIT is issued after every
    N inserts, so a failure only loses the uncommitted tail. The next
    transaction is opened by the next insert, so every counted commit holds
    rows (except the single commit of an empty scan).

    One cursor and one SQL string serve every insert; sqlite3's statement
    cache compiles the INSERT once and rebinds parameters per row.
    """

    def __init__(self, conn: sqlite3.Connection, batch_size: Optional[int] = None):
        if batch_size is not None and batch_size < 1:
            raise ValueError(f"batch_size must be >= 1 or None, got {batch_size}")
        self.conn = conn
        self.batch_size = batch_size
        self.inserted = 0
        self.commits = 0
        self._pending = 0
        self._cur: Optional[sqlite3.Cursor] = None
        self._in_tx = False

    def begin(self):
        try:
            self.conn.execute("BEGIN")
            self._in_tx = True
            if self._cur is None:
                self._cur = self.conn.cursor()
        except sqlite3.Error as e:
            raise TransactionError(f"Error starting transaction: {e}") from e

    def insert(self, rec: FileRecord):
        if self._cur is None:
            raise TransactionError("insert() called before begin()")
        if not self._in_tx:
            self.begin()
        try:
            self._cur.execute(INSERT_SQL, (
                str(rec.filepath),
                rec.filename,
                rec.size,
                format_timestamp(rec.modified_time),
                format_timestamp(rec.created_time),
            ))
        except sqlite3.Error as e:
            raise InsertError(f"Error inserting record for {str(rec.filepath)!r}: {e}") from e

        self.inserted += 1
        self._pending += 1
        if self.batch_size and self._pending >= self.batch_size:
            self.commit()

    def commit(self):
        try:
            self.conn.execute("COMMIT")
        except sqlite3.Error as e:
            raise TransactionError(f"Error committing transaction: {e}") from e
        self._in_tx = False
        self.commits += 1
        logging.debug(f"Committed batch of {self._pending} records ({self.inserted} total).")
        self._pending = 0

    def rollback(self):
        if not self._in_tx:
            return
        self._in_tx = False
        try:
            self.conn.execute("ROLLBACK")
        except sqlite3.Error as e:
            # Connection may already have aborted the transaction itself
            logging.warning(f"Rollback failed: {e}")
        if self._pending:
            logging.warning(f"Rolled back {self._pending} uncommitted records.")
        self._pending = 0

    def close(self):
        if self._cur is not None:
            self._cur.close()
            self._cur = None

    def __enter__(self):
        self.begin()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Release order: statement, then transaction outcome
        self.close()
        if exc_type is not None:
            self.rollback()
            return
        if not self._in_tx:
            return
        try:
            self.commit()
        except TransactionError:
            self.rollback()
            raise


def count_records(conn: sqlite3.Connection) -> int:
    return conn.execute("SELECT COUNT(*) FROM files").fetchone()[0]
