"""
Database schema definitions.
"""
import sqlite3
import logging

from ..exceptions import SchemaError

def init_schema(conn: sqlite3.Connection):
    """
    Creates the record table if it is missing.
    Idempotent: safe to run on every startup.

    No secondary indexes: the store is write-optimized, every index would
    be maintained on each insert of a bulk load.
    """
    try:
        conn.execute("""
        CREATE TABLE IF NOT EXISTS files (
            id              INTEGER PRIMARY KEY AUTOINCREMENT,
            filepath        TEXT NOT NULL,
            filename        TEXT NOT NULL,
            size            INTEGER NOT NULL,
            modified_time   DATETIME NOT NULL,
            created_time    DATETIME NOT NULL
        );
        """)
    except sqlite3.Error as e:
        raise SchemaError(f"Error creating table: {e}") from e

    logging.debug("Database schema initialized.")
