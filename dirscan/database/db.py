"""
Database connection management.
"""
import sqlite3
import logging
from pathlib import Path
from typing import Optional, Union

from ..config import FAST_PROFILE, SYNCHRONOUS_PRAGMAS, StoreConfig
from ..exceptions import ConfigurationError, StoreOpenError
from .schema import init_schema

class DBManager:
    def __init__(self, db_path: Union[Path, str], store_config: StoreConfig = FAST_PROFILE):
        self.db_path = db_path
        self.store_config = store_config.validate()
        self._conn: Optional[sqlite3.Connection] = None

    def connect(self) -> sqlite3.Connection:
        """
        Opens (or creates) the SQLite store, applies the configured profile
        and ensures the schema exists.

        The connection runs in autocommit mode (isolation_level=None): the
        batch writer issues BEGIN/COMMIT itself.
        """
        if self._conn:
            return self._conn

        logging.info(f"Connecting to database: {self.db_path}")
        try:
            conn = sqlite3.connect(self.db_path, isolation_level=None)
        except sqlite3.Error as e:
            raise StoreOpenError(f"Error opening database {self.db_path}: {e}") from e

        try:
            # Connecting is lazy about the file header; touch it so a
            # non-database file fails here rather than at the first pragma.
            try:
                conn.execute("PRAGMA schema_version").fetchone()
            except sqlite3.Error as e:
                raise StoreOpenError(f"Error opening database {self.db_path}: {e}") from e

            self._apply_profile(conn)
            init_schema(conn)
        except Exception:
            conn.close()
            raise

        self._conn = conn
        return self._conn

    def _apply_profile(self, conn: sqlite3.Connection):
        cfg = self.store_config
        logging.info(
            f"Store profile: durability={cfg.durability}, journal={cfg.journal}, cache_pages={cfg.cache_pages}"
        )
        if cfg.durability == 'fast' or cfg.journal == 'memory':
            logging.debug("Durability relaxed: a crash during the scan may lose or corrupt the store.")

        try:
            conn.execute(f"PRAGMA synchronous = {cfg.synchronous_pragma};")
            mode = conn.execute(f"PRAGMA journal_mode = {cfg.journal_pragma};").fetchone()[0]
            conn.execute(f"PRAGMA cache_size = {int(cfg.cache_pages)};")

            # SQLite ignores values it does not like; read everything back
            sync = conn.execute("PRAGMA synchronous;").fetchone()[0]
            cache = conn.execute("PRAGMA cache_size;").fetchone()[0]
        except sqlite3.Error as e:
            raise ConfigurationError(f"Error applying store pragmas: {e}") from e

        if sync != SYNCHRONOUS_PRAGMAS[cfg.durability][1]:
            raise ConfigurationError(f"synchronous pragma not applied (got {sync})")
        # In-memory stores always report 'memory'
        if mode.lower() != cfg.journal_pragma.lower() and not self._is_memory_store():
            raise ConfigurationError(f"journal_mode pragma not applied (got {mode})")
        if cache != cfg.cache_pages:
            raise ConfigurationError(f"cache_size pragma not applied (got {cache})")

    def _is_memory_store(self) -> bool:
        return str(self.db_path) in (':memory:', '')

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        return self.connect()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
