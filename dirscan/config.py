"""
Configuration constants and store profiles for the directory scanner.
"""
from dataclasses import dataclass

from .exceptions import ConfigurationError

# --- Store Profile Values ---
DURABILITY_MODES = ('fast', 'safe')
JOURNAL_MODES = ('memory', 'persistent')

# durability -> PRAGMA synchronous value (and the integer SQLite reports back)
SYNCHRONOUS_PRAGMAS = {'fast': ('OFF', 0), 'safe': ('FULL', 2)}
# journal -> PRAGMA journal_mode value
JOURNAL_PRAGMAS = {'memory': 'MEMORY', 'persistent': 'DELETE'}

# Large page cache keeps a long bulk load from touching disk mid-transaction
DEFAULT_CACHE_PAGES = 100_000

# --- Output ---
SUCCESS_MESSAGE = "Directory scan completed successfully"
TABLE_NAME = "files"


@dataclass(frozen=True)
class StoreConfig:
    """
    Durability/performance settings applied to the store when it is opened.

    durability:
        'fast' turns fsync off (PRAGMA synchronous=OFF). Writes are acknowledged
        before they reach stable storage, so a crash or power loss mid-scan can
        lose the latest writes or corrupt the store. On slow media such as SD
        cards this is orders of magnitude faster than 'safe'.
        'safe' syncs on every commit (PRAGMA synchronous=FULL).
    journal:
        'memory' keeps the rollback journal in RAM (PRAGMA journal_mode=MEMORY).
        Same risk as above: a crash mid-transaction can leave the file corrupt.
        'persistent' writes the journal next to the store (journal_mode=DELETE).
    cache_pages:
        Upper bound on the page cache, in pages (PRAGMA cache_size).
    """
    durability: str = 'fast'
    journal: str = 'memory'
    cache_pages: int = DEFAULT_CACHE_PAGES

    def validate(self) -> 'StoreConfig':
        if self.durability not in DURABILITY_MODES:
            raise ConfigurationError(
                f"Unknown durability {self.durability!r} (expected one of {', '.join(DURABILITY_MODES)})"
            )
        if self.journal not in JOURNAL_MODES:
            raise ConfigurationError(
                f"Unknown journal mode {self.journal!r} (expected one of {', '.join(JOURNAL_MODES)})"
            )
        if isinstance(self.cache_pages, bool) or not isinstance(self.cache_pages, int) or self.cache_pages <= 0:
            raise ConfigurationError(f"cache_pages must be a positive integer, got {self.cache_pages!r}")
        return self

    @property
    def synchronous_pragma(self) -> str:
        return SYNCHRONOUS_PRAGMAS[self.durability][0]

    @property
    def journal_pragma(self) -> str:
        return JOURNAL_PRAGMAS[self.journal]


# Throughput first: the default for bulk ingest
FAST_PROFILE = StoreConfig(durability='fast', journal='memory', cache_pages=DEFAULT_CACHE_PAGES)
# For correctness-sensitive use: fsync on, journal on disk
SAFE_PROFILE = StoreConfig(durability='safe', journal='persistent', cache_pages=DEFAULT_CACHE_PAGES)

PROFILES = {'fast': FAST_PROFILE, 'safe': SAFE_PROFILE}
