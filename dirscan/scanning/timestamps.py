"""
Timestamp extraction strategies.

No standard stat call exposes a true birth time on Linux, so the POSIX
strategy records the status-change time (st_ctime: last inode change,
e.g. permissions or ownership) as an approximation of creation time.
Platforms without a status-change time use the modification time for both.
"""
import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Tuple


def _from_ns(ns: int) -> datetime:
    dt = datetime.fromtimestamp(ns // 1_000_000_000, tz=timezone.utc)
    return dt.replace(microsecond=(ns // 1000) % 1_000_000).astimezone()


class StatusTimeProvider(ABC):
    """Turns a stat result into (modified_time, created_time)."""

    name = "abstract"

    @abstractmethod
    def times(self, st: os.stat_result) -> Tuple[datetime, datetime]:
        ...


class NativeStatusTimeProvider(StatusTimeProvider):
    """POSIX: created_time is the inode status-change time (not a birth time)."""

    name = "status-change"

    def times(self, st: os.stat_result) -> Tuple[datetime, datetime]:
        return _from_ns(st.st_mtime_ns), _from_ns(st.st_ctime_ns)


class ModifiedTimeOnlyProvider(StatusTimeProvider):
    """Fallback: created_time == modified_time."""

    name = "modified-only"

    def times(self, st: os.stat_result) -> Tuple[datetime, datetime]:
        mtime = _from_ns(st.st_mtime_ns)
        return mtime, mtime


def default_time_provider() -> StatusTimeProvider:
    # On Windows st_ctime means creation time, not status change
    if os.name == 'posix':
        return NativeStatusTimeProvider()
    return ModifiedTimeOnlyProvider()
