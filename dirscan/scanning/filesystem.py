import os
import stat
import logging
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional, Union

from ..exceptions import PathAccessError
from ..models import FileRecord
from .timestamps import StatusTimeProvider, default_time_provider


class ErrorPolicy(Enum):
    """What the walker does when a path cannot be statted or listed."""
    ABORT = 'abort'        # raise, the caller rolls back the scan
    SKIP = 'skip'          # log and continue
    COLLECT = 'collect'    # continue, keep the error in DiskScanner.errors


class DiskScanner:
    def __init__(self,
                 time_provider: Optional[StatusTimeProvider] = None,
                 error_policy: ErrorPolicy = ErrorPolicy.ABORT):
        self.time_provider = time_provider or default_time_provider()
        self.error_policy = error_policy
        self.errors: List[PathAccessError] = []

    def scan(self, root: Union[Path, str]) -> Iterator[FileRecord]:
        """
        Generator that yields a FileRecord for every regular file under root.

        Depth-first in listing order (no sorting): a subdirectory is descended
        at its place in the listing. Directory symlinks are not descended.
        Other entries are statted following symlinks, so a dangling link is an
        access error, as is a regular file the process cannot read.
        """
        root = os.fspath(root)
        try:
            st = os.stat(root)
        except OSError as e:
            self._handle_error(PathAccessError(Path(root), f"Error accessing path {root!r}: {e}"))
            return

        if stat.S_ISDIR(st.st_mode):
            yield from self._walk(root)
        elif stat.S_ISREG(st.st_mode) and self._readable(root):
            yield self._make_record(root, os.path.basename(root), st)

    def _walk(self, root: str) -> Iterator[FileRecord]:
        # One open scandir iterator per directory level being descended
        stack = []
        it = self._open_dir(root)
        if it is None:
            return
        stack.append((root, it))
        try:
            while stack:
                current, it = stack[-1]
                try:
                    entry = next(it, None)
                except OSError as e:
                    stack.pop()
                    it.close()
                    self._handle_error(PathAccessError(Path(current), f"Error reading directory {current!r}: {e}"))
                    continue

                if entry is None:
                    stack.pop()
                    it.close()
                    continue

                try:
                    if entry.is_dir(follow_symlinks=False):
                        sub = self._open_dir(entry.path)
                        if sub is not None:
                            stack.append((entry.path, sub))
                        continue
                    st = entry.stat()
                except OSError as e:
                    self._handle_error(PathAccessError(Path(entry.path), f"Error accessing path {entry.path!r}: {e}"))
                    continue

                if not stat.S_ISREG(st.st_mode):
                    logging.debug(f"Skipping non-regular entry: {entry.path}")
                    continue
                if not self._readable(entry.path):
                    continue

                yield self._make_record(entry.path, entry.name, st)
        finally:
            for _, it in stack:
                it.close()

    def _open_dir(self, path: str):
        try:
            return os.scandir(path)
        except OSError as e:
            self._handle_error(PathAccessError(Path(path), f"Error accessing path {path!r}: {e}"))
            return None

    def _readable(self, path: str) -> bool:
        if os.access(path, os.R_OK):
            return True
        self._handle_error(PathAccessError(Path(path), f"Error accessing path {path!r}: permission denied"))
        return False

    def _make_record(self, path: str, name: str, st: os.stat_result) -> FileRecord:
        modified, created = self.time_provider.times(st)
        return FileRecord(
            filepath=path,
            filename=name,
            size=st.st_size,
            modified_time=modified,
            created_time=created,
        )

    def _handle_error(self, err: PathAccessError):
        if self.error_policy is ErrorPolicy.ABORT:
            raise err
        logging.warning(f"Skipping: {err}")
        if self.error_policy is ErrorPolicy.COLLECT:
            self.errors.append(err)
