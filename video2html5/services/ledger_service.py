"""
The ledger of processed files.

Every file that turned out to be already compatible, and every file that
was converted successfully, is recorded by its absolute path in
`<config dir>/processed_files`, one path per line. The file is only ever
appended to. Appends take an exclusive `fcntl.flock` on the ledger itself,
so two runs working on the same config directory never interleave lines or
record a path twice.
"""
import fcntl
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Protocol, Set, TextIO

from loguru import logger

from ..domain.exceptions import LedgerUnwritableError
from .logging_service import Log

PathResolver = Callable[[Path], Path]


def resolve_path(path: Path) -> Path:
    return Path(path).resolve()


class Ledger(Protocol):
    def record(self, path: Path) -> bool:
        ...

    def contains(self, path: Path) -> bool:
        ...

    def __len__(self) -> int:
        ...


@contextmanager
def locked(f: TextIO) -> Iterator[TextIO]:
    """Holds an exclusive lock on an open file for the duration of the block."""
    fcntl.flock(f.fileno(), fcntl.LOCK_EX)
    try:
        yield f
    finally:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)


class FlatFileLedger(Log):
    """
    Plain-text ledger backend.

    Args:
        log_file_path: Location of the ledger file.
        resolver: Turns an input path into the absolute path that is stored.
    """

    def __init__(self, log_file_path: Path, resolver: PathResolver = resolve_path):
        try:
            super().__init__(log_file_path)
        except OSError as e:
            raise LedgerUnwritableError(f"Cannot create the directory of ledger {log_file_path}: {e}") from e
        self.resolver = resolver
        self._entries: Set[str] = set()

    def open(self) -> "FlatFileLedger":
        """
        Creates the ledger if needed, checks it is writable and loads its entries.

        Raises:
            LedgerUnwritableError: If the ledger is not a writable regular file.
        """
        path = self.log_file_path
        try:
            path.touch(exist_ok=True)
        except OSError as e:
            raise LedgerUnwritableError(f"Cannot create ledger {path}: {e}") from e
        if not path.is_file():
            raise LedgerUnwritableError(f"Ledger {path} is not a regular file.")
        if not os.access(path, os.W_OK):
            raise LedgerUnwritableError(f"Ledger {path} is not writeable.")

        self._entries = self._read_entries()
        logger.debug(f"Ledger {path} holds {len(self._entries)} entries")
        return self

    def _read_entries(self) -> Set[str]:
        with self.log_file_path.open("r", encoding="utf-8") as f:
            return {line.rstrip("\n") for line in f if line.strip()}

    def _key(self, path: Path) -> str:
        return str(self.resolver(path))

    def contains(self, path: Path) -> bool:
        return self._key(path) in self._entries

    def record(self, path: Path) -> bool:
        """
        Appends `path` unless it is already recorded.

        Returns:
            True if the path was added, False if it was already there.

        Raises:
            LedgerUnwritableError: If the ledger cannot be written.
        """
        key = self._key(path)
        try:
            with self.log_file_path.open("a+", encoding="utf-8") as f, locked(f):
                # Another run may have appended since this one started.
                f.seek(0)
                self._entries.update(line.rstrip("\n") for line in f if line.strip())
                if key in self._entries:
                    logger.debug(f"{key} is already in the ledger")
                    return False
                f.seek(0, os.SEEK_END)
                f.write(key + "\n")
                f.flush()
        except OSError as e:
            raise LedgerUnwritableError(f"Cannot write to ledger {self.log_file_path}: {e}") from e
        self._entries.add(key)
        logger.debug(f"Recorded {key} in the ledger")
        return True

    def write(self, *content: str):
        """`Log` interface: records each given path."""
        for path in content:
            self.record(Path(path))

    def __len__(self) -> int:
        return len(self._entries)
