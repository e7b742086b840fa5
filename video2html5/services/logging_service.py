"""
File-based records kept in the config directory.

Console output goes through loguru. The files written here outlive the
run: `ErrorLog` collects one report per failed conversion (command line,
return code, encoder output) in `error.txt`, and the processed-files ledger
in `ledger_service` builds on the same `Log` base.
"""

from pathlib import Path

from loguru import logger


class Log:
    """
    Base for append-only files in the config directory.

    Args:
        log_file_path: Full path of the file. Missing parent directories are created.
    """

    # Line written after every error report.
    linesep_marker: str = "=" * 50

    def __init__(self, log_file_path: Path):
        self.log_file_path: Path = log_file_path
        self.log_dir: Path = log_file_path.parent
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def write(self, *content: str):
        raise NotImplementedError("Subclasses must implement the write() method.")


class ErrorLog(Log):
    """Chronological list of failures, one block of lines per report."""

    def write(self, *error_messages: str):
        if not error_messages:
            return
        block = "\n".join(error_messages + (self.linesep_marker,)) + "\n"
        try:
            with self.log_file_path.open("a", encoding="utf-8") as f:
                f.write(block)
        except OSError as e:
            logger.error(f"Failed to write to error log {self.log_file_path}: {e}")
            for msg in error_messages:
                logger.error(f"  - {msg}")
