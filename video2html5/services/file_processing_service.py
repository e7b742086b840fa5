"""
Turns the command-line path arguments into the list of files to process.

A file argument is processed as given. A directory argument is scanned
recursively and every regular file in it is processed, in sorted order.
The scan is finished before the first file is converted, so outputs written
during the run are not picked up again.
"""
import os
from pathlib import Path
from typing import List, Tuple

from loguru import logger

from ..domain.exceptions import SkipNotice


class ProcessFiles:
    """
    Expands one input path into the files to process.

    Attributes:
        input_path: The path exactly as given on the command line.
        files: The discovered files.
    """

    def __init__(self, input_path: Path):
        """
        Args:
            input_path: A file or a directory.

        Raises:
            SkipNotice: If the path does not exist or is neither a file nor a directory.
        """
        self.input_path = input_path
        self.files: Tuple[Path, ...] = tuple(self._discover())

    def _discover(self) -> List[Path]:
        path = self.input_path
        if not path.exists():
            raise SkipNotice(path, f"File not found ({path}). Skipping...")
        if path.is_dir():
            files = self.scan_directory(path)
            logger.debug(f"Found {len(files)} files under {path}")
            return files
        if path.is_file():
            return [path]
        raise SkipNotice(path, f"Invalid file ({path}). Skipping...")

    @staticmethod
    def scan_directory(directory: Path) -> List[Path]:
        """
        Lists every regular file below `directory`, top-down, sorted by name.

        Symbolic links (to files or directories) are not followed.
        """
        found: List[Path] = []
        for root, dirnames, filenames in os.walk(directory, followlinks=False):
            dirnames.sort()
            root_path = Path(root)
            for name in sorted(filenames):
                candidate = root_path / name
                if candidate.is_file() and not candidate.is_symlink():
                    found.append(candidate)
        return found
