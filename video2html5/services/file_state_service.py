"""
Moves files into their final places once a conversion has succeeded, and
cleans up after one that has not.

The encoder always writes to a temporary file next to the original
(`movie.avi` -> `movie.avi.mkv`). Only when it reports success does
`FileStateManager.finalize` apply the configured `on_success` policy:

- archive: the original becomes `movie.bak`, the output becomes `movie.mkv`.
- delete:  the original is removed, the output becomes `movie.mkv`.
- keep:    the original stays, the output becomes `movie.avi-chromecast.mkv`.

Every rename is an `os.replace`, so each step is atomic on its own. An
existing file is never replaced, except for the original itself when the
extension does not change.
"""
import os
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config.common import BACKUP_SUFFIX, KEEP_OUTPUT_INFIX, ON_SUCCESS_ARCHIVE, ON_SUCCESS_DELETE, ON_SUCCESS_KEEP
from ..domain.exceptions import ConversionFailure
from ..domain.plan import ConvertedFile


class FileStateManager:
    """
    Applies the on-success policy and the on-failure cleanup.

    Attributes:
        on_success: One of "archive", "delete", "keep".
    """

    def __init__(self, on_success: str = ON_SUCCESS_ARCHIVE):
        if on_success not in (ON_SUCCESS_ARCHIVE, ON_SUCCESS_DELETE, ON_SUCCESS_KEEP):
            raise ValueError(f"Unknown on_success policy: {on_success!r}")
        self.on_success = on_success

    @staticmethod
    def temp_output_for(original: Path, container: str) -> Path:
        """`movie.avi` converted to mkv is first written to `movie.avi.mkv`."""
        return original.with_name(f"{original.name}.{container}")

    def destination_for(self, original: Path, container: str) -> Path:
        """The name the converted file ends up with under the current policy."""
        if self.on_success == ON_SUCCESS_KEEP:
            return original.with_name(f"{original.name}{KEEP_OUTPUT_INFIX}.{container}")
        return original.with_suffix(f".{container}")

    @staticmethod
    def backup_for(original: Path) -> Path:
        return original.with_suffix(BACKUP_SUFFIX)

    @staticmethod
    def legacy_backup_for(original: Path) -> Path:
        return original.with_name(f"{original.name}{BACKUP_SUFFIX}")

    def finalize(self, original: Path, temp_output: Path, container: str) -> ConvertedFile:
        """
        Promotes a finished temporary output to its final name.

        Args:
            original: The input file.
            temp_output: The encoder's output, complete and valid.
            container: Extension of the output container.

        Returns:
            Where the output and (under archive) the backup ended up.

        Raises:
            ConversionFailure: If the destination or the backup name is taken
                               by another file, or if a rename fails. Under
                               archive the original is restored first.
        """
        destination = self.destination_for(original, container)
        if destination != original and destination.exists():
            raise ConversionFailure(original, reason=f"{destination} already exists")

        if self.on_success == ON_SUCCESS_ARCHIVE:
            return self._archive(original, temp_output, destination)
        if self.on_success == ON_SUCCESS_DELETE:
            return self._delete(original, temp_output, destination)
        self._promote(original, temp_output, destination)
        return ConvertedFile(source=original, output=destination)

    def _promote(self, original: Path, temp_output: Path, destination: Path):
        try:
            os.replace(temp_output, destination)
        except OSError as e:
            raise ConversionFailure(original, reason=f"could not move {temp_output} to {destination}: {e}") from e
        logger.debug(f"Moved {temp_output.name} -> {destination.name}")

    def _archive(self, original: Path, temp_output: Path, destination: Path) -> ConvertedFile:
        backup = self.backup_for(original)
        if backup.exists():
            raise ConversionFailure(original, reason=f"backup {backup} already exists")
        try:
            os.replace(original, backup)
        except OSError as e:
            raise ConversionFailure(original, reason=f"could not back up the original to {backup}: {e}") from e
        logger.debug(f"Backed up {original.name} -> {backup.name}")

        try:
            self._promote(original, temp_output, destination)
        except ConversionFailure:
            logger.warning(f"Restoring {original.name} from {backup.name}")
            try:
                os.replace(backup, original)
            except OSError as e:
                raise ConversionFailure(
                    original, reason=f"could not restore the original, it is still at {backup}: {e}"
                ) from e
            raise

        legacy_backup = self.legacy_backup_for(original)
        if legacy_backup.is_file():
            logger.info(f"Removing stale backup {legacy_backup}")
            try:
                legacy_backup.unlink()
            except OSError as e:
                logger.warning(f"Could not remove stale backup {legacy_backup}: {e}")
        return ConvertedFile(source=original, output=destination, backup=backup)

    def _delete(self, original: Path, temp_output: Path, destination: Path) -> ConvertedFile:
        self._promote(original, temp_output, destination)
        # With an unchanged extension the promoted output already replaced the original.
        if destination != original:
            original.unlink(missing_ok=True)
            logger.debug(f"Deleted original {original.name}")
        return ConvertedFile(source=original, output=destination)

    @staticmethod
    def cleanup(temp_output: Optional[Path]):
        """Removes a partial output. A missing file is not an error."""
        if temp_output is None:
            return
        try:
            temp_output.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove partial output {temp_output}: {e}")
            return
        logger.debug(f"Removed partial output {temp_output.name}")
