"""
Carries out one `TranscodePlan`.

The executor is the only component that changes files on disk. It runs the
encoder into a temporary output next to the original, and only when the
encoder exits with status 0 hands over to the `FileStateManager` to put the
result in place and records it in the ledger. Any other outcome removes the
partial output and leaves the original exactly as it was.
"""
from datetime import datetime
from typing import Optional

from loguru import logger

from ..domain.exceptions import ConversionFailure
from ..domain.media import ProbeResult
from ..domain.plan import ConvertedFile, FileState, TranscodePlan
from ..utils.format_utils import format_timedelta, formatted_size
from .encoding_service import EncoderTool, EncodeSpec, ExitStatus
from .file_state_service import FileStateManager
from .ledger_service import Ledger
from .logging_service import ErrorLog


class TranscodeExecutor:
    def __init__(
        self,
        encoder: EncoderTool,
        file_state: FileStateManager,
        ledger: Ledger,
        error_log: Optional[ErrorLog] = None,
    ):
        self.encoder = encoder
        self.file_state = file_state
        self.ledger = ledger
        self.error_log = error_log

    def execute(self, probe: ProbeResult, plan: TranscodePlan) -> ConvertedFile:
        """
        Converts one file according to `plan`.

        Args:
            probe: Probe data of the input file.
            plan: The decided actions. Must not be a no-op.

        Returns:
            The final locations of output and backup.

        Raises:
            ConversionFailure: If the encoder fails or the result cannot be
                               put in place. The original is untouched.
            KeyboardInterrupt: After the partial output has been removed.
        """
        source = probe.path
        container = plan.output_container(probe.extension)
        temp_output = self.file_state.temp_output_for(source, container)
        spec = EncodeSpec(source=source, output=temp_output, video=plan.video, audio=plan.audio)

        if probe.duration:
            logger.info(f"- duration: {probe.duration}")
        logger.info(f"Converting {source.name} -> {temp_output.name}")
        logger.debug(f"{source.name}: {FileState.ORIGINAL.value} -> {FileState.CONVERTING.value}")

        start_time = datetime.now()
        try:
            status = self.encoder.encode(spec)
        except KeyboardInterrupt:
            logger.warning(f"Interrupted while converting {source.name}. Removing partial output.")
            self.file_state.cleanup(temp_output)
            self._report(source, ExitStatus(130, stderr="interrupted"))
            raise

        if not status.ok:
            self.file_state.cleanup(temp_output)
            self._report(source, status)
            raise ConversionFailure(source, return_code=status.return_code)

        try:
            converted = self.file_state.finalize(source, temp_output, container)
        except ConversionFailure as e:
            self.file_state.cleanup(temp_output)
            self._report(source, status, reason=e.reason)
            raise

        self.ledger.record(converted.output)
        elapsed = format_timedelta(datetime.now() - start_time)
        try:
            size = formatted_size(converted.output.stat().st_size)
        except OSError as e:
            logger.warning(f"Could not read the size of {converted.output}: {e}")
            size = "size unknown"
        logger.success(f"Converted {source.name} -> {converted.output.name} ({size}, took {elapsed})")
        if converted.backup:
            logger.info(f"Original kept as {converted.backup.name}")
        return converted

    def _report(self, source, status: ExitStatus, reason: str = ""):
        """Writes a failed conversion to the error log."""
        logger.debug(f"{source.name}: {FileState.CONVERTING.value} -> {FileState.FAILED.value}")
        if self.error_log is None:
            return
        lines = [
            f"Failed to convert: {source}",
            f"Command: {status.command or 'N/A'}",
            f"Return code: {status.return_code}",
        ]
        if reason:
            lines.append(f"Reason: {reason}")
        if status.stderr:
            lines.append(f"Encoder output:\n{status.stderr.strip()}")
        self.error_log.write(*lines)
