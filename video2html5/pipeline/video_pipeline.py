"""
The conversion pipeline.

Files are handled strictly one after another:

    extension check -> probe -> plan -> (ledger | execute) -> record

Per-file problems (`SkipNotice`, `ConversionFailure`) are logged and the
run continues with the next file. A `ConfigurationError`, such as a codec
that is in neither list, stops the whole run.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from loguru import logger

from ..config.models import Configuration
from ..domain.exceptions import ConversionFailure, SkipNotice
from ..domain.plan import NoOpCompatible
from ..services.classifier_service import is_supported_extension
from ..services.executor_service import TranscodeExecutor
from ..services.file_processing_service import ProcessFiles
from ..services.ledger_service import Ledger
from ..services.plan_service import PlanBuilder
from ..services.probe_service import ProbeTool, read_probe_result

OUTCOME_COMPATIBLE = "compatible"
OUTCOME_CONVERTED = "converted"
OUTCOME_FAILED = "failed"
OUTCOME_SKIPPED = "skipped"


@dataclass
class RunSummary:
    compatible: int = 0
    converted: int = 0
    failed: int = 0
    skipped: int = 0

    def add(self, outcome: str):
        setattr(self, outcome, getattr(self, outcome) + 1)

    @property
    def total(self) -> int:
        return self.compatible + self.converted + self.failed + self.skipped

    def __str__(self) -> str:
        return (
            f"{self.total} files: {self.compatible} compatible, {self.converted} converted, "
            f"{self.failed} failed, {self.skipped} skipped"
        )


class VideoPipeline:
    """
    Runs every input path through the conversion steps.

    Args:
        configuration: The frozen run configuration.
        probe_tool: Backend used to inspect files.
        executor: Performs the conversions.
        ledger: Record of compatible and converted files.
    """

    def __init__(
        self,
        configuration: Configuration,
        probe_tool: ProbeTool,
        executor: TranscodeExecutor,
        ledger: Ledger,
    ):
        self.configuration = configuration
        self.probe_tool = probe_tool
        self.executor = executor
        self.ledger = ledger
        self.plan_builder = PlanBuilder(configuration.registry, configuration.defaults, configuration.flags)
        self.summary = RunSummary()

    def process_file(self, path: Path) -> str:
        """
        Handles a single file.

        Returns:
            OUTCOME_COMPATIBLE or OUTCOME_CONVERTED.

        Raises:
            SkipNotice: If the file is not a video file, is already in the
                        ledger with `skip_processed` set, or cannot be probed.
            ConversionFailure: If the conversion failed.
            ConfigurationError: If a probed format is in neither list.
        """
        if not is_supported_extension(path.suffix, self.configuration.registry.extensions):
            raise SkipNotice(path, f"{path.name} is not a video file. Skipping...")

        if self.ledger.contains(path):
            if self.configuration.skip_processed:
                raise SkipNotice(path, f"{path.name} was already processed. Skipping...")
            logger.debug(f"{path.name} is already in the ledger, checking it again")

        logger.info(f"Processing: {path}")
        probe = read_probe_result(self.probe_tool, path)
        decision = self.plan_builder.build(probe)

        if isinstance(decision, NoOpCompatible):
            self.ledger.record(path)
            logger.success(f"{path.name} already compatible with HTML5!")
            return OUTCOME_COMPATIBLE

        self.executor.execute(probe, decision)
        return OUTCOME_CONVERTED

    def _run_one(self, path: Path):
        try:
            outcome = self.process_file(path)
        except SkipNotice as notice:
            logger.info(notice.reason)
            outcome = OUTCOME_SKIPPED
        except ConversionFailure as e:
            logger.error(str(e))
            outcome = OUTCOME_FAILED
        self.summary.add(outcome)

    def run(self, paths: Iterable[Path]) -> RunSummary:
        """
        Processes every file reachable from `paths`, in order.

        The summary is logged even when the run is cut short.
        """
        try:
            for input_path in paths:
                try:
                    files = ProcessFiles(Path(input_path)).files
                except SkipNotice as notice:
                    logger.warning(notice.reason)
                    self.summary.add(OUTCOME_SKIPPED)
                    continue
                for file_path in files:
                    self._run_one(file_path)
        finally:
            logger.info(f"Summary: {self.summary}")
        return self.summary
