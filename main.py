"""
Main entry point for video2html5.

This script parses the command line, configures the logger, builds the
run's configuration, locates the external tools and then hands every path
to the conversion pipeline.

Exit status: 0 when the run completes (even if single files failed), 1 for
configuration problems and usage errors, 130 when interrupted.
"""

import sys
from typing import List, Optional

from loguru import logger

from video2html5.cli import get_args
from video2html5.config.common import DEFAULT_LOG_LEVEL, LOGGER_FORMAT
from video2html5.config.loader import load_configuration
from video2html5.domain.exceptions import ConfigurationError
from video2html5.pipeline.video_pipeline import VideoPipeline
from video2html5.services.encoding_service import FFmpegEncoder
from video2html5.services.executor_service import TranscodeExecutor
from video2html5.services.file_state_service import FileStateManager
from video2html5.services.ledger_service import FlatFileLedger
from video2html5.services.logging_service import ErrorLog
from video2html5.services.probe_service import create_probe_tool
from video2html5.utils.external_tools import Modules

EXIT_OK = 0
EXIT_CONFIGURATION_ERROR = 1
EXIT_INTERRUPTED = 130


# Configure the logger for initial setup.
# The level is overridden once the command line has been parsed.
logger.remove()
logger.add(sys.stderr, level=DEFAULT_LOG_LEVEL, format=LOGGER_FORMAT)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Runs one conversion session.

    1. Parses command-line arguments and reconfigures the logger.
    2. Prepares the config directory and loads the configuration.
    3. Locates the probe tool and the encoder.
    4. Opens the ledger and runs the pipeline over all given paths.
    """
    args = get_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level, format=LOGGER_FORMAT)
    logger.debug(f"Parsed arguments: {args}")

    try:
        configuration = load_configuration(args)
        tools = Modules.run_all(configuration)
        ledger = FlatFileLedger(configuration.ledger_path).open()

        executor = TranscodeExecutor(
            encoder=FFmpegEncoder(tools.encoder),
            file_state=FileStateManager(configuration.on_success),
            ledger=ledger,
            error_log=ErrorLog(configuration.error_log_path),
        )
        pipeline = VideoPipeline(
            configuration,
            probe_tool=create_probe_tool(configuration.probe_tool, tools.probe),
            executor=executor,
            ledger=ledger,
        )
        summary = pipeline.run(args.paths)
    except ConfigurationError as e:
        logger.error(str(e))
        return EXIT_CONFIGURATION_ERROR
    except KeyboardInterrupt:
        logger.warning("Interrupted. The file being converted was left untouched.")
        return EXIT_INTERRUPTED

    if summary.failed:
        logger.warning(f"{summary.failed} file(s) failed, see {configuration.error_log_path}")
    logger.success("video2html5 finished.")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
