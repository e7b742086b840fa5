"""
Runs the external tools (mediainfo, ffprobe, ffmpeg/avconv).

Every subprocess goes through `run_cmd`. It captures stdout and stderr as
text and never raises for a tool that is missing or cannot be started:
that case yields `None`, and callers treat it like an empty answer or a
failed encode.
"""

import os
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from ..services.logging_service import ErrorLog

# Captured output longer than this is cut in TRACE messages.
TRACE_OUTPUT_LIMIT = 500


def format_command(cmd_list: Sequence[str]) -> str:
    """Quotes a command for display and for the error log."""
    if os.name == "nt":
        return subprocess.list2cmdline(list(cmd_list))
    return shlex.join(cmd_list)


def _trace_output(label: str, text: str):
    if not text:
        return
    if len(text) > TRACE_OUTPUT_LIMIT:
        text = text[:TRACE_OUTPUT_LIMIT] + "..."
    logger.trace(f"{label}: {text}")


def run_cmd(
    cmd_parts: Sequence,
    src_file_for_log: Path = Path(),
    error_log: Optional[ErrorLog] = None,
    show_cmd: bool = False,
) -> Optional[subprocess.CompletedProcess]:
    """
    Runs a command to completion and returns its result.

    No timeout is applied. A `KeyboardInterrupt` reaches the caller unchanged.

    Args:
        cmd_parts: Program and arguments. Non-string parts (e.g. `Path`) are converted.
        src_file_for_log: The media file the command works on, for messages.
        error_log: Where to report a command that could not be started.
        show_cmd: Log the command line at DEBUG before running it.

    Returns:
        The `CompletedProcess` (check `returncode`), or None if the program
        could not be started.
    """
    cmd_list = [str(part) for part in cmd_parts]
    if not cmd_list:
        logger.error("run_cmd received an empty command.")
        return None

    command_line = format_command(cmd_list)
    if show_cmd:
        logger.debug(f"Executing: {command_line}")

    try:
        result = subprocess.run(
            cmd_list,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        # FileNotFoundError for a missing program, PermissionError for a non-executable one.
        logger.error(f"Could not start '{cmd_list[0]}' for {src_file_for_log.name or 'N/A'}: {e}")
        if error_log and src_file_for_log.name:
            error_log.write(
                f"Could not run a command for: {src_file_for_log}",
                f"Command: {command_line}",
                f"Error: {type(e).__name__}: {e}",
            )
        return None

    _trace_output("stdout", result.stdout)
    if result.returncode != 0:
        # ffmpeg prints its -stats progress on stderr, so only a non-zero exit makes it interesting.
        logger.debug(f"'{cmd_list[0]}' exited with {result.returncode}: {result.stderr}")
    else:
        _trace_output("stderr", result.stderr)
    return result
