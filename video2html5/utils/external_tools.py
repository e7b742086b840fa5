"""
This module provides the Modules class to locate and verify the external
tools the application needs: a probe tool (mediainfo or ffprobe) and an
encoder (avconv or ffmpeg). A missing tool is fatal and reported before any
file is touched.
"""
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config.common import ENCODER_EXECUTABLES, PROBE_TOOL_FFPROBE
from ..config.models import Configuration
from ..domain.exceptions import MissingToolError
from .ffmpeg_utils import run_cmd


@dataclass(frozen=True)
class ToolPaths:
    """Resolved executables for one run."""

    probe: str
    encoder: str


class Modules:
    """
    Locates external executables.

    A directory configured as `tools.ffmpeg_dir` in `config.yaml` is searched
    first for ffmpeg and ffprobe. Everything else is looked up on the
    system's PATH.
    """

    @staticmethod
    def _exe_name(name: str) -> str:
        return f"{name}.exe" if sys.platform == "win32" else name

    @staticmethod
    def _from_configured_dir(name: str, ffmpeg_dir: Optional[Path]) -> Optional[str]:
        if not ffmpeg_dir:
            return None
        if not ffmpeg_dir.is_dir():
            logger.warning(f"Configured ffmpeg_dir '{ffmpeg_dir}' is not a directory. Falling back to system PATH.")
            return None
        candidate = ffmpeg_dir / Modules._exe_name(name)
        if candidate.is_file():
            logger.debug(f"Using {name} from configured path: '{candidate}'")
            return str(candidate)
        logger.warning(f"`ffmpeg_dir` is configured, but '{candidate.name}' was not found there. Falling back to system PATH.")
        return None

    @staticmethod
    def locate_encoder(ffmpeg_dir: Optional[Path] = None) -> str:
        """
        Finds the encoder executable: configured ffmpeg, then avconv, then ffmpeg on PATH.

        Raises:
            MissingToolError: If none is available.
        """
        configured = Modules._from_configured_dir("ffmpeg", ffmpeg_dir)
        if configured:
            return configured
        for name in ENCODER_EXECUTABLES:
            found = shutil.which(name)
            if found:
                return found
        raise MissingToolError("ffmpeg", hint="`avconv` was not found either")

    @staticmethod
    def locate_probe(probe_tool: str, ffmpeg_dir: Optional[Path] = None) -> str:
        """
        Finds the probe executable selected in the configuration.

        Raises:
            MissingToolError: If it is not available.
        """
        if probe_tool == PROBE_TOOL_FFPROBE:
            configured = Modules._from_configured_dir(PROBE_TOOL_FFPROBE, ffmpeg_dir)
            if configured:
                return configured
        found = shutil.which(probe_tool)
        if not found:
            raise MissingToolError(probe_tool)
        return found

    @staticmethod
    def verify_encoder(encoder: str):
        """Runs `<encoder> -version` and logs the first output line."""
        result = run_cmd([encoder, "-version"])
        if result is None or result.returncode != 0:
            logger.warning(f"Encoder version check failed for '{encoder}'.")
            return
        version_output_lines = result.stdout.splitlines()
        if version_output_lines:
            logger.debug(f"Encoder version: {version_output_lines[0]}")

    @staticmethod
    def run_all(configuration: Configuration) -> ToolPaths:
        """
        Locates every tool the run needs. Called once at startup.

        Raises:
            MissingToolError: If a required tool is missing.
        """
        probe = Modules.locate_probe(configuration.probe_tool, configuration.ffmpeg_dir)
        encoder = Modules.locate_encoder(configuration.ffmpeg_dir)
        Modules.verify_encoder(encoder)
        logger.debug(f"Using probe tool '{probe}' and encoder '{encoder}'")
        return ToolPaths(probe=probe, encoder=encoder)
