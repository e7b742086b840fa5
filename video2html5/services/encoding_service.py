"""
Runs the external encoder for one planned conversion.

The rest of the application only sees the narrow `EncoderTool` capability,
`encode(spec) -> ExitStatus`. The exit status is the only success signal.
`FFmpegEncoder` is the real implementation (ffmpeg or avconv). Tests
substitute fakes.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol

from loguru import logger

from ..domain.plan import StreamAction
from ..utils.ffmpeg_utils import format_command, run_cmd

# Return code reported when the encoder could not be started at all.
LAUNCH_FAILED = -1


@dataclass(frozen=True)
class EncodeSpec:
    """
    Everything the encoder needs for one file.

    Attributes:
        source: The original input file.
        output: The temporary output file (`<source>.<container>`).
        video: Copy or re-encode the video streams.
        audio: Copy or re-encode the audio streams.
    """

    source: Path
    output: Path
    video: StreamAction
    audio: StreamAction


@dataclass(frozen=True)
class ExitStatus:
    return_code: int
    stderr: str = ""
    command: str = ""

    @property
    def ok(self) -> bool:
        return self.return_code == 0


class EncoderTool(Protocol):
    def encode(self, spec: EncodeSpec) -> ExitStatus:
        ...


class FFmpegEncoder:
    """
    Converts files with ffmpeg (or avconv, which takes the same arguments).

    All streams are mapped except data streams, subtitles are converted to
    SRT, and video and audio are copied or re-encoded independently.
    """

    def __init__(self, executable: str = "ffmpeg"):
        self.executable = executable

    def build_command(self, spec: EncodeSpec) -> List[str]:
        cmd = [
            self.executable,
            "-loglevel", "error",
            "-stats",
            "-i", str(spec.source),
            "-map", "0",
            "-map", "-0:d",
            "-c:s", "srt",
            "-vcodec", spec.video.codec,
            "-acodec", spec.audio.codec,
        ]
        # Options of every re-encoded stream go after both codec selections.
        cmd += list(spec.video.options) + list(spec.audio.options)
        cmd.append(str(spec.output))
        return cmd

    def encode(self, spec: EncodeSpec) -> ExitStatus:
        cmd = self.build_command(spec)
        logger.debug(f"Encoder command: {format_command(cmd)}")
        result = run_cmd(cmd, src_file_for_log=spec.source)
        if result is None:
            return ExitStatus(LAUNCH_FAILED, stderr="encoder could not be started", command=format_command(cmd))
        return ExitStatus(result.returncode, stderr=result.stderr or "", command=format_command(cmd))
