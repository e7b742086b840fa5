"""
Immutable configuration objects.

`Configuration` is assembled once at startup by `config.loader` from the
built-in defaults, the user's `config.yaml` and the command-line flags, and
then passed explicitly to every service. No service reads module-level
settings on its own.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional, Tuple

from .common import (
    DEFAULT_ON_SUCCESS,
    DEFAULT_PROBE_TOOL,
    ERROR_LOG_FILE_NAME,
    PROCESSED_FILES_NAME,
)


@dataclass(frozen=True)
class CodecList:
    """
    One allow/deny pair of the registry.

    Attributes:
        kind: Human-readable name of what is listed ("general", "video", "audio").
        supported: Values that play as-is.
        unsupported: Values that must be converted.
    """

    kind: str
    supported: FrozenSet[str]
    unsupported: FrozenSet[str]

    def overlap(self) -> FrozenSet[str]:
        return self.supported & self.unsupported


@dataclass(frozen=True)
class Registry:
    """All allow/deny pairs plus the recognised (lower-case) video extensions."""

    extensions: FrozenSet[str]
    containers: CodecList
    video_codecs: CodecList
    audio_codecs: CodecList


@dataclass(frozen=True)
class EncoderDefaults:
    """Targets used whenever a stream or the container has to change."""

    container: str
    video_codec: str
    audio_codec: str
    video_options: Tuple[str, ...] = ()
    audio_options: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RunFlags:
    """Per-run switches set on the command line."""

    force_video_encode: bool = False
    force_audio_encode: bool = False
    # Named after the flag. Multichannel audio is copied, not downmixed.
    downmix_stereo: bool = False
    override_container: Optional[str] = None


@dataclass(frozen=True)
class Configuration:
    """
    Everything a run needs to know, frozen at startup.

    Attributes:
        config_dir: Writable directory holding config.yaml, the ledger and the error log.
        registry: Allow/deny lists and video extensions.
        defaults: Encoder targets.
        flags: Command-line switches.
        on_success: One of "archive", "delete", "keep".
        probe_tool: "mediainfo" or "ffprobe".
        ffmpeg_dir: Optional directory searched for the ffmpeg/ffprobe binaries first.
        skip_processed: Skip files already present in the ledger.
    """

    config_dir: Path
    registry: Registry
    defaults: EncoderDefaults
    flags: RunFlags = field(default_factory=RunFlags)
    on_success: str = DEFAULT_ON_SUCCESS
    probe_tool: str = DEFAULT_PROBE_TOOL
    ffmpeg_dir: Optional[Path] = None
    skip_processed: bool = False

    @property
    def ledger_path(self) -> Path:
        return self.config_dir / PROCESSED_FILES_NAME

    @property
    def error_log_path(self) -> Path:
        return self.config_dir / ERROR_LOG_FILE_NAME
