"""
Data models for the conversion decision and the file lifecycle.

The plan builder turns a `ProbeResult` into either a `TranscodePlan` or the
`NoOpCompatible` verdict. The executor consumes the plan and moves the file
through the `FileState` states.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

COPY_CODEC = "copy"


class Verdict(Enum):
    """Result of classifying one probed value against its allow/deny pair."""

    SUPPORTED = "supported"
    UNSUPPORTED = "unsupported"


class FileState(Enum):
    """
    Lifecycle of one input file.

    ORIGINAL -> CONVERTING -> CONVERTED on encoder success,
    ORIGINAL -> CONVERTING -> FAILED on encoder failure or interrupt.
    A FAILED file looks exactly like an ORIGINAL one on disk.
    """

    ORIGINAL = "original"
    CONVERTING = "converting"
    CONVERTED = "converted"
    FAILED = "failed"


@dataclass(frozen=True)
class StreamAction:
    """
    What to do with one kind of stream: copy it, or re-encode it.

    Attributes:
        codec: `copy` or the ffmpeg encoder name (e.g. "libvpx").
        options: Extra encoder arguments, already split into argv tokens.
    """

    codec: str = COPY_CODEC
    options: Tuple[str, ...] = ()

    @property
    def is_copy(self) -> bool:
        return self.codec == COPY_CODEC

    @classmethod
    def copy(cls) -> "StreamAction":
        return cls()

    @classmethod
    def encode(cls, codec: str, options: Tuple[str, ...] = ()) -> "StreamAction":
        return cls(codec=codec, options=tuple(options))

    def __str__(self) -> str:
        return self.codec


@dataclass(frozen=True)
class TranscodePlan:
    """
    The decided set of actions for one file.

    Attributes:
        container: Output container extension, or None to keep the file's
                   current container ("ok").
        video: Action for the video streams.
        audio: Action for the audio streams.
    """

    container: Optional[str]
    video: StreamAction = field(default_factory=StreamAction)
    audio: StreamAction = field(default_factory=StreamAction)

    @property
    def keeps_container(self) -> bool:
        return self.container is None

    @property
    def is_noop(self) -> bool:
        return self.keeps_container and self.video.is_copy and self.audio.is_copy

    def output_container(self, current_extension: str) -> str:
        """The container actually written, resolving "ok" to the current extension."""
        return current_extension if self.container is None else self.container

    def encoder_options(self) -> Tuple[str, ...]:
        """Extra options of every re-encoded stream, video first."""
        return self.video.options + self.audio.options


@dataclass(frozen=True)
class NoOpCompatible:
    """Verdict for a file that already plays as-is: nothing to convert."""

    path: Path


PlanDecision = Union[TranscodePlan, NoOpCompatible]


@dataclass(frozen=True)
class ConvertedFile:
    """
    Outcome of a successful conversion.

    Attributes:
        source: The original input path.
        output: Where the converted file now lives.
        backup: Where the original was archived, if it was.
    """

    source: Path
    output: Path
    backup: Optional[Path] = None
    state: FileState = FileState.CONVERTED
