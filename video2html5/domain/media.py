"""
Represents what the probe tool reported about a single media file.

A `ProbeResult` is built once per file from a handful of independent probe
queries and never changes afterwards. Every field is kept as the raw string
the tool returned (an empty string means the tool reported nothing), except
the audio channel count, which is parsed to an integer because the plan
builder compares it numerically.
"""
import re
from dataclasses import dataclass
from pathlib import Path

from ..config.audio import DEFAULT_AUDIO_CHANNELS


def parse_channel_count(raw: str, default: int = DEFAULT_AUDIO_CHANNELS) -> int:
    """
    Parses the channel count reported for the first audio track.

    mediainfo may report several values for one track (e.g. "8 / 6" for a
    TrueHD track with an AC-3 core). The first integer wins. An empty or
    unparsable value falls back to `default`, which assumes multichannel.

    Args:
        raw: The raw probe output.
        default: Value used when nothing can be parsed.

    Returns:
        The channel count.
    """
    match = re.match(r"\s*(\d+)", raw or "")
    if not match:
        return default
    return int(match.group(1))


@dataclass(frozen=True)
class ProbeResult:
    """
    Immutable probe data for one file.

    Attributes:
        path: The file that was probed.
        container: General format, e.g. "Matroska". Empty if unknown.
        video_codec: Format of the first video track, e.g. "AVC". Empty if the
                     file has no video track.
        video_profile: Profile of the first video track. Informational only.
        audio_codec: Format of the first audio track, e.g. "AAC LC". Empty if
                     the file has no audio track.
        audio_channels: Channel count of the first audio track.
        duration: Human-readable duration. Informational only.
    """

    path: Path
    container: str
    video_codec: str
    video_profile: str = ""
    audio_codec: str = ""
    audio_channels: int = DEFAULT_AUDIO_CHANNELS
    duration: str = ""

    @property
    def extension(self) -> str:
        """The file extension without the leading dot, case preserved."""
        return self.path.suffix[1:]

    @property
    def has_video(self) -> bool:
        return bool(self.video_codec)

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_codec)
