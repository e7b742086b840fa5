"""
Queries an external probe tool for the properties the plan builder needs.

The application only ever asks for a handful of single values per file
(container format, video codec and profile, audio codec and channel count,
duration), so the probe tool is modelled as a narrow capability:

    probe(path, field) -> str

An empty string means the tool reported nothing for that field. Two
backends are provided:

- `MediaInfoProbe` runs `mediainfo --Inform=...` once per field. Its naming
  ("Matroska", "AVC", "AAC LC", ...) is the vocabulary of the default
  allow/deny lists.
- `FFprobeProbe` runs ffprobe once per file through `ffmpeg.probe` and maps
  ffprobe's names onto the same vocabulary. Names without a mapping are
  passed through unchanged, so the classifier still stops on them.
"""
from enum import Enum
from pathlib import Path
from pprint import pformat
from typing import Dict, Optional, Protocol

import ffmpeg
from loguru import logger

from ..config.common import PROBE_TOOL_FFPROBE
from ..domain.media import ProbeResult, parse_channel_count
from ..utils.ffmpeg_utils import run_cmd
from ..utils.format_utils import format_duration


class ProbeField(Enum):
    CONTAINER = "container"
    VIDEO_CODEC = "video_codec"
    VIDEO_PROFILE = "video_profile"
    AUDIO_CODEC = "audio_codec"
    AUDIO_CHANNELS = "audio_channels"
    DURATION = "duration"


class ProbeTool(Protocol):
    def probe(self, path: Path, field: ProbeField) -> str:
        ...


# --- mediainfo ---

MEDIAINFO_INFORM: Dict[ProbeField, str] = {
    ProbeField.CONTAINER: "General;%Format%\\n",
    ProbeField.VIDEO_CODEC: "Video;%Format%\\n",
    ProbeField.VIDEO_PROFILE: "Video;%Format_Profile%\\n",
    ProbeField.AUDIO_CODEC: "Audio;%Format%\\n",
    ProbeField.AUDIO_CHANNELS: "Audio;%Channels%\\n",
    ProbeField.DURATION: "General;%Duration/String3%",
}


class MediaInfoProbe:
    """Probe backed by the `mediainfo` command line tool."""

    def __init__(self, executable: str = "mediainfo"):
        self.executable = executable

    def probe(self, path: Path, field: ProbeField) -> str:
        """
        Runs one mediainfo query and returns the value for the first track.

        A failing or missing mediainfo yields an empty string, just like a
        field the file does not have.
        """
        cmd = [self.executable, f"--Inform={MEDIAINFO_INFORM[field]}", str(path)]
        result = run_cmd(cmd, src_file_for_log=path)
        if result is None or result.returncode != 0:
            return ""
        lines = result.stdout.splitlines()
        return lines[0].strip() if lines else ""


# --- ffprobe ---

FFPROBE_GFORMAT_NAMES: Dict[str, str] = {
    "matroska,webm": "Matroska",
    "mov,mp4,m4a,3gp,3g2,mj2": "MPEG-4",
    "avi": "AVI",
    "flv": "Flash Video",
    "mpeg": "MPEG-PS",
    "mpegts": "BDAV",
    "rm": "RealMedia",
    "dash": "dash",
}

FFPROBE_VCODEC_NAMES: Dict[str, str] = {
    "h264": "AVC",
    "vp8": "VP8",
    "vp9": "VP9",
    "hevc": "HEVC",
    "mpeg4": "MPEG-4 Visual",
    "mpeg1video": "MPEG Video",
    "mpeg2video": "MPEG Video",
    "rv40": "RealVideo 4",
}

FFPROBE_ACODEC_NAMES: Dict[str, str] = {
    "aac": "AAC",
    "mp2": "MPEG Audio",
    "mp3": "MPEG Audio",
    "vorbis": "Vorbis",
    "opus": "Opus",
    "ac3": "AC-3",
    "eac3": "E-AC-3",
    "dts": "DTS",
    "truehd": "TrueHD",
    "cook": "Cooker",
}


def map_ffprobe_container(format_name: str, path: Path) -> str:
    """Maps ffprobe's `format_name` to the general format name."""
    if format_name == "matroska,webm" and path.suffix.lower() == ".webm":
        return "WebM"
    return FFPROBE_GFORMAT_NAMES.get(format_name, format_name)


def map_ffprobe_video_codec(codec_name: str) -> str:
    return FFPROBE_VCODEC_NAMES.get(codec_name, codec_name)


def map_ffprobe_audio_codec(codec_name: str, profile: str = "") -> str:
    """Maps an ffprobe audio `codec_name` (plus AAC profile) to the audio format name."""
    if codec_name.startswith("pcm_"):
        return "PCM"
    if codec_name == "aac" and profile == "LC":
        return "AAC LC"
    return FFPROBE_ACODEC_NAMES.get(codec_name, codec_name)


class FFprobeProbe:
    """
    Probe backed by ffprobe through ffmpeg-python.

    ffprobe reports everything in one call, so the parsed output is cached
    per file and every field is answered from the cache.
    """

    def __init__(self, executable: str = "ffprobe"):
        self.executable = executable
        self._cache: Dict[Path, Optional[dict]] = {}

    def _probe_data(self, path: Path) -> Optional[dict]:
        if path not in self._cache:
            try:
                data = ffmpeg.probe(str(path), cmd=self.executable)
                logger.trace(f"Probe data for {path.name}:\n{pformat(data)}")
            except ffmpeg.Error as e:
                stderr = e.stderr.decode("utf-8", errors="replace") if e.stderr else ""
                logger.warning(f"ffprobe failed for {path}: {stderr.strip()}")
                data = None
            self._cache[path] = data
        return self._cache[path]

    @staticmethod
    def _first_stream(data: dict, codec_type: str) -> dict:
        for stream in data.get("streams") or []:
            if stream.get("codec_type") == codec_type:
                return stream
        return {}

    def probe(self, path: Path, field: ProbeField) -> str:
        data = self._probe_data(path)
        if not data:
            return ""
        fmt = data.get("format") or {}
        video = self._first_stream(data, "video")
        audio = self._first_stream(data, "audio")

        if field is ProbeField.CONTAINER:
            format_name = fmt.get("format_name", "")
            return map_ffprobe_container(format_name, path) if format_name else ""
        if field is ProbeField.VIDEO_CODEC:
            codec_name = video.get("codec_name", "")
            return map_ffprobe_video_codec(codec_name) if codec_name else ""
        if field is ProbeField.VIDEO_PROFILE:
            return str(video.get("profile", ""))
        if field is ProbeField.AUDIO_CODEC:
            codec_name = audio.get("codec_name", "")
            return map_ffprobe_audio_codec(codec_name, audio.get("profile", "")) if codec_name else ""
        if field is ProbeField.AUDIO_CHANNELS:
            channels = audio.get("channels")
            return str(channels) if channels is not None else ""
        if field is ProbeField.DURATION:
            return format_duration(fmt.get("duration"))
        return ""


def read_probe_result(tool: ProbeTool, path: Path) -> ProbeResult:
    """
    Asks `tool` for every field and freezes the answers into a `ProbeResult`.

    The channel count is parsed here; absent or unparsable values fall back
    to the multichannel default.
    """
    values = {field: tool.probe(path, field) for field in ProbeField}
    logger.debug(f"Probe values for {path.name}: {[(f.value, v) for f, v in values.items()]}")
    return ProbeResult(
        path=path,
        container=values[ProbeField.CONTAINER],
        video_codec=values[ProbeField.VIDEO_CODEC],
        video_profile=values[ProbeField.VIDEO_PROFILE],
        audio_codec=values[ProbeField.AUDIO_CODEC],
        audio_channels=parse_channel_count(values[ProbeField.AUDIO_CHANNELS]),
        duration=values[ProbeField.DURATION],
    )


def create_probe_tool(probe_tool: str, executable: str) -> ProbeTool:
    """Instantiates the backend named in the configuration."""
    if probe_tool == PROBE_TOOL_FFPROBE:
        return FFprobeProbe(executable)
    return MediaInfoProbe(executable)
