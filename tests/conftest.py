"""Shared test fixtures for video2html5."""

from pathlib import Path
from typing import Dict, List, Optional

import pytest

from video2html5.config.loader import build_configuration, build_defaults, build_registry
from video2html5.config.models import Configuration, EncoderDefaults, Registry, RunFlags
from video2html5.domain.media import ProbeResult
from video2html5.services.encoding_service import EncodeSpec, ExitStatus
from video2html5.services.probe_service import ProbeField


class FakeProbe:
    """ProbeTool answering from a table keyed by file name."""

    def __init__(self, table: Optional[Dict[str, Dict[ProbeField, str]]] = None):
        self.table = table or {}
        self.calls: List[Path] = []

    def set(self, name: str, container: str, video: str = "", audio: str = "", channels: str = "2", **extra: str):
        self.table[name] = {
            ProbeField.CONTAINER: container,
            ProbeField.VIDEO_CODEC: video,
            ProbeField.AUDIO_CODEC: audio,
            ProbeField.AUDIO_CHANNELS: channels,
            ProbeField.VIDEO_PROFILE: extra.get("profile", ""),
            ProbeField.DURATION: extra.get("duration", ""),
        }

    def probe(self, path: Path, field: ProbeField) -> str:
        self.calls.append(path)
        return self.table.get(path.name, {}).get(field, "")


class FakeEncoder:
    """
    EncoderTool that writes `content` to the output instead of running ffmpeg.

    With a non-zero `return_code` it still leaves a partial output behind,
    like a real encoder that died halfway.
    """

    def __init__(self, return_code: int = 0, content: bytes = b"converted", interrupt: bool = False):
        self.return_code = return_code
        self.content = content
        self.interrupt = interrupt
        self.specs: List[EncodeSpec] = []

    def encode(self, spec: EncodeSpec) -> ExitStatus:
        self.specs.append(spec)
        spec.output.write_bytes(self.content[: len(self.content) // 2] if self.return_code else self.content)
        if self.interrupt:
            raise KeyboardInterrupt
        return ExitStatus(self.return_code, stderr="" if self.return_code == 0 else "boom", command="fake")


def make_probe_result(
    name: str = "movie.mkv",
    container: str = "Matroska",
    video: str = "AVC",
    audio: str = "AAC LC",
    channels: int = 2,
    directory: Path = Path("/videos"),
) -> ProbeResult:
    return ProbeResult(
        path=directory / name,
        container=container,
        video_codec=video,
        audio_codec=audio,
        audio_channels=channels,
    )


@pytest.fixture
def registry() -> Registry:
    """The built-in allow/deny lists."""
    return build_registry({})


@pytest.fixture
def defaults() -> EncoderDefaults:
    """The built-in encoder targets."""
    return build_defaults({})


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "config"
    directory.mkdir()
    return directory


@pytest.fixture
def video_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "videos"
    directory.mkdir()
    return directory


@pytest.fixture
def make_configuration(config_dir: Path):
    """Factory for configurations based on the built-in defaults."""

    def _make(raw: Optional[dict] = None, flags: Optional[RunFlags] = None, **kwargs) -> Configuration:
        return build_configuration(config_dir, raw or {}, flags=flags, **kwargs)

    return _make


@pytest.fixture
def fake_probe() -> FakeProbe:
    return FakeProbe()


@pytest.fixture
def fake_encoder() -> FakeEncoder:
    return FakeEncoder()
