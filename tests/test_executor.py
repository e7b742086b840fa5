"""Tests for TranscodeExecutor success, failure and interrupt handling."""

from pathlib import Path

import pytest

from conftest import FakeEncoder, make_probe_result
from video2html5.domain.exceptions import ConversionFailure
from video2html5.domain.plan import StreamAction, TranscodePlan
from video2html5.services.executor_service import TranscodeExecutor
from video2html5.services.file_state_service import FileStateManager
from video2html5.services.ledger_service import FlatFileLedger
from video2html5.services.logging_service import ErrorLog

ORIGINAL_CONTENT = b"original avi bytes"


@pytest.fixture
def original(video_dir: Path) -> Path:
    path = video_dir / "movie.avi"
    path.write_bytes(ORIGINAL_CONTENT)
    return path


@pytest.fixture
def ledger(config_dir: Path) -> FlatFileLedger:
    return FlatFileLedger(config_dir / "processed_files").open()


@pytest.fixture
def error_log(config_dir: Path) -> ErrorLog:
    return ErrorLog(config_dir / "error.txt")


@pytest.fixture
def remux_plan() -> TranscodePlan:
    return TranscodePlan(container="mkv", video=StreamAction.copy(), audio=StreamAction.encode("libvorbis"))


def make_executor(encoder, ledger, error_log, on_success="archive") -> TranscodeExecutor:
    return TranscodeExecutor(encoder, FileStateManager(on_success), ledger, error_log)


class TestSuccess:
    def test_archive(self, original: Path, ledger, error_log, remux_plan) -> None:
        encoder = FakeEncoder(content=b"new mkv")
        probe = make_probe_result("movie.avi", container="AVI", directory=original.parent)

        result = make_executor(encoder, ledger, error_log).execute(probe, remux_plan)

        assert result.output == original.parent / "movie.mkv"
        assert result.output.read_bytes() == b"new mkv"
        assert (original.parent / "movie.bak").read_bytes() == ORIGINAL_CONTENT
        assert not original.exists()
        assert sorted(p.name for p in original.parent.iterdir()) == ["movie.bak", "movie.mkv"]
        assert ledger.contains(result.output)

    def test_output_gone_before_size_is_read(self, original: Path, config_dir: Path, error_log, remux_plan) -> None:
        class VanishingLedger(FlatFileLedger):
            def record(self, path: Path) -> bool:
                added = super().record(path)
                path.unlink()
                return added

        ledger = VanishingLedger(config_dir / "processed_files").open()
        probe = make_probe_result("movie.avi", container="AVI", directory=original.parent)

        result = make_executor(FakeEncoder(), ledger, error_log).execute(probe, remux_plan)

        assert ledger.contains(result.output)

    def test_encoder_receives_plan(self, original: Path, ledger, error_log, remux_plan) -> None:
        encoder = FakeEncoder()
        probe = make_probe_result("movie.avi", container="AVI", directory=original.parent)

        make_executor(encoder, ledger, error_log, on_success="keep").execute(probe, remux_plan)

        (spec,) = encoder.specs
        assert spec.source == original
        assert spec.output == original.parent / "movie.avi.mkv"
        assert spec.video.is_copy
        assert spec.audio.codec == "libvorbis"

    def test_kept_container_uses_current_extension(self, video_dir: Path, ledger, error_log) -> None:
        original = video_dir / "show.MKV"
        original.write_bytes(ORIGINAL_CONTENT)
        plan = TranscodePlan(container=None, video=StreamAction.encode("libvpx"))
        encoder = FakeEncoder()

        result = make_executor(encoder, ledger, error_log).execute(
            make_probe_result("show.MKV", video="HEVC", directory=video_dir), plan
        )

        assert encoder.specs[0].output == video_dir / "show.MKV.MKV"
        assert result.output == original
        assert (video_dir / "show.bak").read_bytes() == ORIGINAL_CONTENT


class TestFailure:
    def test_nonzero_exit_leaves_original_untouched(self, original: Path, ledger, error_log, remux_plan) -> None:
        probe = make_probe_result("movie.avi", container="AVI", directory=original.parent)

        with pytest.raises(ConversionFailure) as exc_info:
            make_executor(FakeEncoder(return_code=1), ledger, error_log).execute(probe, remux_plan)

        assert exc_info.value.return_code == 1
        assert original.read_bytes() == ORIGINAL_CONTENT
        assert sorted(p.name for p in original.parent.iterdir()) == ["movie.avi"]
        assert len(ledger) == 0

    def test_failure_is_written_to_error_log(self, original: Path, ledger, error_log, remux_plan) -> None:
        probe = make_probe_result("movie.avi", container="AVI", directory=original.parent)

        with pytest.raises(ConversionFailure):
            make_executor(FakeEncoder(return_code=1), ledger, error_log).execute(probe, remux_plan)

        report = error_log.log_file_path.read_text(encoding="utf-8")
        assert str(original) in report
        assert "Return code: 1" in report
        assert "boom" in report

    def test_missing_output_after_success(self, original: Path, ledger, error_log, remux_plan) -> None:
        class SilentEncoder(FakeEncoder):
            def encode(self, spec):
                status = super().encode(spec)
                spec.output.unlink()
                return status

        probe = make_probe_result("movie.avi", container="AVI", directory=original.parent)
        with pytest.raises(ConversionFailure):
            make_executor(SilentEncoder(), ledger, error_log).execute(probe, remux_plan)

        assert original.read_bytes() == ORIGINAL_CONTENT
        assert sorted(p.name for p in original.parent.iterdir()) == ["movie.avi"]


    def test_taken_destination_purges_output(self, original: Path, ledger, error_log, remux_plan) -> None:
        existing = original.parent / "movie.mkv"
        existing.write_bytes(b"someone else's mkv")
        probe = make_probe_result("movie.avi", container="AVI", directory=original.parent)

        with pytest.raises(ConversionFailure):
            make_executor(FakeEncoder(), ledger, error_log).execute(probe, remux_plan)

        assert original.read_bytes() == ORIGINAL_CONTENT
        assert existing.read_bytes() == b"someone else's mkv"
        assert sorted(p.name for p in original.parent.iterdir()) == ["movie.avi", "movie.mkv"]
        assert "already exists" in error_log.log_file_path.read_text(encoding="utf-8")
        assert len(ledger) == 0


class TestInterrupt:
    def test_interrupt_purges_partial_output_and_propagates(self, original: Path, ledger, error_log, remux_plan) -> None:
        probe = make_probe_result("movie.avi", container="AVI", directory=original.parent)

        with pytest.raises(KeyboardInterrupt):
            make_executor(FakeEncoder(interrupt=True), ledger, error_log).execute(probe, remux_plan)

        assert original.read_bytes() == ORIGINAL_CONTENT
        assert sorted(p.name for p in original.parent.iterdir()) == ["movie.avi"]
        assert len(ledger) == 0
