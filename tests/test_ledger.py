"""Tests for the flat-file ledger."""

import os
from pathlib import Path

import pytest

from video2html5.domain.exceptions import ConfigurationError, LedgerUnwritableError
from video2html5.services.ledger_service import FlatFileLedger


@pytest.fixture
def ledger_path(config_dir: Path) -> Path:
    return config_dir / "processed_files"


class TestOpen:
    def test_creates_missing_file(self, ledger_path: Path) -> None:
        ledger = FlatFileLedger(ledger_path).open()
        assert ledger_path.is_file()
        assert len(ledger) == 0

    def test_creates_missing_directory(self, tmp_path: Path) -> None:
        path = tmp_path / "new" / "processed_files"
        FlatFileLedger(path).open()
        assert path.is_file()

    def test_loads_existing_entries(self, ledger_path: Path, video_dir: Path) -> None:
        movie = (video_dir / "movie.mkv").resolve()
        ledger_path.write_text(f"{movie}\n\n", encoding="utf-8")
        ledger = FlatFileLedger(ledger_path).open()
        assert len(ledger) == 1
        assert ledger.contains(movie)

    def test_directory_in_place_of_ledger(self, ledger_path: Path) -> None:
        ledger_path.mkdir()
        with pytest.raises(LedgerUnwritableError):
            FlatFileLedger(ledger_path).open()

    @pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root can write anywhere")
    def test_read_only_ledger(self, ledger_path: Path) -> None:
        ledger_path.touch()
        ledger_path.chmod(0o400)
        try:
            with pytest.raises(ConfigurationError):
                FlatFileLedger(ledger_path).open()
        finally:
            ledger_path.chmod(0o600)


class TestRecord:
    def test_records_absolute_paths(self, ledger_path: Path, video_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(video_dir)
        ledger = FlatFileLedger(ledger_path).open()

        assert ledger.record(Path("movie.mkv")) is True

        assert ledger_path.read_text(encoding="utf-8") == f"{(video_dir / 'movie.mkv').resolve()}\n"

    def test_duplicates_are_not_appended(self, ledger_path: Path, video_dir: Path) -> None:
        ledger = FlatFileLedger(ledger_path).open()
        movie = video_dir / "movie.mkv"

        assert ledger.record(movie) is True
        assert ledger.record(movie) is False

        assert ledger_path.read_text(encoding="utf-8").splitlines() == [str(movie.resolve())]
        assert len(ledger) == 1

    def test_sees_entries_appended_by_another_run(self, ledger_path: Path, video_dir: Path) -> None:
        first = FlatFileLedger(ledger_path).open()
        second = FlatFileLedger(ledger_path).open()
        movie = video_dir / "movie.mkv"

        assert first.record(movie) is True
        assert second.record(movie) is False
        assert ledger_path.read_text(encoding="utf-8").count(str(movie.resolve())) == 1

    def test_custom_resolver(self, ledger_path: Path) -> None:
        ledger = FlatFileLedger(ledger_path, resolver=lambda p: Path("/library") / p.name).open()
        ledger.record(Path("relative/movie.mkv"))
        assert ledger.contains(Path("elsewhere/movie.mkv"))
        assert ledger_path.read_text(encoding="utf-8") == "/library/movie.mkv\n"

    def test_write_records_each_path(self, ledger_path: Path, video_dir: Path) -> None:
        ledger = FlatFileLedger(ledger_path).open()
        first, second = video_dir / "a.mkv", video_dir / "b.mkv"

        ledger.write(str(first), str(second), str(first))

        assert ledger_path.read_text(encoding="utf-8").splitlines() == [str(first.resolve()), str(second.resolve())]
