"""Tests for configuration loading."""

import os
from argparse import Namespace
from pathlib import Path

import pytest

from video2html5.config.common import ON_SUCCESS_ARCHIVE, ON_SUCCESS_DELETE, ON_SUCCESS_KEEP
from video2html5.config.loader import (
    build_configuration,
    load_configuration,
    prepare_config_directory,
    read_config_file,
    split_options,
)
from video2html5.domain.exceptions import ConfigDirectoryError, ConfigFileError, ConfigurationError


def write_config(config_dir: Path, text: str) -> None:
    (config_dir / "config.yaml").write_text(text, encoding="utf-8")


class TestPrepareConfigDirectory:
    """Tests for prepare_config_directory()."""

    def test_creates_missing_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / ".video2HTML5"
        result = prepare_config_directory(target)
        assert result.is_dir()
        assert result == target.resolve()

    def test_rejects_a_file(self, tmp_path: Path) -> None:
        target = tmp_path / "not_a_dir"
        target.write_text("x")
        with pytest.raises(ConfigDirectoryError):
            prepare_config_directory(target)

    @pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root can write anywhere")
    def test_rejects_read_only_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "readonly"
        target.mkdir()
        target.chmod(0o500)
        try:
            with pytest.raises(ConfigDirectoryError):
                prepare_config_directory(target)
        finally:
            target.chmod(0o700)

    def test_error_is_a_configuration_error(self, tmp_path: Path) -> None:
        target = tmp_path / "file"
        target.write_text("x")
        with pytest.raises(ConfigurationError):
            prepare_config_directory(target)


class TestReadConfigFile:
    """Tests for read_config_file()."""

    def test_missing_file_gives_empty_mapping(self, config_dir: Path) -> None:
        assert read_config_file(config_dir) == {}

    def test_empty_file_gives_empty_mapping(self, config_dir: Path) -> None:
        write_config(config_dir, "")
        assert read_config_file(config_dir) == {}

    def test_malformed_yaml(self, config_dir: Path) -> None:
        write_config(config_dir, "containers: [unclosed\n")
        with pytest.raises(ConfigFileError):
            read_config_file(config_dir)

    def test_top_level_must_be_a_mapping(self, config_dir: Path) -> None:
        write_config(config_dir, "- mkv\n- avi\n")
        with pytest.raises(ConfigFileError):
            read_config_file(config_dir)

    def test_unknown_keys_are_kept_out_of_the_way(self, config_dir: Path) -> None:
        write_config(config_dir, "colour: blue\non_success: keep\n")
        raw = read_config_file(config_dir)
        assert raw["on_success"] == "keep"


class TestSplitOptions:
    def test_string_is_shell_split(self) -> None:
        assert split_options('-b:v 1000k -metadata title="a b"', "x") == ("-b:v", "1000k", "-metadata", "title=a b")

    def test_list_is_taken_as_is(self) -> None:
        assert split_options(["-crf", 30], "x") == ("-crf", "30")

    def test_none_and_empty(self) -> None:
        assert split_options(None, "x") == ()
        assert split_options("", "x") == ()

    def test_unbalanced_quotes(self) -> None:
        with pytest.raises(ConfigFileError):
            split_options('-metadata "title', "x")

    def test_wrong_type(self) -> None:
        with pytest.raises(ConfigFileError):
            split_options(42, "x")


class TestBuildConfiguration:
    """Tests for build_configuration()."""

    def test_defaults(self, config_dir: Path) -> None:
        configuration = build_configuration(config_dir, {})
        assert configuration.on_success == ON_SUCCESS_ARCHIVE
        assert configuration.probe_tool == "mediainfo"
        assert configuration.defaults.container == "mkv"
        assert configuration.defaults.video_codec == "libvpx"
        assert configuration.defaults.audio_codec == "libvorbis"
        assert "Matroska" in configuration.registry.containers.supported
        assert "m2ts" in configuration.registry.extensions
        assert configuration.ledger_path == config_dir / "processed_files"
        assert configuration.error_log_path == config_dir / "error.txt"
        assert configuration.skip_processed is False

    def test_file_values_replace_defaults(self, config_dir: Path) -> None:
        raw = {
            "extensions": ["MKV", ".ts"],
            "video_codecs": {"supported": ["AVC", "HEVC"]},
            "defaults": {"container": "MP4", "video_options": ["-crf", "30"]},
            "tools": {"probe": "ffprobe"},
            "skip_processed": True,
        }
        configuration = build_configuration(config_dir, raw)
        assert configuration.registry.extensions == frozenset({"mkv", "ts"})
        assert "HEVC" in configuration.registry.video_codecs.supported
        # Unsupported list keeps its default when only `supported` is given.
        assert "MPEG-4 Visual" in configuration.registry.video_codecs.unsupported
        assert configuration.defaults.container == "mp4"
        assert configuration.defaults.video_options == ("-crf", "30")
        assert configuration.probe_tool == "ffprobe"
        assert configuration.skip_processed is True

    def test_value_in_both_lists_is_rejected(self, config_dir: Path) -> None:
        raw = {"audio_codecs": {"supported": ["AAC", "DTS"], "unsupported": ["DTS"]}}
        with pytest.raises(ConfigFileError) as exc_info:
            build_configuration(config_dir, raw)
        assert "DTS" in str(exc_info.value)

    @pytest.mark.parametrize(
        "value, expected",
        [("archive", ON_SUCCESS_ARCHIVE), ("bak", ON_SUCCESS_ARCHIVE), ("Delete", ON_SUCCESS_DELETE), ("keep", ON_SUCCESS_KEEP)],
    )
    def test_on_success_values(self, config_dir: Path, value: str, expected: str) -> None:
        assert build_configuration(config_dir, {"on_success": value}).on_success == expected

    def test_invalid_on_success(self, config_dir: Path) -> None:
        with pytest.raises(ConfigFileError):
            build_configuration(config_dir, {"on_success": "shred"})

    def test_delete_on_success_flag_wins(self, config_dir: Path) -> None:
        configuration = build_configuration(config_dir, {"on_success": "keep"}, delete_on_success=True)
        assert configuration.on_success == ON_SUCCESS_DELETE

    def test_invalid_probe_tool(self, config_dir: Path) -> None:
        with pytest.raises(ConfigFileError):
            build_configuration(config_dir, {"tools": {"probe": "exiftool"}})

    def test_list_section_must_be_a_list(self, config_dir: Path) -> None:
        with pytest.raises(ConfigFileError):
            build_configuration(config_dir, {"containers": {"supported": "Matroska"}})

    def test_section_must_be_a_mapping(self, config_dir: Path) -> None:
        with pytest.raises(ConfigFileError):
            build_configuration(config_dir, {"defaults": ["mkv"]})


class TestLoadConfiguration:
    """Tests for load_configuration() with parsed arguments."""

    def test_flags_and_config_file(self, config_dir: Path) -> None:
        write_config(config_dir, "on_success: bak\ndefaults:\n  audio_options: '-b:a 128k'\n")
        args = Namespace(
            config=config_dir,
            force_vencode=True,
            force_aencode=False,
            stereo=True,
            override_container="mp4",
            delete_on_success=False,
        )
        configuration = load_configuration(args)
        assert configuration.config_dir == config_dir.resolve()
        assert configuration.on_success == ON_SUCCESS_ARCHIVE
        assert configuration.defaults.audio_options == ("-b:a", "128k")
        assert configuration.flags.force_video_encode is True
        assert configuration.flags.force_audio_encode is False
        assert configuration.flags.downmix_stereo is True
        assert configuration.flags.override_container == "mp4"
