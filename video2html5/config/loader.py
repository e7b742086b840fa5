"""
Builds the run's `Configuration`.

The config directory is prepared first (created if missing, checked for
being a writable directory). If it holds a `config.yaml`, that file is read
with `yaml.safe_load` and every key it sets replaces the matching built-in
default from `config.common`, `config.video` and `config.audio`. Finally the
command-line flags are layered on top. Any problem here is a
`ConfigurationError` and ends the run.
"""
import os
import shlex
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml
from loguru import logger

from ..domain.exceptions import ConfigDirectoryError, ConfigFileError
from .audio import (
    DEFAULT_ACODEC,
    DEFAULT_ACODEC_OPTS,
    SUPPORTED_ACODECS,
    UNSUPPORTED_ACODECS,
)
from .common import (
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_DIRECTORY,
    DEFAULT_GFORMAT,
    DEFAULT_ON_SUCCESS,
    DEFAULT_PROBE_TOOL,
    ON_SUCCESS_ALIASES,
    ON_SUCCESS_ARCHIVE,
    ON_SUCCESS_DELETE,
    ON_SUCCESS_KEEP,
    PROBE_TOOLS,
    SUPPORTED_GFORMATS,
    UNSUPPORTED_GFORMATS,
)
from .models import CodecList, Configuration, EncoderDefaults, Registry, RunFlags
from .video import (
    DEFAULT_VCODEC,
    DEFAULT_VCODEC_OPTS,
    SUPPORTED_VCODECS,
    UNSUPPORTED_VCODECS,
    VIDEO_EXTENSIONS,
)

KNOWN_KEYS = {
    "extensions",
    "containers",
    "video_codecs",
    "audio_codecs",
    "on_success",
    "defaults",
    "tools",
    "skip_processed",
}

ON_SUCCESS_POLICIES = (ON_SUCCESS_ARCHIVE, ON_SUCCESS_DELETE, ON_SUCCESS_KEEP)


def prepare_config_directory(config_dir: Optional[Path] = None) -> Path:
    """
    Makes sure the config directory exists, is a directory, and is writable.

    Args:
        config_dir: Directory to use. Defaults to `~/.video2HTML5`.

    Returns:
        The absolute, user-expanded directory path.

    Raises:
        ConfigDirectoryError: If any of the checks fails.
    """
    directory = Path(config_dir or DEFAULT_CONFIG_DIRECTORY).expanduser()
    if not directory.exists():
        try:
            directory.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Created config directory {directory}")
        except OSError as e:
            raise ConfigDirectoryError(
                f"Config directory {directory} does not exist and could not be created: {e}"
            ) from e
    if not directory.is_dir():
        raise ConfigDirectoryError(f"Supplied config directory {directory} is not a directory.")
    if not os.access(directory, os.W_OK):
        raise ConfigDirectoryError(f"Config directory {directory} is not writeable.")
    return directory.resolve()


def read_config_file(config_dir: Path) -> Dict[str, Any]:
    """
    Loads `config.yaml` from the config directory, if there is one.

    Returns:
        The parsed mapping, or an empty dict when the file is absent or empty.

    Raises:
        ConfigFileError: If the file cannot be read or is not a YAML mapping.
    """
    config_path = config_dir / CONFIG_FILE_NAME
    if not config_path.is_file():
        logger.debug(f"No config file at '{config_path}'. Using built-in defaults.")
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigFileError(f"Could not load or parse '{config_path}': {e}") from e

    if user_config is None:
        return {}
    if not isinstance(user_config, dict):
        raise ConfigFileError(f"'{config_path}' must contain a mapping at the top level.")

    for key in sorted(set(user_config) - KNOWN_KEYS):
        logger.warning(f"Ignoring unknown key '{key}' in {config_path}")
    logger.info(f"Loaded configuration from {config_path}")
    return user_config


def split_options(value: Any, key: str) -> Tuple[str, ...]:
    """Turns an options value (shell-style string or list) into argv tokens."""
    if value is None:
        return ()
    if isinstance(value, str):
        try:
            return tuple(shlex.split(value))
        except ValueError as e:
            raise ConfigFileError(f"Cannot split '{key}' value {value!r}: {e}") from e
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    raise ConfigFileError(f"'{key}' must be a string or a list, got {type(value).__name__}.")


def _string_set(value: Any, key: str) -> frozenset:
    if not isinstance(value, (list, tuple)):
        raise ConfigFileError(f"'{key}' must be a list, got {type(value).__name__}.")
    return frozenset(str(v) for v in value)


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = raw.get(key) or {}
    if not isinstance(section, dict):
        raise ConfigFileError(f"'{key}' must be a mapping, got {type(section).__name__}.")
    return section


def _codec_list(
    raw: Dict[str, Any], key: str, kind: str,
    supported: Iterable[str], unsupported: Iterable[str],
) -> CodecList:
    section = _section(raw, key)
    codec_list = CodecList(
        kind=kind,
        supported=_string_set(section.get("supported", list(supported)), f"{key}.supported"),
        unsupported=_string_set(section.get("unsupported", list(unsupported)), f"{key}.unsupported"),
    )
    overlap = codec_list.overlap()
    if overlap:
        raise ConfigFileError(
            f"'{key}' lists {sorted(overlap)} as both supported and unsupported."
        )
    return codec_list


def build_registry(raw: Dict[str, Any]) -> Registry:
    extensions = _string_set(raw.get("extensions", list(VIDEO_EXTENSIONS)), "extensions")
    return Registry(
        extensions=frozenset(ext.lower().lstrip(".") for ext in extensions),
        containers=_codec_list(raw, "containers", "general", SUPPORTED_GFORMATS, UNSUPPORTED_GFORMATS),
        video_codecs=_codec_list(raw, "video_codecs", "video", SUPPORTED_VCODECS, UNSUPPORTED_VCODECS),
        audio_codecs=_codec_list(raw, "audio_codecs", "audio", SUPPORTED_ACODECS, UNSUPPORTED_ACODECS),
    )


def build_defaults(raw: Dict[str, Any]) -> EncoderDefaults:
    section = _section(raw, "defaults")
    return EncoderDefaults(
        container=str(section.get("container", DEFAULT_GFORMAT)).lower().lstrip("."),
        video_codec=str(section.get("video_codec", DEFAULT_VCODEC)),
        video_options=split_options(section.get("video_options", DEFAULT_VCODEC_OPTS), "defaults.video_options"),
        audio_codec=str(section.get("audio_codec", DEFAULT_ACODEC)),
        audio_options=split_options(section.get("audio_options", DEFAULT_ACODEC_OPTS), "defaults.audio_options"),
    )


def normalize_on_success(value: Any) -> str:
    policy = str(value).strip().lower()
    policy = ON_SUCCESS_ALIASES.get(policy, policy)
    if policy not in ON_SUCCESS_POLICIES:
        raise ConfigFileError(
            f"'on_success' must be one of {', '.join(ON_SUCCESS_POLICIES)}; got {value!r}."
        )
    return policy


def build_configuration(
    config_dir: Path,
    raw: Optional[Dict[str, Any]] = None,
    flags: Optional[RunFlags] = None,
    delete_on_success: bool = False,
) -> Configuration:
    """
    Combines defaults, the parsed config file and the run flags.

    Args:
        config_dir: Prepared config directory.
        raw: Parsed `config.yaml` content (may be empty).
        flags: Command-line switches.
        delete_on_success: `--delete-on-success`; wins over the file's `on_success`.

    Returns:
        The frozen `Configuration`.
    """
    raw = raw or {}
    tools = _section(raw, "tools")

    probe_tool = str(tools.get("probe", DEFAULT_PROBE_TOOL)).lower()
    if probe_tool not in PROBE_TOOLS:
        raise ConfigFileError(f"'tools.probe' must be one of {', '.join(PROBE_TOOLS)}; got {probe_tool!r}.")

    ffmpeg_dir = tools.get("ffmpeg_dir")
    on_success = ON_SUCCESS_DELETE if delete_on_success else normalize_on_success(
        raw.get("on_success", DEFAULT_ON_SUCCESS)
    )

    return Configuration(
        config_dir=config_dir,
        registry=build_registry(raw),
        defaults=build_defaults(raw),
        flags=flags or RunFlags(),
        on_success=on_success,
        probe_tool=probe_tool,
        ffmpeg_dir=Path(ffmpeg_dir).expanduser() if ffmpeg_dir else None,
        skip_processed=bool(raw.get("skip_processed", False)),
    )


def load_configuration(args: Any) -> Configuration:
    """
    Builds the configuration for a run from parsed command-line arguments.

    Args:
        args: The `argparse.Namespace` produced by `cli.get_args`.
    """
    config_dir = prepare_config_directory(getattr(args, "config", None))
    flags = RunFlags(
        force_video_encode=getattr(args, "force_vencode", False),
        force_audio_encode=getattr(args, "force_aencode", False),
        downmix_stereo=getattr(args, "stereo", False),
        override_container=getattr(args, "override_container", None),
    )
    configuration = build_configuration(
        config_dir,
        read_config_file(config_dir),
        flags=flags,
        delete_on_success=getattr(args, "delete_on_success", False),
    )
    logger.debug(f"Effective configuration: {configuration}")
    return configuration
