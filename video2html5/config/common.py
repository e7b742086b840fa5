"""
Common configuration settings used throughout the application.

This module contains globally shared constants: the logger format, the
location and layout of the per-user config directory, the success-policy
names, and the general (container) format lists. The values here are only
defaults. They are read once by `config.loader`, merged with the user's
`config.yaml`, and frozen into a `Configuration` object that is passed to
every component. Nothing else in the application reads this module at
runtime.
"""
from pathlib import Path


# --- Logging Configuration ---

# The format string for the Loguru logger. Timestamp, level, source location
# and the message itself.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVEL_CHOICES = ("DEBUG", "INFO", "WARNING", "ERROR")


# --- Config Directory Layout ---

# The per-user directory holding the optional config file, the ledger of
# processed files and the error log. Overridable with `--config`.
DEFAULT_CONFIG_DIRECTORY = Path("~/.video2HTML5")

# Optional YAML file inside the config directory. Any key present overrides
# the matching built-in default.
CONFIG_FILE_NAME = "config.yaml"

# The ledger: one absolute path per line, append-only.
PROCESSED_FILES_NAME = "processed_files"

# Plain-text log of failed conversions (command, return code, stderr).
ERROR_LOG_FILE_NAME = "error.txt"


# --- Success Policy ---
# What happens to the original file after a successful conversion.

ON_SUCCESS_ARCHIVE = "archive"  # Original renamed to `<stem>.bak`.
ON_SUCCESS_DELETE = "delete"  # Original removed.
ON_SUCCESS_KEEP = "keep"  # Original untouched, output saved next to it.

# Older config files spell the archive policy `bak`.
ON_SUCCESS_ALIASES = {"bak": ON_SUCCESS_ARCHIVE}

DEFAULT_ON_SUCCESS = ON_SUCCESS_ARCHIVE

# Suffix used for the archived original.
BACKUP_SUFFIX = ".bak"

# Infix of the output file written under the `keep` policy:
# `movie.avi` -> `movie.avi-chromecast.mkv`.
KEEP_OUTPUT_INFIX = "-chromecast"


# --- General (Container) Formats ---
# Names as reported by `mediainfo --Inform="General;%Format%"`.

SUPPORTED_GFORMATS = ("MPEG-4", "Matroska", "WebM", "dash")
UNSUPPORTED_GFORMATS = ("BDAV", "AVI", "Flash Video", "DivX", "RealMedia", "MPEG-PS")

# Container used when a file has to be re-muxed and no `--mkv`/`--mp4`
# override was given.
DEFAULT_GFORMAT = "mkv"

# Container overrides accepted on the command line.
OVERRIDE_GFORMATS = ("mkv", "mp4")


# --- External Tools ---

PROBE_TOOL_MEDIAINFO = "mediainfo"
PROBE_TOOL_FFPROBE = "ffprobe"
PROBE_TOOLS = (PROBE_TOOL_MEDIAINFO, PROBE_TOOL_FFPROBE)
DEFAULT_PROBE_TOOL = PROBE_TOOL_MEDIAINFO

# Encoder binaries in lookup order. `avconv` is accepted for old
# installations that never moved to ffmpeg.
ENCODER_EXECUTABLES = ("avconv", "ffmpeg")
