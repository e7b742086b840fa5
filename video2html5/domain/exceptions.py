"""
Defines custom exception types for the video2html5 application.

The hierarchy mirrors how the pipeline reacts to a problem:

- `ConfigurationError` and its subclasses are fatal. The entry point catches
  them, logs the message and exits with status 1. Stopping is preferred over
  guessing: a codec that is in neither the supported nor the unsupported list
  must be classified by the operator, not silently defaulted.
- `ConversionFailure` is recovered per file. The partial output is deleted,
  the original is left untouched, and the run moves on to the next file.
- `SkipNotice` is not an error at all. It carries the reason a file was not
  processed so the pipeline can report it.

All custom exceptions inherit from the base `Video2Html5Exception`.
"""
from pathlib import Path
from typing import Optional


class Video2Html5Exception(Exception):
    """Base class for all custom exceptions in the video2html5 application."""

    pass


# --- Fatal configuration problems ---
class ConfigurationError(Video2Html5Exception):
    """Base class for errors that abort the whole run."""

    pass


class UnknownCodecError(ConfigurationError):
    """
    Raised when a probed value is in neither list of its allow/deny pair.

    Attributes:
        value: The offending container or codec name, exactly as probed.
        kind: Which registry pair was consulted ("general", "video", "audio").
    """

    def __init__(self, value: str, kind: str = "codec"):
        self.value = value
        self.kind = kind
        super().__init__(
            f"'{value}' is an unknown {kind} format. "
            f"Please add it to the supported or unsupported list in the configuration."
        )


class MissingToolError(ConfigurationError):
    """Raised at startup when a required external executable cannot be found."""

    def __init__(self, tool: str, hint: str = ""):
        self.tool = tool
        message = f"`{tool}` is not available, please install it"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)


class ConfigDirectoryError(ConfigurationError):
    """Raised when the config directory cannot be created, is not a directory, or is not writable."""

    pass


class ConfigFileError(ConfigurationError):
    """Raised when `config.yaml` cannot be parsed or holds invalid values."""

    pass


class LedgerUnwritableError(ConfigurationError):
    """Raised when the processed-files ledger cannot be created or written."""

    pass


# --- Per-file failures ---
class ConversionFailure(Video2Html5Exception):
    """
    Raised when a single file could not be converted.

    By the time this is raised the partial output has already been removed
    and the original file is in its pre-conversion state.

    Attributes:
        path: The original input file.
        return_code: Exit status of the encoder, or None when the encoder
                     never reported one (failed to start, finalize error).
    """

    def __init__(self, path: Path, return_code: Optional[int] = None, reason: str = ""):
        self.path = path
        self.return_code = return_code
        self.reason = reason
        detail = reason or f"encoder exited with status {return_code}"
        super().__init__(f"failed to convert '{path}': {detail}")


# --- Informational ---
class SkipNotice(Video2Html5Exception):
    """
    Raised when a file is intentionally not processed.

    This is a control flow mechanism, not an error: unsupported extension,
    missing file, a path that is neither file nor directory, and so on.
    """

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
