"""
Command-Line Interface (CLI) setup for video2html5.

This module uses Python's `argparse` to define and parse the command-line
arguments. Usage errors (an unknown option, a `--config` without a
directory, no paths at all) print the usage and exit with status 1.
"""
import argparse
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

from .config.common import DEFAULT_LOG_LEVEL, LOG_LEVEL_CHOICES, OVERRIDE_GFORMATS

DESCRIPTION = (
    "Converts video files so they can be played by HTML5 browsers and Chromecast. "
    "Streams that are already compatible are copied, everything else is re-encoded."
)

EPILOG = (
    "Directories are scanned recursively. Files that are already compatible are "
    "only recorded in the processed_files ledger of the config directory."
)


class Video2Html5ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit status 1."""

    def error(self, message: str) -> NoReturn:
        if message.startswith("unrecognized arguments"):
            message = "Unknown option: " + message.split(":", 1)[1].strip()
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def config_directory(value: str) -> Path:
    if not value:
        raise argparse.ArgumentTypeError("missing config directory")
    return Path(value)


def build_parser() -> Video2Html5ArgumentParser:
    parser = Video2Html5ArgumentParser(
        prog="video2html5",
        description=DESCRIPTION,
        epilog=EPILOG,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        "-h", "-?", "--help", action="help", help="Show this help message and exit."
    )
    for container in OVERRIDE_GFORMATS:
        parser.add_argument(
            f"--{container}", dest="override_container", action="store_const", const=container,
            help=f"Use {container} as the output container. The last of these flags wins.",
        )
    parser.add_argument(
        "--force-vencode", action="store_true", help="Re-encode video even if its codec is supported."
    )
    parser.add_argument(
        "--force-aencode", action="store_true", help="Re-encode audio even if its codec is supported."
    )
    parser.add_argument(
        "--stereo", action="store_true",
        help="Leave audio tracks with more than two channels as they are.",
    )
    parser.add_argument(
        "--delete-on-success", action="store_true",
        help="Delete the original file after a successful conversion.",
    )
    parser.add_argument(
        "--config", type=config_directory, default=None, metavar="DIR",
        help="Config directory holding config.yaml and the ledger (default: ~/.video2HTML5).",
    )
    parser.add_argument(
        "--log-level", type=str, default=DEFAULT_LOG_LEVEL, choices=LOG_LEVEL_CHOICES,
        help="Set the logging level.",
    )
    parser.add_argument("paths", nargs="*", type=Path, metavar="PATH", help="Video files or directories.")
    return parser


def get_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for video2html5.

    Options and paths may be mixed freely. Everything after `--` is a path,
    even if it starts with a dash.

    Args:
        argv: Arguments without the program name. Defaults to `sys.argv[1:]`.

    Returns:
        argparse.Namespace: The parsed arguments.
    """
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        parser.print_help(sys.stderr)
        parser.exit(1)

    # parse_intermixed_args does not stop at "--", so the tail is split off here.
    trailing_paths: List[str] = []
    if "--" in argv:
        split = argv.index("--")
        argv, trailing_paths = argv[:split], argv[split + 1:]

    args = parser.parse_intermixed_args(argv)
    args.paths = list(args.paths or []) + [Path(path) for path in trailing_paths]
    if not args.paths:
        parser.error("no file or directory given")
    return args
