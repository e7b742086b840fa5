"""
Tri-state compatibility classification.

Every probed container or codec name is looked up in its allow/deny pair.
A value in the supported list plays as-is, a value in the unsupported list
needs conversion, and a value in neither list stops the run: the operator
has to decide which list it belongs to. Names are compared exactly; only
file extensions are case-insensitive.
"""
from typing import Iterable

from loguru import logger

from ..config.models import CodecList
from ..domain.exceptions import UnknownCodecError
from ..domain.plan import Verdict


def classify(value: str, supported: Iterable[str], unsupported: Iterable[str], kind: str = "codec") -> Verdict:
    """
    Classifies one probed value.

    Args:
        value: The name exactly as the probe tool reported it.
        supported: Names that play as-is.
        unsupported: Names that must be converted.
        kind: Used in the error message ("general", "video", "audio").

    Returns:
        `Verdict.SUPPORTED` or `Verdict.UNSUPPORTED`.

    Raises:
        UnknownCodecError: If `value` is in neither list.
    """
    if value in supported:
        return Verdict.SUPPORTED
    if value in unsupported:
        return Verdict.UNSUPPORTED
    logger.error(f"'{value}' is an unknown {kind} format.")
    raise UnknownCodecError(value, kind)


def classify_with(value: str, codec_list: CodecList) -> Verdict:
    """Classifies `value` against a registry pair."""
    return classify(value, codec_list.supported, codec_list.unsupported, kind=codec_list.kind)


def is_supported_extension(extension: str, extensions: Iterable[str]) -> bool:
    """
    Checks a file extension against the video extension list.

    The extension is lower-cased (and a leading dot dropped) before lookup,
    so "MKV", ".mkv" and "mkv" behave the same.
    """
    return extension.lower().lstrip(".") in extensions
