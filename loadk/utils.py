"""
Utility functions for dump restores: terminal symbols, sizes and path handling
"""

import os
import sys
from typing import Tuple

from loadk import constants


# Status markers for CLI output: (unicode, ascii)
STATUS_MARKERS = {
    "check": ("✓", "[OK]"),
    "error": ("✗", "[ERROR]"),
    "warning": ("⚠", "[WARNING]"),
}

# Set by setup_symbols
SYMBOL_CHECK = STATUS_MARKERS["check"][1]
SYMBOL_ERROR = STATUS_MARKERS["error"][1]
SYMBOL_WARNING = STATUS_MARKERS["warning"][1]


def can_print_markers(stream=None) -> bool:
    """Whether every unicode status marker can be encoded for the stream (default: stdout)."""
    encoding = getattr(stream if stream is not None else sys.stdout, "encoding", None)
    if not encoding:
        return False
    try:
        "".join(unicode for unicode, _ in STATUS_MARKERS.values()).encode(encoding)
    except (UnicodeEncodeError, LookupError):
        return False
    return True


def setup_symbols(force_ascii=False, stream=None):
    """Pick unicode or ASCII status markers for the output stream; LOADK_ASCII=1 forces ASCII."""
    global SYMBOL_CHECK, SYMBOL_ERROR, SYMBOL_WARNING

    ascii_only = force_ascii or os.environ.get(constants.ASCII_ENV_VAR, "") == "1"
    index = 1 if ascii_only or not can_print_markers(stream) else 0
    SYMBOL_CHECK = STATUS_MARKERS["check"][index]
    SYMBOL_ERROR = STATUS_MARKERS["error"][index]
    SYMBOL_WARNING = STATUS_MARKERS["warning"][index]


def get_readable_size(size_bytes: int) -> Tuple[float, str]:
    """
    Convert bytes to human-readable size.

    Args:
        size_bytes: Size in bytes

    Returns:
        Tuple of (size value, unit string)
    """
    power = 1024
    n = 0
    labels = {0: "B", 1: "KB", 2: "MB", 3: "GB", 4: "TB"}

    size = float(size_bytes)
    while size > power and n < 4:
        size /= power
        n += 1

    return round(size, 2), labels[n]


def format_size(size_bytes: int) -> str:
    size, unit = get_readable_size(size_bytes)
    return f"{size} {unit}"


def join_working_path(working_dir: str, name: str) -> str:
    """
    Append a name to the working directory.

    An empty working directory yields the bare name.
    """
    if not working_dir:
        return name
    return os.path.join(working_dir, name)


def parent_dir(path: str) -> str:
    """Drop the last segment of a working directory path."""
    return os.path.dirname(path)


def normalize_base_dir(path: str) -> str:
    """Normalize a base directory so popped paths compare equal to it."""
    if not path:
        return ""
    return os.path.normpath(path)


def convert_link_target(raw: bytes) -> str:
    """
    Convert an AOS/VS link target to a local pathname.

    Trailing NULs are dropped, ':' separators become the platform
    separator and the result is upper-cased.

    Args:
        raw: Link record payload

    Returns:
        Local form of the link target
    """
    target = raw.rstrip(b"\x00").decode(constants.NAME_ENCODING, errors="replace")
    return target.replace(constants.AOSVS_SEPARATOR, os.sep).upper()
