"""
Exceptions raised while reading and restoring a dump
"""

from typing import Optional


class DumpError(Exception):
    """Base class for all dump processing failures."""
    pass


class DumpFormatError(DumpError):
    """The stream is not a valid DUMP_II/DUMP_III record sequence."""
    pass


class UnexpectedEof(DumpError):
    """
    Raised when the byte source ends before a read is satisfied.

    Attributes:
        what: Description of the item being read
        expected: Number of bytes requested
        received: Number of bytes actually available
        offset: Stream offset at which the read started
    """

    def __init__(self, what: str, expected: int, received: int, offset: int = 0):
        self.what = what
        self.expected = expected
        self.received = received
        self.offset = offset
        super().__init__(
            f"Could not read {what} at offset {offset}: "
            f"expected {expected} bytes, got {received}"
        )


class ExtractionError(DumpError):
    """A directory, file or link could not be written to the target filesystem."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


class DumpSourceError(DumpError):
    """The dump file or URL could not be opened."""
    pass
