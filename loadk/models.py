"""
Data models for DUMP records, headers and parse results
Binary layouts are big-endian, matching the 16-bit Data General word order
"""

import enum
import struct
from dataclasses import dataclass, field
from typing import List, Optional

from loadk import constants
from loadk.errors import DumpFormatError


def decode_word(data: bytes) -> int:
    """Decode an unsigned 16-bit DG word, most-significant byte first."""
    if len(data) < constants.WORD_SIZE:
        raise DumpFormatError(f"Word needs {constants.WORD_SIZE} bytes, got {len(data)}")
    return (data[0] << 8) | data[1]


def decode_dword(data: bytes) -> int:
    """Decode an unsigned 32-bit DG double word, most-significant byte first."""
    if len(data) < constants.DWORD_SIZE:
        raise DumpFormatError(f"Double word needs {constants.DWORD_SIZE} bytes, got {len(data)}")
    return struct.unpack(">I", data[:constants.DWORD_SIZE])[0]


def encode_word(value: int) -> bytes:
    """Encode an unsigned 16-bit DG word."""
    return struct.pack(">H", value)


def encode_dword(value: int) -> bytes:
    """Encode an unsigned 32-bit DG double word."""
    return struct.pack(">I", value)


def decode_text(data: bytes) -> str:
    """Decode a NUL-padded ASCII field, dropping the trailing NULs."""
    return data.rstrip(b"\x00").decode(constants.NAME_ENCODING, errors="replace")


class RecordType(enum.IntEnum):
    """Record types found in a dump stream."""
    START = constants.RECORD_START
    FSB = constants.RECORD_FSB
    NAME_BLOCK = constants.RECORD_NAME_BLOCK
    UDA = constants.RECORD_UDA
    ACL = constants.RECORD_ACL
    LINK = constants.RECORD_LINK
    START_BLOCK = constants.RECORD_START_BLOCK
    DATA_BLOCK = constants.RECORD_DATA_BLOCK
    END_BLOCK = constants.RECORD_END_BLOCK
    END = constants.RECORD_END
    UNKNOWN = 99  # any code not listed above

    @classmethod
    def from_code(cls, code: int) -> "RecordType":
        """Map a raw header code to a RecordType, UNKNOWN if unrecognised."""
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN


@dataclass
class RecordHeader:
    """
    Packed two byte record header.

    The first byte carries the type code in its upper six bits and the top
    two bits of the length in its lower two bits; the second byte is
    the low eight bits of the length.

    Attributes:
        record_type: Decoded record type (UNKNOWN for unmapped codes)
        length: Payload length in bytes (0-1023)
        type_code: Raw type code as found in the stream
    """
    record_type: RecordType
    length: int
    type_code: int = -1

    def __post_init__(self):
        if self.type_code < 0:
            self.type_code = int(self.record_type)

    @classmethod
    def from_bytes(cls, data: bytes) -> "RecordHeader":
        """Decode a header from its two byte wire form."""
        if len(data) < constants.HEADER_SIZE:
            raise DumpFormatError(f"Record header needs {constants.HEADER_SIZE} bytes, got {len(data)}")
        code = data[0] >> 2
        length = ((data[0] & 0x03) << 8) | data[1]
        return cls(record_type=RecordType.from_code(code), length=length, type_code=code)

    def to_bytes(self) -> bytes:
        """Encode the header into its two byte wire form."""
        if not 0 <= self.type_code <= constants.MAX_RECORD_TYPE:
            raise ValueError(f"Record type code {self.type_code} does not fit in a header")
        if not 0 <= self.length <= constants.MAX_RECORD_LENGTH:
            raise ValueError(f"Record length {self.length} does not fit in a header")
        return bytes([(self.type_code << 2) | (self.length >> 8), self.length & 0xFF])


@dataclass
class Record:
    """A record header together with its payload."""
    header: RecordHeader
    payload: bytes = b""

    @property
    def record_type(self) -> RecordType:
        return self.header.record_type


@dataclass
class StartOfDump:
    """
    Start-Of-Dump record payload (seven DG words).

    Timestamp fields are raw values; no range checking is done.
    """
    revision: int
    seconds: int
    minutes: int
    hours: int
    day: int
    month: int
    year: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "StartOfDump":
        """Decode a SOD payload."""
        if len(data) < constants.SOD_SIZE:
            raise DumpFormatError(f"Start-Of-Dump record needs {constants.SOD_SIZE} bytes, got {len(data)}")
        return cls(*struct.unpack(">7H", data[:constants.SOD_SIZE]))

    def to_bytes(self) -> bytes:
        """Encode a SOD payload."""
        return struct.pack(
            ">7H",
            self.revision,
            self.seconds,
            self.minutes,
            self.hours,
            self.day,
            self.month,
            self.year,
        )

    @property
    def date_string(self) -> str:
        return f"{self.year}-{self.month}-{self.day}"

    @property
    def time_string(self) -> str:
        return f"{self.hours}:{self.minutes}:{self.seconds}"


@dataclass
class DataHeader:
    """
    Prefix of a DataBlock record.

    Attributes:
        byte_address: Offset of this chunk within the file being restored
        byte_length: Number of data bytes in the chunk
        alignment_count: Filler bytes preceding the data (usually 0 or 1)
    """
    byte_address: int
    byte_length: int
    alignment_count: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> "DataHeader":
        if len(data) < constants.DATA_HEADER_SIZE:
            raise DumpFormatError(f"Data header needs {constants.DATA_HEADER_SIZE} bytes, got {len(data)}")
        address, length, alignment = struct.unpack(">IIH", data[:constants.DATA_HEADER_SIZE])
        return cls(byte_address=address, byte_length=length, alignment_count=alignment)

    def to_bytes(self) -> bytes:
        return struct.pack(">IIH", self.byte_address, self.byte_length, self.alignment_count)


@dataclass
class DumpEntry:
    """
    One named item found in the dump.

    Attributes:
        name: Bare name from the NameBlock
        path: Path of the item relative to (or under) the base directory
        entry_type: Description of the AOS/VS entry type
        is_directory: Whether the entry is a directory
        size: Bytes of file data seen for the entry
        link_target: Converted link target, for links
    """
    name: str
    path: str
    entry_type: str
    is_directory: bool = False
    size: int = 0
    link_target: Optional[str] = None

    @property
    def is_link(self) -> bool:
        return self.link_target is not None


@dataclass
class ParseResult:
    """Outcome of a complete pass over a dump."""
    start: Optional[StartOfDump] = None
    entries: List[DumpEntry] = field(default_factory=list)
    directories: int = 0
    files: int = 0
    links: int = 0
    total_bytes: int = 0
    records: int = 0
    errors: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        """Human-readable tally."""
        parts = [
            f"{self.directories} directories",
            f"{self.files} files",
            f"{self.links} links",
            f"{self.total_bytes:,} bytes",
        ]
        if self.errors:
            parts.append(f"{len(self.errors)} errors ignored")
        return "ParseResult: " + ", ".join(parts)
