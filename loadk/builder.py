"""
DUMP stream builder

Produces well-formed DUMP_II record streams. Used to create fixtures and
sample dumps; the output reads back through DumpReader/DumpParser.
"""

from pathlib import Path
from typing import List, Optional, Union

from loadk import constants
from loadk.entry_types import DIRECTORY_ENTRY_TYPE, LINK_ENTRY_TYPE, TEXT_ENTRY_TYPE
from loadk.models import DataHeader, RecordHeader, RecordType, StartOfDump

# Bytes of file data carried by each data block written by file()
DEFAULT_DATA_BLOCK_SIZE = 2048


class DumpBuilder:
    """
    Accumulates records into a dump image.

    Methods return the builder so calls can be chained:

        dump = (DumpBuilder().start()
                .directory("A")
                .file("B", b"HELLO")
                .end_block()
                .end()
                .to_bytes())
    """

    def __init__(self):
        self.parts: List[bytes] = []

    def record(self, record_type: Union[RecordType, int], payload: bytes = b"",
               length: Optional[int] = None) -> "DumpBuilder":
        """
        Append a raw record.

        Args:
            record_type: RecordType or raw type code
            payload: Bytes following the header
            length: Length to declare in the header (default: len(payload))
        """
        if length is None:
            length = len(payload)
        code = int(record_type)
        header = RecordHeader(record_type=RecordType.from_code(code), length=length, type_code=code)
        self.parts.append(header.to_bytes() + payload)
        return self

    def start(self, revision: int = 16, year: int = 1995, month: int = 6, day: int = 14,
              hours: int = 10, minutes: int = 30, seconds: int = 0) -> "DumpBuilder":
        sod = StartOfDump(
            revision=revision,
            seconds=seconds,
            minutes=minutes,
            hours=hours,
            day=day,
            month=month,
            year=year,
        )
        return self.record(RecordType.START, sod.to_bytes())

    def fsb(self, entry_type: int, size: int = 32) -> "DumpBuilder":
        """Append a File Status Block whose second byte is entry_type."""
        if size <= constants.FSB_ENTRY_TYPE_OFFSET:
            raise ValueError(f"FSB size {size} cannot hold an entry type")
        blob = bytearray(size)
        blob[constants.FSB_ENTRY_TYPE_OFFSET] = entry_type
        return self.record(RecordType.FSB, bytes(blob))

    def name(self, name: str, pad_to: Optional[int] = None) -> "DumpBuilder":
        """Append a NameBlock, NUL-padded to pad_to bytes if given."""
        raw = name.encode(constants.NAME_ENCODING)
        if pad_to is not None:
            raw = raw.ljust(pad_to, b"\x00")
        return self.record(RecordType.NAME_BLOCK, raw)

    def uda(self, payload: bytes) -> "DumpBuilder":
        return self.record(RecordType.UDA, payload)

    def acl(self, text: str) -> "DumpBuilder":
        return self.record(RecordType.ACL, text.encode(constants.NAME_ENCODING) + b"\x00")

    def link(self, target: str) -> "DumpBuilder":
        """Append a Link record holding an AOS/VS style target (':' separated)."""
        return self.record(RecordType.LINK, target.encode(constants.NAME_ENCODING) + b"\x00")

    def start_block(self) -> "DumpBuilder":
        return self.record(RecordType.START_BLOCK)

    def data_block(self, address: int, data: bytes, alignment: int = 0) -> "DumpBuilder":
        """
        Append a DataBlock.

        The header declares the ten byte data header; alignment filler and
        the data itself follow it in the stream.
        """
        data_header = DataHeader(byte_address=address, byte_length=len(data), alignment_count=alignment)
        self.record(RecordType.DATA_BLOCK, data_header.to_bytes())
        self.parts.append(bytes(alignment) + data)
        return self

    def end_block(self) -> "DumpBuilder":
        return self.record(RecordType.END_BLOCK)

    def end(self) -> "DumpBuilder":
        return self.record(RecordType.END)

    # Convenience entries

    def directory(self, name: str, entry_type: int = DIRECTORY_ENTRY_TYPE) -> "DumpBuilder":
        """Open a directory; close it later with end_block()."""
        return self.fsb(entry_type).name(name).start_block()

    def file(self, name: str, data: bytes, entry_type: int = TEXT_ENTRY_TYPE,
             block_size: int = DEFAULT_DATA_BLOCK_SIZE) -> "DumpBuilder":
        """Append a complete file entry, splitting data across data blocks."""
        self.fsb(entry_type).name(name)
        for offset in range(0, len(data), block_size):
            self.data_block(offset, data[offset:offset + block_size])
        return self.end_block()

    def symlink(self, name: str, target: str) -> "DumpBuilder":
        """Append a link entry."""
        return self.fsb(LINK_ENTRY_TYPE).name(name).link(target)

    def to_bytes(self) -> bytes:
        return b"".join(self.parts)

    def write(self, path: Union[str, Path]) -> Path:
        """Write the dump image to a file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.to_bytes())
        return path
