"""
Sequential reader for DUMP record streams
The reader is the only consumer of the byte source; it never seeks.
"""

import logging
from typing import BinaryIO, Iterator

from loadk import constants
from loadk.errors import UnexpectedEof
from loadk.models import (
    DataHeader, Record, RecordHeader, StartOfDump, decode_dword, decode_word,
)


class DumpReader:
    """
    Reads records from a forward-only binary stream.

    Every read is exact: a short read raises UnexpectedEof, there is no
    partial-record recovery.
    """

    def __init__(self, stream: BinaryIO):
        """
        Initialize the reader.

        Args:
            stream: Readable binary stream, owned by the caller
        """
        self.stream = stream
        self.offset = 0
        self.logger = logging.getLogger("loadk.reader")

    def read_exact(self, size: int, what: str) -> bytes:
        """
        Read exactly size bytes.

        Args:
            size: Number of bytes wanted
            what: Description used in the error message

        Raises:
            UnexpectedEof: If the stream ends first
        """
        if size == 0:
            return b""
        data = self.stream.read(size)
        # Raw sockets and pipes may return short reads before EOF
        while data and len(data) < size:
            more = self.stream.read(size - len(data))
            if not more:
                break
            data += more
        if len(data) < size:
            raise UnexpectedEof(what, size, len(data), self.offset)
        self.offset += size
        return data

    def iter_chunks(self, size: int, what: str,
                    chunk_size: int = constants.HTTP_CHUNK_SIZE) -> Iterator[bytes]:
        """Yield exactly size bytes from the stream in pieces of at most chunk_size."""
        remaining = size
        while remaining > 0:
            piece = self.read_exact(min(chunk_size, remaining), what)
            remaining -= len(piece)
            yield piece

    def skip(self, size: int, what: str) -> None:
        """Consume and discard size bytes."""
        for _ in self.iter_chunks(size, what):
            pass

    def read_word(self, what: str = "DG word") -> int:
        return decode_word(self.read_exact(constants.WORD_SIZE, what))

    def read_dword(self, what: str = "DG double word") -> int:
        return decode_dword(self.read_exact(constants.DWORD_SIZE, what))

    def read_header(self) -> RecordHeader:
        """Read and decode the next two byte record header."""
        header = RecordHeader.from_bytes(self.read_exact(constants.HEADER_SIZE, "header"))
        self.logger.debug(
            f"Found block of type: {header.record_type.name} "
            f"(code {header.type_code}) length: {header.length}"
        )
        return header

    def read_payload(self, header: RecordHeader, what: str) -> bytes:
        """Read the payload declared by a record header."""
        return self.read_exact(header.length, what)

    def read_record(self) -> Record:
        """
        Read the next header and its declared payload.

        Suitable for the self-contained record types (FSB, name, UDA, ACL,
        link). Start, data and block markers have their own layouts.
        """
        header = self.read_header()
        return Record(header=header, payload=self.read_payload(header, header.record_type.name))

    def read_start_of_dump(self) -> StartOfDump:
        """Read the seven word SOD body that follows a START header."""
        return StartOfDump.from_bytes(self.read_exact(constants.SOD_SIZE, "Start-Of-Dump"))

    def read_data_header(self) -> DataHeader:
        """Read the address/length/alignment prefix of a data block."""
        return DataHeader(
            byte_address=self.read_dword("byte address"),
            byte_length=self.read_dword("byte length"),
            alignment_count=self.read_word("alignment count"),
        )
