"""
Tests for DumpReader
"""

import io

import pytest

from loadk.builder import DumpBuilder
from loadk.errors import UnexpectedEof
from loadk.models import RecordType
from loadk.reader import DumpReader


class TrickleStream(io.RawIOBase):
    """Returns at most one byte per read, like a slow pipe."""

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def readable(self):
        return True

    def read(self, size=-1):
        if self.pos >= len(self.data):
            return b""
        piece = self.data[self.pos:self.pos + 1]
        self.pos += 1
        return piece


def test_read_exact_and_offset():
    reader = DumpReader(io.BytesIO(b"\x00\x01\x02\x03\x04\x05"))
    assert reader.read_exact(2, "first") == b"\x00\x01"
    assert reader.offset == 2
    assert reader.read_word() == 0x0203
    assert reader.offset == 4


def test_short_read_raises():
    reader = DumpReader(io.BytesIO(b"\x00\x01\x02"))
    reader.read_exact(2, "header")
    with pytest.raises(UnexpectedEof) as excinfo:
        reader.read_dword("byte address")
    assert excinfo.value.expected == 4
    assert excinfo.value.received == 1
    assert excinfo.value.offset == 2
    assert "byte address" in str(excinfo.value)


def test_empty_stream_has_no_header():
    with pytest.raises(UnexpectedEof):
        DumpReader(io.BytesIO(b"")).read_header()


def test_trickling_stream_is_reassembled():
    reader = DumpReader(TrickleStream(b"\xde\xad\xbe\xef\x01"))
    assert reader.read_dword() == 0xDEADBEEF
    assert reader.read_exact(1, "tail") == b"\x01"


def test_read_record_takes_declared_payload():
    data = DumpBuilder().fsb(68, size=8).name("MYFILE").to_bytes()
    reader = DumpReader(io.BytesIO(data))

    fsb = reader.read_record()
    assert fsb.record_type is RecordType.FSB
    assert len(fsb.payload) == 8
    assert fsb.payload[1] == 68

    name = reader.read_record()
    assert name.record_type is RecordType.NAME_BLOCK
    assert name.payload == b"MYFILE"
    assert reader.offset == len(data)


def test_truncated_payload():
    data = DumpBuilder().name("MYFILE").to_bytes()[:-2]
    with pytest.raises(UnexpectedEof):
        DumpReader(io.BytesIO(data)).read_record()


def test_start_of_dump_and_data_header():
    data = DumpBuilder().start(revision=17, year=1990).data_block(1024, b"xyz", alignment=1).to_bytes()
    reader = DumpReader(io.BytesIO(data))

    assert reader.read_header().record_type is RecordType.START
    sod = reader.read_start_of_dump()
    assert sod.revision == 17
    assert sod.year == 1990

    assert reader.read_header().record_type is RecordType.DATA_BLOCK
    data_header = reader.read_data_header()
    assert data_header.byte_address == 1024
    assert data_header.byte_length == 3
    assert data_header.alignment_count == 1
    reader.skip(1, "alignment")
    assert b"".join(reader.iter_chunks(3, "data", chunk_size=2)) == b"xyz"


def test_iter_chunks_sizes():
    reader = DumpReader(io.BytesIO(bytes(10)))
    assert [len(chunk) for chunk in reader.iter_chunks(10, "data", chunk_size=4)] == [4, 4, 2]
