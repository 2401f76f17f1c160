#!/usr/bin/env python3
"""
Dump Info

Walks the records of a DUMP_II/DUMP_III file without restoring anything and
prints the Start-Of-Dump details together with per record type counts.

Usage:
    python dump_info.py <dumpfile|url>
"""

import argparse
import logging
import sys
from collections import Counter

from loadk.errors import DumpError
from loadk.models import RecordType
from loadk.reader import DumpReader
from loadk.sources import open_dump_source


def count_records(reader: DumpReader):
    """Count records by type; returns (StartOfDump, Counter, data bytes)."""
    header = reader.read_header()
    if header.record_type is not RecordType.START:
        raise DumpError("Not a DUMP file (no SOD record)")
    sod = reader.read_start_of_dump()

    counts = Counter({RecordType.START: 1})
    data_bytes = 0
    while True:
        header = reader.read_header()
        counts[header.record_type] += 1
        if header.record_type is RecordType.END:
            break
        if header.record_type is RecordType.UNKNOWN:
            raise DumpError(f"Unknown record type {header.type_code} at offset {reader.offset - 2}")
        if header.record_type is RecordType.START:
            raise DumpError("Second START record")
        if header.record_type is RecordType.DATA_BLOCK:
            data_header = reader.read_data_header()
            reader.skip(data_header.alignment_count + data_header.byte_length, "data")
            data_bytes += data_header.byte_length
        elif header.record_type not in (RecordType.START_BLOCK, RecordType.END_BLOCK):
            reader.skip(header.length, header.record_type.name)
    return sod, counts, data_bytes


def main():
    parser = argparse.ArgumentParser(description="Show record statistics for a DUMP file")
    parser.add_argument("dumpfile", help="DUMP file path or http(s) URL")
    parser.add_argument("--verbose", "-v", action="store_true", help="Trace every record")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        with open_dump_source(args.dumpfile) as stream:
            reader = DumpReader(stream)
            sod, counts, data_bytes = count_records(reader)
    except DumpError as e:
        print(f"✗ {e}")
        return 1

    print(f"DUMP file: {args.dumpfile}")
    print(f"  Revision: {sod.revision}")
    print(f"  Written: {sod.date_string} {sod.time_string}")
    print(f"  Stream size: {reader.offset} bytes")
    print(f"  File data: {data_bytes} bytes")
    print(f"\nRecords:")
    for record_type in RecordType:
        if counts[record_type]:
            print(f"  {record_type.name:<12} {counts[record_type]:>8}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
