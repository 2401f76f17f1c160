#!/usr/bin/env python3
"""
Make Sample Dump

Writes a small DUMP_II image with nested directories, a sparse file and a
link, for trying out loadk without an AOS/VS system to hand.

Usage:
    python make_sample_dump.py [output]

Examples:
    python make_sample_dump.py SAMPLE.DMP
    loadk --dumpfile=SAMPLE.DMP --summary
    loadk --dumpfile=SAMPLE.DMP --extract --basedir=restored
"""

import argparse
import sys
from pathlib import Path

from loadk import DumpBuilder
from loadk.entry_types import LINK_ENTRY_TYPE

PROGRAM_FILE = 87
USER_DATA_FILE = 64


def build_sample() -> DumpBuilder:
    builder = DumpBuilder().start(revision=16, year=1994, month=3, day=2, hours=17, minutes=5, seconds=41)

    builder.directory("UDD")
    builder.directory("OPERATOR")
    builder.acl("OPERATOR,OWARE")
    builder.file("LOGON.CLI", b"write Welcome back\n")
    builder.file("HELLO.PR", bytes(range(256)) * 8, entry_type=PROGRAM_FILE)

    # Sparse data file: 4 KiB of NULs between the two data blocks are left out
    builder.fsb(USER_DATA_FILE).name("SPARSE.DB")
    builder.data_block(0, b"HEADER" + bytes(506))
    builder.data_block(512 + 4096, b"TRAILER")
    builder.end_block()

    builder.fsb(LINK_ENTRY_TYPE).name("CLI.PR").link(":CLI.PR")
    builder.end_block()  # OPERATOR
    builder.end_block()  # UDD
    return builder.end()


def main():
    parser = argparse.ArgumentParser(description="Write a sample AOS/VS DUMP_II file")
    parser.add_argument("output", nargs="?", type=Path, default=Path("SAMPLE.DMP"),
                        help="Output file (default: SAMPLE.DMP)")
    args = parser.parse_args()

    path = build_sample().write(args.output)
    print(f"Wrote {path} ({path.stat().st_size} bytes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
