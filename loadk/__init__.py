"""
LoadK - A Python reader for AOS/VS DUMP_II and DUMP_III files

This library reads the sequential record stream written by the AOS/VS DUMP
utility and restores the directories, files and links it describes, or
summarises its contents.
"""

__version__ = "1.4.1"
__author__ = "loadk Contributors"
__license__ = "MIT"

from loadk.builder import DumpBuilder
from loadk.errors import DumpError, DumpFormatError, ExtractionError, UnexpectedEof
from loadk.models import DumpEntry, ParseResult, StartOfDump
from loadk.parser import DumpParser, ParseOptions, parse_dump
from loadk.reader import DumpReader

__all__ = [
    "DumpBuilder",
    "DumpError",
    "DumpFormatError",
    "ExtractionError",
    "UnexpectedEof",
    "DumpEntry",
    "ParseResult",
    "StartOfDump",
    "DumpParser",
    "ParseOptions",
    "parse_dump",
    "DumpReader",
]
