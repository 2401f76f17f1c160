"""
DUMP_II / DUMP_III parser
Walks the record stream once, front to back, restoring directories, files
and links under a base directory and/or printing a summary of the contents.
"""

import enum
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Dict, Optional, TextIO

from loadk import constants
from loadk.entry_types import FstatEntryType, entry_type_from_fsb
from loadk.errors import DumpFormatError, ExtractionError
from loadk.models import DumpEntry, ParseResult, RecordHeader, RecordType, decode_text
from loadk.reader import DumpReader
from loadk.utils import convert_link_target, join_working_path, normalize_base_dir, parent_dir
from loadk.writer import FilesystemWriter


@dataclass
class ParseOptions:
    """
    Options for a pass over a dump.

    Attributes:
        extract: Restore directories, files and links to disk
        ignore_errors: Log filesystem failures and carry on instead of aborting
        summary: Print one line per entry with its type and path
        verbose: Put every summary line on its own line and report the dump header
        list_entries: Print the path of every entry
        base_dir: Restore root; the working directory never rises above it
    """
    extract: bool = False
    ignore_errors: bool = False
    summary: bool = False
    verbose: bool = False
    list_entries: bool = False
    base_dir: str = field(default_factory=os.getcwd)


class ParserState(enum.Enum):
    EXPECT_START = "expect_start"
    RUNNING = "running"
    DONE = "done"


class DumpParser:
    """
    Single pass state machine over a dump record stream.

    Session state:
        working_dir: Current restore directory, pushed by directory names
            and popped by EndBlocks that do not close a file
        in_file: A file entry is open and waiting for its EndBlock
        file_size: Bytes accounted to the open file so far
        fsb: Most recent File Status Block, consumed by the next name
    """

    def __init__(self, stream: BinaryIO, options: Optional[ParseOptions] = None,
                 writer: Optional[FilesystemWriter] = None, out: Optional[TextIO] = None):
        """
        Initialize the parser.

        Args:
            stream: Readable binary stream positioned at the start of the dump
            options: Parse options (defaults: summarise nothing, extract nothing)
            writer: Filesystem writer used when extracting
            out: Text stream for summary and list output (default: stdout)
        """
        self.reader = DumpReader(stream)
        self.options = options or ParseOptions()
        self.writer = writer or FilesystemWriter()
        self.out = out or sys.stdout
        self.logger = logging.getLogger("loadk.parser")

        self.state = ParserState.EXPECT_START
        self.base_dir = normalize_base_dir(self.options.base_dir)
        self.working_dir = self.base_dir
        self.fsb = b""
        self.load_it = False
        self.in_file = False
        self.file_size = 0
        self.output: Optional[BinaryIO] = None
        self.current_entry: Optional[DumpEntry] = None
        self.result = ParseResult()

        self._handlers: Dict[RecordType, Callable[[RecordHeader], None]] = {
            RecordType.START: self._handle_start,
            RecordType.FSB: self._handle_fsb,
            RecordType.NAME_BLOCK: self._handle_name_block,
            RecordType.UDA: self._handle_uda,
            RecordType.ACL: self._handle_acl,
            RecordType.LINK: self._handle_link,
            RecordType.START_BLOCK: self._handle_start_block,
            RecordType.DATA_BLOCK: self._handle_data_block,
            RecordType.END_BLOCK: self._handle_end_block,
            RecordType.END: self._handle_end,
            RecordType.UNKNOWN: self._handle_unknown,
        }

    @property
    def reporting(self) -> bool:
        return self.options.summary or self.options.verbose

    def parse(self) -> ParseResult:
        """
        Process the whole dump.

        Returns:
            ParseResult describing what was found (and restored)

        Raises:
            DumpFormatError: If the stream is not a valid dump
            UnexpectedEof: If the stream ends before the End record
            ExtractionError: On filesystem failures, unless ignore_errors is set
        """
        if self.state is not ParserState.EXPECT_START:
            raise DumpFormatError("Dump has already been parsed")

        try:
            self._read_start()
            while self.state is ParserState.RUNNING:
                header = self.reader.read_header()
                self.result.records += 1
                self._handlers[header.record_type](header)
            if self.output is not None:
                output, self.output = self.output, None
                self._guarded(self.writer.close_file, output)
        finally:
            if self.output is not None:
                self._discard_output()

        return self.result

    def _read_start(self) -> None:
        header = self.reader.read_header()
        if header.record_type is not RecordType.START:
            raise DumpFormatError(
                "This does not appear to be an AOS/VS DUMP_II or DUMP_III file (No SOD record found)"
            )
        self.result.records += 1
        sod = self.reader.read_start_of_dump()
        self.result.start = sod
        self.state = ParserState.RUNNING
        self.logger.debug(f"Dump format revision {sod.revision}, written {sod.date_string} {sod.time_string}")

        if self.reporting:
            self._print(f"AOS/VS DUMP version  : {sod.revision}")
            self._print(f"DUMP date (y-m-d)    : {sod.date_string}")
            self._print(f"DUMP time (hh:mm:ss) : {sod.time_string}")

    # Record handlers

    def _handle_start(self, header: RecordHeader) -> None:
        raise DumpFormatError("Another START record found in DUMP - this should not happen")

    def _handle_fsb(self, header: RecordHeader) -> None:
        self.fsb = self.reader.read_payload(header, "FSB")
        self.load_it = False

    def _handle_name_block(self, header: RecordHeader) -> None:
        name = decode_text(self.reader.read_payload(header, "file name"))
        entry_type = entry_type_from_fsb(self.fsb)

        if self.in_file:
            self.logger.warning(f"Entry {name} started before the previous file was closed")
            self._close_file_session()

        self.load_it = entry_type.has_payload

        if self.options.summary and self.options.verbose:
            self._print()

        if entry_type.is_directory:
            self.working_dir = join_working_path(self.working_dir, name)
            display_path = self.working_dir
            if self.options.extract:
                self._guarded(self.writer.make_directory, self.working_dir)
        else:
            display_path = join_working_path(self.working_dir, name)

        entry = self._record_entry(name, display_path, entry_type)

        if self.options.list_entries:
            self._print(display_path + os.sep if entry.is_directory else display_path)

        if self.options.summary:
            line = (
                f"{entry_type.description:<{constants.TYPE_COLUMN_WIDTH}}: "
                f"{display_path:<{constants.PATH_COLUMN_WIDTH}}"
            )
            if self.options.verbose or entry_type.is_directory:
                self._print(line)
            else:
                self._print(line, end="\t")

        if entry_type.has_payload:
            self._open_file_session(display_path)

    def _handle_uda(self, header: RecordHeader) -> None:
        # User Data Areas are not restored
        self.reader.skip(header.length, "UDA")

    def _handle_acl(self, header: RecordHeader) -> None:
        acl = decode_text(self.reader.read_payload(header, "ACL"))
        self.logger.debug(f" ACL: {acl}")

    def _handle_link(self, header: RecordHeader) -> None:
        target = convert_link_target(self.reader.read_payload(header, "Link Target"))
        link_name = self.current_entry.name if self.current_entry is not None else ""

        if self.current_entry is not None:
            self.current_entry.link_target = target
        self.result.links += 1

        if self.reporting:
            self._print(f" -> Link Target: {target}")

        if self.options.extract:
            if self.working_dir:
                link_path = os.path.join(self.working_dir, link_name)
                # Rooted AOS/VS targets still resolve under the working directory
                target_path = self.working_dir + os.sep + target
            else:
                link_path = link_name
                target_path = target
            self._guarded(self.writer.make_symlink, link_path, target_path)

    def _handle_start_block(self, header: RecordHeader) -> None:
        pass

    def _handle_data_block(self, header: RecordHeader) -> None:
        data_header = self.reader.read_data_header()
        self.logger.debug(f" Data Block: {data_header.byte_length} (bytes)")

        # Skip any alignment bytes - usually zero or one
        if data_header.alignment_count > 0:
            self.logger.debug(f"  Skipping {data_header.alignment_count} alignment byte(s)")
            self.reader.skip(data_header.alignment_count, "alignment byte(s)")

        if self.options.extract:
            self._pad_to(data_header.byte_address)
            for chunk in self.reader.iter_chunks(data_header.byte_length, "data blob"):
                self._write_output(chunk)
        else:
            self.reader.skip(data_header.byte_length, "data blob")

        self.file_size += data_header.byte_length
        self.in_file = True

    def _handle_end_block(self, header: RecordHeader) -> None:
        if self.in_file:
            self._close_file_session()
        else:
            # Never climb above the base directory, however many pops the dump holds
            if self.working_dir != self.base_dir:
                self.working_dir = parent_dir(self.working_dir)
            self.logger.debug(f" Popped dir - new dir is: {self.working_dir}")
        self.logger.debug("End Block Processed")

    def _handle_end(self, header: RecordHeader) -> None:
        self.state = ParserState.DONE
        if self.reporting:
            self._print("=== End of Dump ===")

    def _handle_unknown(self, header: RecordHeader) -> None:
        raise DumpFormatError(
            f"Unknown block type {header.type_code} in DUMP file at offset "
            f"{self.reader.offset - constants.HEADER_SIZE}"
        )

    # File sessions

    def _open_file_session(self, path: str) -> None:
        self.in_file = True
        self.file_size = 0
        if self.options.extract and self.load_it:
            self.output = self._guarded(self.writer.open_file, path)

    def _close_file_session(self) -> None:
        if self.output is not None:
            output, self.output = self.output, None
            self._guarded(self.writer.close_file, output)
        if self.options.summary:
            self._print(f" {self.file_size:12d} bytes")
        if self.current_entry is not None:
            self.current_entry.size = self.file_size
        self.result.total_bytes += self.file_size
        self.file_size = 0
        self.in_file = False

    def _pad_to(self, byte_address: int) -> None:
        """
        Write zero blocks for a run of NULs the dump skipped over.

        Only whole blocks are written: a gap that is not a multiple of the
        block size is left short by the remainder.
        """
        if byte_address <= self.file_size + 1:
            return
        padding_blocks = (byte_address - self.file_size) // constants.DISK_BLOCK_BYTES
        padding_block = bytes(constants.DISK_BLOCK_BYTES)
        for _ in range(padding_blocks):
            self.logger.debug("  Padding with one block")
            self._write_output(padding_block)
            self.file_size += constants.DISK_BLOCK_BYTES

    def _write_output(self, data: bytes) -> None:
        if self.output is None:
            return
        try:
            self.writer.write(self.output, data)
        except ExtractionError as e:
            # Drop the file; the rest of its data is read and discarded
            self._discard_output()
            if not self.options.ignore_errors:
                raise
            self._note_ignored(e)

    # Helpers

    def _discard_output(self) -> None:
        """Close the output after a failure without masking the error already raised."""
        output, self.output = self.output, None
        try:
            self.writer.close_file(output)
        except ExtractionError as e:
            self.logger.debug(f"Discarded output: {e}")

    def _guarded(self, operation: Callable, *args):
        """Run a filesystem operation, applying the ignore-errors policy."""
        try:
            return operation(*args)
        except ExtractionError as e:
            if not self.options.ignore_errors:
                raise
            self._note_ignored(e)
            return None

    def _note_ignored(self, error: ExtractionError) -> None:
        self.logger.error(f"{error} - continuing")
        self.result.errors.append(str(error))

    def _record_entry(self, name: str, path: str, entry_type: FstatEntryType) -> DumpEntry:
        entry = DumpEntry(
            name=name,
            path=path,
            entry_type=entry_type.description,
            is_directory=entry_type.is_directory,
        )
        self.result.entries.append(entry)
        if entry_type.is_directory:
            self.result.directories += 1
        elif entry_type.has_payload:
            self.result.files += 1
        self.current_entry = entry
        return entry

    def _print(self, text: str = "", end: str = "\n") -> None:
        print(text, end=end, file=self.out)


def parse_dump(stream: BinaryIO, options: Optional[ParseOptions] = None,
               writer: Optional[FilesystemWriter] = None, out: Optional[TextIO] = None) -> ParseResult:
    """Parse a dump stream with a fresh DumpParser."""
    return DumpParser(stream, options=options, writer=writer, out=out).parse()
