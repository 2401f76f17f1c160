"""
Constants for the AOS/VS DUMP_II / DUMP_III record stream
Record codes and entry types follow the AOS/VS DUMP format as written by the DUMP utility
"""

from pathlib import Path

# Record type codes (upper six bits of the first header byte)
RECORD_START = 0
RECORD_FSB = 1
RECORD_NAME_BLOCK = 2
RECORD_UDA = 3
RECORD_ACL = 4
RECORD_LINK = 5
RECORD_START_BLOCK = 6
RECORD_DATA_BLOCK = 7
RECORD_END_BLOCK = 8
RECORD_END = 9

# Record header layout
HEADER_SIZE = 2
MAX_RECORD_LENGTH = 0x03FF  # two bits from the first byte, eight from the second
MAX_RECORD_TYPE = 0x3F

# Fixed-width field sizes (DG words are 16 bits, double words 32 bits)
WORD_SIZE = 2
DWORD_SIZE = 4
SOD_SIZE = 7 * WORD_SIZE
DATA_HEADER_SIZE = 2 * DWORD_SIZE + WORD_SIZE

# Skipped runs of NULs are padded back in whole disk blocks
DISK_BLOCK_BYTES = 512

# Offset of the entry-type code within a File Status Block
FSB_ENTRY_TYPE_OFFSET = 1

# AOS/VS pathname separator, rewritten for link targets
AOSVS_SEPARATOR = ":"

# Text encoding for names, link targets and ACLs
NAME_ENCODING = "ascii"

# Local dump files are read through a small buffer
DUMP_READ_BUFFER = 512

# HTTP defaults for remote dump files
DEFAULT_TIMEOUT = 30
HTTP_CHUNK_SIZE = 16 * 1024
USER_AGENT = "loadk/{version} (Python)"
REMOTE_SCHEMES = ("http://", "https://")

# Configuration file location
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "loadk" / "config.json"

# Environment variable that forces ASCII status markers when set to 1
ASCII_ENV_VAR = "LOADK_ASCII"

# Summary layout
TYPE_COLUMN_WIDTH = 20
PATH_COLUMN_WIDTH = 48
