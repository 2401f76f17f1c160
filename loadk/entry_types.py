"""
Catalogue of AOS/VS file entry types found in File Status Blocks
"""

from dataclasses import dataclass
from typing import Dict

from loadk import constants


@dataclass(frozen=True)
class FstatEntryType:
    """
    An AOS/VS file entry type.

    Attributes:
        mnemonic: DG system mnemonic (e.g. FDIR, FTXT)
        description: Human-readable label used in summaries
        is_directory: Entry opens a new directory level
        has_payload: Entry is followed by file data worth restoring
    """
    mnemonic: str
    description: str
    is_directory: bool = False
    has_payload: bool = False


LINK_ENTRY_TYPE = 0
DIRECTORY_ENTRY_TYPE = 10
TEXT_ENTRY_TYPE = 68

KNOWN_ENTRY_TYPES: Dict[int, FstatEntryType] = {
    0: FstatEntryType("FLNK", "=>Link=>"),
    1: FstatEntryType("FDSF", "System Data File", has_payload=True),
    2: FstatEntryType("FMTF", "Mag Tape File", has_payload=True),
    3: FstatEntryType("FGFN", "Generic File", has_payload=True),
    10: FstatEntryType("FDIR", "<Directory>", is_directory=True),
    11: FstatEntryType("FLDU", "<LDU Directory>", is_directory=True),
    12: FstatEntryType("FCPD", "<Control Point Dir>", is_directory=True),
    64: FstatEntryType("FUDF", "User Data File", has_payload=True),
    66: FstatEntryType("FUPD", "User Profile", has_payload=True),
    67: FstatEntryType("FSTF", "Symbol Table", has_payload=True),
    68: FstatEntryType("FTXT", "Text File", has_payload=True),
    69: FstatEntryType("FLOG", "System Log File", has_payload=True),
    74: FstatEntryType("FPRV", "Program File", has_payload=True),
    87: FstatEntryType("FPRG", "Program File", has_payload=True),
}

# Unlisted codes are restored as opaque files
UNKNOWN_ENTRY_TYPE = FstatEntryType("????", "Unknown File", has_payload=True)


def lookup_entry_type(code: int) -> FstatEntryType:
    """Return the catalogue entry for a code, falling back to UNKNOWN_ENTRY_TYPE."""
    return KNOWN_ENTRY_TYPES.get(code, UNKNOWN_ENTRY_TYPE)


def entry_type_from_fsb(fsb: bytes) -> FstatEntryType:
    """
    Resolve the entry type of a File Status Block.

    The type code is the second byte of the block; a block too short to
    hold one resolves to UNKNOWN_ENTRY_TYPE.
    """
    if len(fsb) <= constants.FSB_ENTRY_TYPE_OFFSET:
        return UNKNOWN_ENTRY_TYPE
    return lookup_entry_type(fsb[constants.FSB_ENTRY_TYPE_OFFSET])
