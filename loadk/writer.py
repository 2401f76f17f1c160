"""
Filesystem side of a restore: directories, output files and symbolic links
"""

import logging
import os
from typing import BinaryIO

from loadk.errors import ExtractionError


class FilesystemWriter:
    """
    Creates restored items on the local filesystem.

    All OSErrors are reported as ExtractionError so the parser can apply
    its ignore-errors policy in one place.
    """

    def __init__(self):
        self.logger = logging.getLogger("loadk.writer")

    def make_directory(self, path: str) -> None:
        """Create a directory and any missing parents; existing directories are fine."""
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise ExtractionError(f"Could not create directory <{path}>: {e}", path) from e
        self.logger.debug(f"Created directory {path}")

    def open_file(self, path: str) -> BinaryIO:
        """Create or truncate an output file for writing."""
        try:
            handle = open(path, "wb")
        except OSError as e:
            raise ExtractionError(f"Could not create file <{path}>: {e}", path) from e
        self.logger.debug(f"Creating file: {path}")
        return handle

    def write(self, handle: BinaryIO, data: bytes) -> None:
        try:
            handle.write(data)
        except OSError as e:
            raise ExtractionError(f"Could not write data to <{handle.name}>: {e}", handle.name) from e

    def close_file(self, handle: BinaryIO) -> None:
        try:
            handle.close()
        except OSError as e:
            raise ExtractionError(f"Could not close <{handle.name}>: {e}", handle.name) from e

    def make_symlink(self, link_path: str, target_path: str) -> None:
        """Create link_path pointing at target_path."""
        try:
            os.symlink(target_path, link_path)
        except OSError as e:
            raise ExtractionError(
                f"Could not create symbolic link <{link_path}> -> <{target_path}>: {e}",
                link_path,
            ) from e
        self.logger.debug(f"Linked {link_path} -> {target_path}")
