"""
Shared fixtures for loadk tests
"""

import io
from pathlib import Path

import pytest

from loadk.builder import DumpBuilder
from loadk.parser import DumpParser, ParseOptions
from loadk.writer import FilesystemWriter


class RecordingWriter(FilesystemWriter):
    """FilesystemWriter that remembers every directory, file and link it creates."""

    def __init__(self):
        super().__init__()
        self.directories = []
        self.files = []
        self.links = []

    def make_directory(self, path):
        self.directories.append(path)
        super().make_directory(path)

    def open_file(self, path):
        self.files.append(path)
        return super().open_file(path)

    def make_symlink(self, link_path, target_path):
        self.links.append((link_path, target_path))
        super().make_symlink(link_path, target_path)


@pytest.fixture
def builder():
    return DumpBuilder().start()


@pytest.fixture
def base_dir(tmp_path) -> Path:
    path = tmp_path / "restore"
    path.mkdir()
    return path


@pytest.fixture
def writer():
    return RecordingWriter()


@pytest.fixture
def run_dump(base_dir, writer):
    """Parse a dump image; returns (result, parser, output text)."""
    def _run(data: bytes, **option_overrides):
        options = ParseOptions(base_dir=str(base_dir))
        for key, value in option_overrides.items():
            setattr(options, key, value)
        out = io.StringIO()
        parser = DumpParser(io.BytesIO(data), options, writer=writer, out=out)
        result = parser.parse()
        return result, parser, out.getvalue()
    return _run
