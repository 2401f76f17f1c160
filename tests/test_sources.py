"""
Tests for local and remote dump sources
"""

import io
from unittest import mock

import pytest
import requests

from loadk import __version__
from loadk.builder import DumpBuilder
from loadk.errors import DumpSourceError
from loadk.parser import ParseOptions, parse_dump
from loadk.sources import create_session, is_remote, open_dump_source


class RawBody(io.BytesIO):
    decode_content = False


def fake_response(body: bytes, status_error=None):
    response = mock.Mock()
    response.raw = RawBody(body)
    response.headers = {"Content-Length": str(len(body))}
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    return response


def test_is_remote():
    assert is_remote("https://example.org/BACKUP.DMP")
    assert is_remote("HTTP://example.org/BACKUP.DMP")
    assert not is_remote("/tmp/BACKUP.DMP")
    assert not is_remote("ftp.example.org.DMP")


def test_session_user_agent():
    session = create_session()
    assert session.headers["User-Agent"] == f"loadk/{__version__} (Python)"


def test_local_dump(tmp_path):
    path = DumpBuilder().start().file("F", b"abc").end().write(tmp_path / "LOCAL.DMP")

    with open_dump_source(str(path)) as stream:
        result = parse_dump(stream, ParseOptions(base_dir=str(tmp_path)), out=io.StringIO())
        assert not stream.closed
    assert stream.closed
    assert result.total_bytes == 3


def test_missing_local_dump(tmp_path):
    with pytest.raises(DumpSourceError, match="Could not open DUMP file"):
        with open_dump_source(str(tmp_path / "MISSING.DMP")):
            pass


def test_remote_dump_is_streamed(tmp_path):
    body = DumpBuilder().start().file("F", b"remote").end().to_bytes()
    response = fake_response(body)
    session = mock.Mock()
    session.get.return_value = response

    with open_dump_source("https://example.org/BACKUP.DMP", session=session, timeout=5) as stream:
        result = parse_dump(stream, ParseOptions(base_dir=str(tmp_path)), out=io.StringIO())

    session.get.assert_called_once_with("https://example.org/BACKUP.DMP", stream=True, timeout=5)
    assert response.raw.decode_content is True
    response.close.assert_called_once()
    session.close.assert_not_called()
    assert result.total_bytes == 6


def test_remote_dump_http_error():
    response = fake_response(b"", status_error=requests.HTTPError("404 Client Error"))
    with mock.patch.object(requests.Session, "get", return_value=response) as get:
        with pytest.raises(DumpSourceError, match="404"):
            with open_dump_source("http://example.org/MISSING.DMP"):
                pass
    get.assert_called_once()


def test_remote_dump_connection_error():
    with mock.patch.object(requests.Session, "get", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(DumpSourceError, match="refused"):
            with open_dump_source("http://example.org/BACKUP.DMP"):
                pass
