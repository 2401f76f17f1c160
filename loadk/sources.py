"""
Dump sources: local files and remote (HTTP/HTTPS) dump images
Both are handed to the parser as forward-only binary streams.
"""

import contextlib
import logging
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

import requests

from loadk import __version__, constants
from loadk.errors import DumpSourceError

logger = logging.getLogger("loadk.sources")


def is_remote(location: str) -> bool:
    """Check whether a dump location is an HTTP(S) URL."""
    return location.lower().startswith(constants.REMOTE_SCHEMES)


def create_session() -> requests.Session:
    """Create a requests session with the loadk User-Agent."""
    session = requests.Session()
    session.headers.update({
        "User-Agent": constants.USER_AGENT.format(version=__version__)
    })
    return session


@contextlib.contextmanager
def open_local_dump(path: str) -> Iterator[BinaryIO]:
    """Open a dump file for buffered sequential reading."""
    dump_path = Path(path)
    try:
        stream = open(dump_path, "rb", buffering=constants.DUMP_READ_BUFFER)
    except OSError as e:
        raise DumpSourceError(f"Could not open DUMP file - {e}") from e
    logger.debug(f"Opened {dump_path}")
    with stream:
        yield stream


@contextlib.contextmanager
def open_remote_dump(url: str, session: Optional[requests.Session] = None,
                     timeout: int = constants.DEFAULT_TIMEOUT) -> Iterator[BinaryIO]:
    """
    Stream a dump image over HTTP(S).

    The body is consumed sequentially from the raw response; nothing is
    buffered beyond what urllib3 holds.

    Args:
        url: Dump image URL
        session: Requests session to use (a new one if None)
        timeout: Connect/read timeout in seconds

    Raises:
        DumpSourceError: If the request fails or returns an error status
    """
    own_session = session is None
    if own_session:
        session = create_session()
    try:
        try:
            response = session.get(url, stream=True, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DumpSourceError(f"Could not fetch DUMP file {url} - {e}") from e

        logger.info(f"Streaming {url} ({response.headers.get('Content-Length', 'unknown')} bytes)")
        # Let urllib3 undo any Content-Encoding on the fly
        response.raw.decode_content = True
        try:
            yield response.raw
        finally:
            response.close()
    finally:
        if own_session:
            session.close()


@contextlib.contextmanager
def open_dump_source(location: str, session: Optional[requests.Session] = None,
                     timeout: int = constants.DEFAULT_TIMEOUT) -> Iterator[BinaryIO]:
    """
    Open a dump by path or URL.

    Args:
        location: Local path or http(s):// URL
        session: Requests session for remote dumps
        timeout: Request timeout for remote dumps
    """
    if is_remote(location):
        with open_remote_dump(location, session=session, timeout=timeout) as stream:
            yield stream
    else:
        with open_local_dump(location) as stream:
            yield stream
