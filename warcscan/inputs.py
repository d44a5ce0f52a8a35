"""
Open WARC inputs named on a command line.

"-" is standard input, http(s) URLs are streamed (never downloaded
to a temp file first, since archives can be many GB), and anything
else must be a local file.

Every stream returned is buffered (has an efficient readline)
and is read strictly forward.
"""

import io
import logging
import os
import sys
from typing import BinaryIO, cast

# PyPI
import requests

STDIN = "-"
HTTP_TIMEOUT = 60  # seconds, for connect & between reads

logger = logging.getLogger(__name__)


class InputError(RuntimeError):
    """
    raised when an input cannot be opened
    """


def is_url(name: str) -> bool:
    return name.startswith("http:") or name.startswith("https:")


def open_input(name: str) -> BinaryIO:
    """
    take "-", local file path or http(s) URL,
    return a buffered BinaryIO; caller should close it.
    """
    if name == STDIN:
        logger.debug("reading stdin")
        return sys.stdin.buffer

    if is_url(name):
        resp = requests.get(name, stream=True, timeout=HTTP_TIMEOUT)
        if resp.status_code != 200:
            resp.close()
            raise InputError(f"{name}: HTTP status {resp.status_code}")
        logger.debug("streaming %s", name)
        # resp.raw is urllib3.response.HTTPResponse, an io.IOBase
        # subclass with readinto, but no buffering of its own:
        assert isinstance(resp.raw, io.IOBase)
        # undo any HTTP Content-Encoding (not the same as a .warc.gz!)
        resp.raw.decode_content = True
        return cast(BinaryIO, io.BufferedReader(cast(io.RawIOBase, resp.raw)))

    if os.path.isfile(name):
        return open(name, "rb")

    raise InputError(f"{name} not found or unknown URL scheme")
