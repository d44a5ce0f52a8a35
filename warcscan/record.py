"""
WARC record parsing.

parse_record reads exactly one record from a buffered binary stream:

    WARC/1.1\r\n
    Header-Name: value\r\n
     continuation of value\r\n
    \r\n
    <Content-Length bytes>
    \r\n\r\n

and returns the record along with the number of bytes it occupied.
The caller does the byte accounting: nothing is counted unless the
whole record (trailer included) was read successfully, so a failed
record never has to be "un-counted", and the stream never needs to
be seekable.
"""

import sys
from collections import UserDict
from dataclasses import dataclass, field
from typing import BinaryIO, Optional, Tuple, Union

from warcscan.casestring import CaseString
from warcscan.errors import EndOfStream, MalformedRecord, WarcIOError

VERSION_PREFIX = "WARC/1."
TRAILER = b"\r\n\r\n"
HEADER_END = b"\r\n"
READ_CHUNK = 16 << 20  # largest single read() request

# Unicode White_Space; str.strip() would also take \x1c-\x1f
WHITESPACE = (
    "\t\n\x0b\x0c\r \x85\xa0\u1680\u2000\u2001\u2002\u2003\u2004\u2005"
    "\u2006\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000"
)

CONTENT_LENGTH = "Content-Length"
WARC_TYPE = "WARC-Type"
WARC_TARGET_URI = "WARC-Target-URI"
WARC_RECORD_ID = "WARC-Record-ID"

HeaderKey = Union[str, CaseString]


class WarcHeader(UserDict[CaseString, str]):
    """
    Record header fields, keyed by CaseString.

    Plain str keys are accepted everywhere and converted,
    so header["warc-type"], header["WARC-Type"] and
    header[CaseString("WARC-TYPE")] all find the same field.

    Frozen once parse_record has filled it in.
    """

    frozen = False

    def freeze(self) -> None:
        self.frozen = True

    def _check_frozen(self) -> None:
        if self.frozen:
            raise TypeError("WarcHeader is frozen")

    @staticmethod
    def _key(key: HeaderKey) -> CaseString:
        if isinstance(key, CaseString):
            return key
        return CaseString(key)

    def __getitem__(self, key: HeaderKey) -> str:  # type: ignore[override]
        return self.data[self._key(key)]

    def __setitem__(self, key: HeaderKey, value: str) -> None:  # type: ignore[override]
        self._check_frozen()
        ckey = self._key(key)
        # pop first, so the newest spelling is the one remembered
        self.data.pop(ckey, None)
        self.data[ckey] = value

    def __delitem__(self, key: HeaderKey) -> None:  # type: ignore[override]
        self._check_frozen()
        del self.data[self._key(key)]

    def __contains__(self, key: object) -> bool:
        if isinstance(key, (str, CaseString)):
            return self._key(key) in self.data
        return False


@dataclass(frozen=True)
class WarcRecord:
    """
    One parsed WARC record.
    """

    version: str  # ie; "WARC/1.1"
    header: WarcHeader = field(repr=False)
    content: bytes = field(repr=False)

    @property
    def warc_type(self) -> Optional[str]:
        return self.header.get(WARC_TYPE)

    @property
    def target_uri(self) -> Optional[str]:
        return self.header.get(WARC_TARGET_URI)

    @property
    def record_id(self) -> Optional[str]:
        return self.header.get(WARC_RECORD_ID)

    @property
    def content_length(self) -> int:
        return len(self.content)


def _readline(stream: BinaryIO) -> bytes:
    try:
        return stream.readline()
    except OSError as e:
        raise WarcIOError(f"read error: {e}", e) from e


def _read_exact(stream: BinaryIO, length: int) -> bytes:
    """
    read exactly length bytes; a buffered stream normally returns
    everything at once, but raw streams and pipes may come up short,
    and very large contents are read READ_CHUNK at a time.
    """
    try:
        data = stream.read(min(length, READ_CHUNK))
        if len(data) == length:
            return data

        buf = bytearray(data)
        while len(buf) < length:
            chunk = stream.read(min(length - len(buf), READ_CHUNK))
            if not chunk:
                break
            buf += chunk
    except OSError as e:
        raise WarcIOError(f"read error: {e}", e) from e

    if len(buf) < length:
        eof = EOFError(f"wanted {length} bytes, got {len(buf)}")
        raise WarcIOError("unexpected end of stream", eof) from eof
    return bytes(buf)


def _decode(line: bytes) -> str:
    try:
        return line.decode("utf-8")
    except UnicodeDecodeError as e:
        raise WarcIOError("header is not valid UTF-8", e) from e


def _parse_content_length(value: str) -> int:
    digits = value[1:] if value.startswith("+") else value
    if not (digits.isascii() and digits.isdigit()):
        raise MalformedRecord("Content-Length is not a number")
    length = int(digits)
    if length > sys.maxsize:
        # too big to read, or even to allocate
        raise MalformedRecord("Content-Length is not a number")
    return length


def parse_record(stream: BinaryIO) -> Tuple[WarcRecord, int]:
    """
    Read one record from stream (which must have readline and read).

    Returns (record, bytes consumed).
    Raises EndOfStream if the stream is empty at the record boundary,
    MalformedRecord or WarcIOError otherwise.
    """
    line = _readline(stream)
    if not line:
        raise EndOfStream("end of stream")
    consumed = len(line)

    version = _decode(line).rstrip(WHITESPACE)
    if not version.startswith(VERSION_PREFIX):
        raise MalformedRecord("Unknown WARC version")

    header = WarcHeader()
    pending: Optional[Tuple[str, str]] = None  # (name, value) awaiting continuations
    while True:
        line = _readline(stream)
        consumed += len(line)
        if line == HEADER_END:
            break

        text = _decode(line).rstrip(WHITESPACE)
        if text.startswith((" ", "\t")):
            if pending is None:
                raise MalformedRecord("Invalid header block")
            name, value = pending
            pending = (name, f"{value}\n{text.strip(WHITESPACE)}")
            continue

        if pending is not None:
            header[pending[0]] = pending[1]

        name, colon, value = text.partition(":")
        if not colon:
            # also where a stream that ends inside the header block lands
            raise MalformedRecord("Invalid header field")
        pending = (name.rstrip(WHITESPACE), value.strip(WHITESPACE))

    if pending is not None:
        header[pending[0]] = pending[1]

    length_value = header.get(CONTENT_LENGTH)
    if length_value is None:
        raise MalformedRecord("Content-Length is missing")
    length = _parse_content_length(length_value)

    content = _read_exact(stream, length)
    if _read_exact(stream, len(TRAILER)) != TRAILER:
        raise MalformedRecord("No double linefeed after record content")
    consumed += length + len(TRAILER)

    header.freeze()
    return WarcRecord(version=version, header=header, content=content), consumed
