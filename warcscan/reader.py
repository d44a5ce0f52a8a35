"""
WarcReader: iterate over the records of a WARC stream.

    with open("example.warc", "rb") as f:
        for record in WarcReader(f):
            if record.header.get("WARC-Type") == "response":
                ...

The stream is only ever read forward (stdin, a pipe or an HTTP
response body all work). The reader keeps a running count of the
bytes of fully parsed records in "offset", so after an error it
holds the position of the start of the bad record.

The first error (MalformedRecord or WarcIOError) is raised from
next() exactly once; after that the reader is TERMINATED and just
stops, without trying to find the next record.
"""

import logging
from enum import Enum
from types import TracebackType
from typing import BinaryIO, Iterator, Optional, Tuple, Type

from warcscan.errors import EndOfStream, WarcError
from warcscan.record import WarcRecord, parse_record

logger = logging.getLogger(__name__)


class ReaderState(Enum):
    ACTIVE = 1
    FINISHED = 2  # clean end of stream
    TERMINATED = 3  # stopped by an error; never restarts


class WarcReader:
    """
    Iterator of WarcRecords from a buffered binary stream.
    """

    def __init__(self, stream: BinaryIO, close_stream: bool = False):
        self.stream = stream
        self.close_stream = close_stream
        self.state = ReaderState.ACTIVE
        self.offset = 0  # bytes of records returned so far
        self.records_read = 0
        self.last_offset = -1  # where last record returned started
        self.last_length = 0

    def __iter__(self) -> "WarcReader":
        return self

    def __next__(self) -> WarcRecord:
        if self.state != ReaderState.ACTIVE:
            raise StopIteration

        try:
            record, length = parse_record(self.stream)
        except EndOfStream:
            logger.debug("end of stream: %d records, %d bytes", self.records_read, self.offset)
            self.state = ReaderState.FINISHED
            raise StopIteration
        except WarcError as e:
            logger.warning("bad record at offset %d: %r", self.offset, e)
            self.state = ReaderState.TERMINATED
            raise

        self.last_offset = self.offset
        self.last_length = length
        self.offset += length
        self.records_read += 1
        logger.debug(
            "record %d at %d: %s %d bytes",
            self.records_read,
            self.last_offset,
            record.warc_type,
            length,
        )
        return record

    def iter_index(self) -> Iterator[Tuple[int, int, WarcRecord]]:
        """
        generate (offset, length, record) for each record
        (raises the same errors as iterating the reader)
        """
        for record in self:
            yield self.last_offset, self.last_length, record

    def close(self) -> None:
        if self.close_stream and not self.stream.closed:
            self.stream.close()

    def __enter__(self) -> "WarcReader":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.close()
