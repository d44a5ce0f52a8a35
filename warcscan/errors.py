"""
Exceptions raised while parsing WARC records.

MalformedRecord and WarcIOError are the only errors a WarcReader ever
lets escape; EndOfStream is how parse_record says "nothing left" and
is turned into StopIteration by the reader.
"""

from typing import Optional


class WarcError(RuntimeError):
    """
    base for all record parsing errors
    """


class MalformedRecord(WarcError):
    """
    the stream violates the WARC record layout.
    reason is a short, fixed string (no offsets or data)
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class WarcIOError(WarcError):
    """
    the underlying stream failed, or ended in the middle of a record.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class EndOfStream(WarcError):
    """
    clean end: no data at all where the next record would start.
    """
