"""
warcscan: streaming WARC record reader.

    import sys
    from warcscan import WarcReader

    for record in WarcReader(sys.stdin.buffer):
        # header names are case insensitive
        if record.header.get("WARC-Type") == "response":
            ...
"""

from warcscan.casestring import CaseString
from warcscan.errors import EndOfStream, MalformedRecord, WarcError, WarcIOError
from warcscan.reader import ReaderState, WarcReader
from warcscan.record import WarcHeader, WarcRecord, parse_record

__version__ = "0.1.0"

__all__ = [
    "CaseString",
    "EndOfStream",
    "MalformedRecord",
    "ReaderState",
    "WarcError",
    "WarcHeader",
    "WarcIOError",
    "WarcReader",
    "WarcRecord",
    "parse_record",
]
