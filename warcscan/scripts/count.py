"""
Count WARC records by WARC-Type.

Reads each input (file, "-" for stdin, or http(s) URL) to the end,
or to the first bad record, and reports per-type record counts and
content sizes:

    warc-count --type response < example.warc
    response records: 1234
    response size: 56 MiB
    bytes consumed: 61234567

With --index, also prints "offset length type target-uri"
for every record as it is read.
"""

import argparse
import logging
import sys
from collections import Counter
from typing import List, Optional, TextIO

from warcscan.app import App
from warcscan.errors import WarcError
from warcscan.inputs import InputError, open_input
from warcscan.reader import WarcReader

NO_TYPE = "-"  # reported type for records without WARC-Type

logger = logging.getLogger("warc-count")


class WarcCount(App):
    def __init__(self, process_name: str, descr: str, out: Optional[TextIO] = None):
        super().__init__(process_name, descr)
        self.out = out or sys.stdout
        self.counts: Counter[str] = Counter()
        self.sizes: Counter[str] = Counter()
        self.bytes_consumed = 0
        self.errors = 0
        self.types: Optional[List[str]] = None

    def define_options(self, ap: argparse.ArgumentParser) -> None:
        super().define_options(ap)
        ap.add_argument(
            "--type",
            "-t",
            action="append",
            dest="types",
            metavar="TYPE",
            help="only report records of WARC-Type TYPE (may be repeated)",
        )
        ap.add_argument(
            "--index",
            action="store_true",
            default=False,
            help="print offset, length, type and target URI of each record",
        )
        ap.add_argument(
            "input_files",
            nargs="*",
            default=["-"],
            metavar="INPUT",
            help="file, URL, or - for stdin (default)",
        )

    def process_args(self) -> None:
        super().process_args()
        assert self.args
        if self.args.types:
            self.types = self.args.types

    def wanted(self, warc_type: str) -> bool:
        return self.types is None or warc_type in self.types

    def count_file(self, fname: str) -> bool:
        """
        count records in one input, returns False on error
        """
        assert self.args
        try:
            stream = open_input(fname)
        except (InputError, OSError) as e:
            logger.error("%s: %s", fname, e)
            self.incr("errors", labels=[("type", "open")])
            return False

        with WarcReader(stream, close_stream=fname != "-") as reader:
            try:
                for offset, length, record in reader.iter_index():
                    warc_type = record.warc_type or NO_TYPE
                    self.incr("records", labels=[("type", warc_type)])
                    if not self.wanted(warc_type):
                        continue
                    self.counts[warc_type] += 1
                    self.sizes[warc_type] += record.content_length
                    if self.args.index:
                        print(
                            offset,
                            length,
                            warc_type,
                            record.target_uri or "-",
                            file=self.out,
                        )
            except WarcError as e:
                logger.error("%s: offset %d: %s", fname, reader.offset, e)
                self.incr("errors", labels=[("type", e.__class__.__name__)])
                return False
            finally:
                self.bytes_consumed += reader.offset
                self.gauge("bytes_consumed", reader.offset)
                logger.info(
                    "%s: %d records, %d bytes", fname, reader.records_read, reader.offset
                )
        return True

    def report(self) -> None:
        for warc_type in sorted(self.counts):
            print(f"{warc_type} records: {self.counts[warc_type]}", file=self.out)
            print(f"{warc_type} size: {self.sizes[warc_type] >> 20} MiB", file=self.out)
        print(f"bytes consumed: {self.bytes_consumed}", file=self.out)

    def main_loop(self) -> None:
        assert self.args
        for fname in self.args.input_files:
            if not self.count_file(fname):
                self.errors += 1
        self.report()
        if self.errors:
            sys.exit(1)


def main() -> None:
    app = WarcCount("warc-count", "Count WARC records by type")
    app.main()


if __name__ == "__main__":
    main()
