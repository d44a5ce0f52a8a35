"""
Base class for command line applications
"""

import argparse
import logging
import os
import sys
import time
import urllib.parse
from types import TracebackType
from typing import Any, List, Optional, Sequence, Tuple

# PyPI
import statsd

from warcscan import sentry

Labels = List[Tuple[str, Any]]  # optional labels/values for a statistic report

LEVEL_DEST = "log_level"  # args entry name!
LEVELS = [level.lower() for level in logging.getLevelNamesMapping().keys()]
LOGGER_LEVEL_SEP = ":"
STATSD_DEFAULT_PORT = 8125

# see https://docs.python.org/3/library/logging.html#logrecord-attributes
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger(__name__)


class AppException(RuntimeError):
    """
    App class Exceptions
    """


class App:
    """
    Base class for command line applications.
    Subclasses override define_options, process_args and main_loop.
    """

    def __init__(self, process_name: str, descr: str):
        # PROCESS_NAME allows distinguishing stats from different
        # deployments of the same program
        self.process_name = os.environ.get("PROCESS_NAME", process_name)
        self.descr = descr
        self.args: Optional[argparse.Namespace] = None  # set by main
        self._statsd: Optional[statsd.StatsClient] = None

    def define_options(self, ap: argparse.ArgumentParser) -> None:
        """
        subclass if additional options/argument needed.
        subclass methods _SHOULD_ call super() method BEFORE adding options
        for consistent option ordering.
        """
        ap.add_argument(
            "--debug",
            "-d",
            action="store_const",
            const="DEBUG",
            dest=LEVEL_DEST,
            help="set default logging level to 'DEBUG'",
        )
        ap.add_argument(
            "--quiet",
            "-q",
            action="store_const",
            const="WARNING",
            dest=LEVEL_DEST,
            help="set default logging level to 'WARNING'",
        )
        ap.add_argument(
            "--list-loggers",
            action="store_true",
            dest="list_loggers",
            help="list all logger names and exit",
        )

        log_level = os.getenv("LOG_LEVEL", "INFO")
        ap.add_argument(
            "--log-level",
            "-l",
            action="store",
            choices=LEVELS,
            dest=LEVEL_DEST,
            default=log_level.lower(),
            help=f"set default logging level to LEVEL (default {log_level})",
        )
        ap.add_argument(
            "--logger-level",
            "-L",
            action="append",
            dest="logger_level",
            help=(
                "set LOGGER (see --list-loggers) "
                "verbosity to LEVEL (see --log-level)"
            ),
            metavar=f"LOGGER{LOGGER_LEVEL_SEP}LEVEL",
        )

    def process_args(self) -> None:
        """
        process arguments after parsing command line, but before main_loop.
        subclasses MUST call super().process_args() FIRST
        (so that logging is initialized first)
        """
        if self.args is None:
            raise AppException("self.args not set")

        if self.args.list_loggers:
            for name in sorted(logging.root.manager.loggerDict):
                print(name)
            sys.exit(0)

        level = getattr(self.args, LEVEL_DEST)
        if level is None:
            level = "INFO"
        else:
            level = level.upper()

        logging.basicConfig(format=LOG_FORMAT, level=level)

        if self.args.logger_level:
            for ll in self.args.logger_level:
                if LOGGER_LEVEL_SEP not in ll:
                    raise AppException(f"bad --logger-level {ll!r}")
                logger_name, level = ll.split(LOGGER_LEVEL_SEP, 1)
                logging.getLogger(logger_name).setLevel(level.upper())

    ################ stats reporting

    def _stats_init(self) -> None:
        """
        one-time init for statistics
        """
        statsd_url = os.getenv("STATSD_URL", None)
        if not statsd_url:
            logger.debug("STATSD_URL not set")
            return

        parsed_url = urllib.parse.urlparse(statsd_url)
        if parsed_url.scheme != "statsd":
            logger.warning("STATSD_URL %s scheme not 'statsd'", statsd_url)
            return

        host = parsed_url.hostname
        if not host:
            logger.warning("STATSD_URL %s missing host", statsd_url)
            return
        port = parsed_url.port or STATSD_DEFAULT_PORT

        realm = os.getenv("STATSD_REALM", None)
        if not realm:  # ie; 'prod', 'staging' or developer name
            logger.warning("STATSD_URL %s but STATSD_REALM not set", statsd_url)
            return

        prefix = f"warcscan.{realm}.{self.process_name}"
        logger.info("sending stats to %s prefix %s", statsd_url, prefix)
        self._statsd = statsd.StatsClient(host, port, prefix=prefix)

    def _name(self, name: str, labels: Labels = []) -> str:
        """
        Returns a statsd variable name for name (may contain dots)
        and labels, a list of (name,value) pairs, sorted by label
        name so the result doesn't depend on the order given.
        """
        if labels:
            slabels = ".".join([f"{lname}_{val}" for lname, val in sorted(labels)])
            name = f"{name}.{slabels}"
        return name

    def incr(self, name: str, value: int = 1, labels: Labels = []) -> None:
        """
        Increment a counter.
        Please use the convention that counter names end in "s".
        Label values should be constrained to a small set!
        """
        if self._statsd:
            self._statsd.incr(self._name(name, labels), value)

    def gauge(self, name: str, value: float, labels: Labels = []) -> None:
        if self._statsd:
            self._statsd.gauge(self._name(name, labels), value)

    def timing(self, name: str, ms: float, labels: Labels = []) -> None:
        """
        Report a timing (duration) in milliseconds.
        """
        if self._statsd:
            self._statsd.timing(self._name(name, labels), ms)

    def timer(self, name: str) -> "_TimingContext":
        """
        return "with" context for timing a block of code
        """
        return _TimingContext(self, name)

    def cleanup(self) -> None:
        """
        when overridden, call super().cleanup()
        """

    ################ main program

    def main(self, argv: Optional[Sequence[str]] = None) -> None:
        ap = argparse.ArgumentParser(self.process_name, description=self.descr)
        self.define_options(ap)
        self.args = ap.parse_args(argv)
        self.process_args()
        self._stats_init()
        sentry.init()

        with self.timer("main_loop"):
            try:
                self.main_loop()
            finally:
                self.cleanup()

    def main_loop(self) -> None:
        """
        not necessarily a loop!
        """
        raise NotImplementedError(f"{self.__class__.__name__} must override main_loop!")


class _TimingContext:
    """
    a "with" context for timing a block of code
    returned by App.timer(name).
    """

    def __init__(self, app: App, name: str):
        self.app = app
        self.name = name
        self.t0 = -1.0

    def __enter__(self) -> None:
        assert self.t0 < 0  # make sure not active!
        self.t0 = time.monotonic()

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        assert self.t0 > 0  # check enter'ed
        # statsd wants milliseconds:
        ms = (time.monotonic() - self.t0) * 1000
        logger.debug("%s: %g ms", self.name, ms)
        self.app.timing(self.name, ms)
        self.t0 = -1.0
