import logging
from typing import Any, List, Tuple

import pytest

from warcscan import sentry
from warcscan.app import App, AppException


class Recorder(App):
    def __init__(self) -> None:
        super().__init__("recorder", "test app")
        self.ran = False

    def main_loop(self) -> None:
        self.ran = True


class FakeStats:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, str, Any]] = []

    def incr(self, name: str, value: int) -> None:
        self.calls.append(("incr", name, value))

    def gauge(self, name: str, value: float) -> None:
        self.calls.append(("gauge", name, value))

    def timing(self, name: str, ms: float) -> None:
        self.calls.append(("timing", name, ms))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: Any) -> None:
    for var in ("STATSD_URL", "STATSD_REALM", "SENTRY_DSN", "PROCESS_NAME", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


class TestApp:
    def test_main(self) -> None:
        app = Recorder()
        app.main([])
        assert app.ran
        assert app._statsd is None

    def test_process_name_from_env(self, monkeypatch: Any) -> None:
        monkeypatch.setenv("PROCESS_NAME", "other")
        assert Recorder().process_name == "other"

    def test_logger_level(self) -> None:
        app = Recorder()
        app.main(["-L", "warcscan.reader:debug"])
        assert logging.getLogger("warcscan.reader").level == logging.DEBUG
        logging.getLogger("warcscan.reader").setLevel(logging.NOTSET)

    def test_bad_logger_level(self) -> None:
        with pytest.raises(AppException):
            Recorder().main(["-L", "warcscan.reader"])

    def test_stat_names(self) -> None:
        app = Recorder()
        assert app._name("records") == "records"
        assert (
            app._name("records", [("type", "response"), ("file", "a")])
            == "records.file_a.type_response"
        )

    def test_stats_disabled(self) -> None:
        app = Recorder()
        app.incr("records")  # no-op, no exception
        app.gauge("size", 1.5)

    def test_stats_reported(self) -> None:
        app = Recorder()
        stats = FakeStats()
        app._statsd = stats  # type: ignore[assignment]
        app.incr("records", labels=[("type", "warcinfo")])
        with app.timer("loop"):
            pass
        assert stats.calls[0] == ("incr", "records.type_warcinfo", 1)
        assert stats.calls[1][:2] == ("timing", "loop")

    def test_stats_init(self, monkeypatch: Any) -> None:
        monkeypatch.setenv("STATSD_URL", "statsd://localhost:8125")
        monkeypatch.setenv("STATSD_REALM", "test")
        app = Recorder()
        app._stats_init()
        assert app._statsd is not None

    def test_stats_init_needs_realm(self, monkeypatch: Any) -> None:
        monkeypatch.setenv("STATSD_URL", "statsd://localhost:8125")
        app = Recorder()
        app._stats_init()
        assert app._statsd is None

    def test_stats_init_bad_scheme(self, monkeypatch: Any) -> None:
        monkeypatch.setenv("STATSD_URL", "http://localhost:8125")
        monkeypatch.setenv("STATSD_REALM", "test")
        app = Recorder()
        app._stats_init()
        assert app._statsd is None


def test_sentry_not_configured() -> None:
    assert sentry.init() is False
