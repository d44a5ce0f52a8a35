import io
import sys
from pathlib import Path
from typing import Any, List

import pytest
import requests

from warcscan.inputs import InputError, open_input
from warcscan.reader import WarcReader

WARC = b"WARC/1.1\r\nWARC-Type: warcinfo\r\nContent-Length: 4\r\n\r\ntest\r\n\r\n"


class FakeRaw(io.BytesIO):
    decode_content = False


class FakeResponse:
    def __init__(self, status_code: int, body: bytes):
        self.status_code = status_code
        self.raw = FakeRaw(body)
        self.closed = False

    def close(self) -> None:
        self.closed = True


class TestOpenInput:
    def test_local_file(self, tmp_path: Path) -> None:
        path = tmp_path / "test.warc"
        path.write_bytes(WARC)
        with open_input(str(path)) as f:
            assert [r.warc_type for r in WarcReader(f)] == ["warcinfo"]

    def test_stdin(self) -> None:
        assert open_input("-") is sys.stdin.buffer

    def test_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(InputError):
            open_input(str(tmp_path / "nonesuch.warc"))

    def test_url(self, monkeypatch: Any) -> None:
        calls: List[Any] = []

        def fake_get(url: str, **kw: Any) -> FakeResponse:
            calls.append((url, kw))
            return FakeResponse(200, WARC)

        monkeypatch.setattr(requests, "get", fake_get)
        f = open_input("https://example.com/test.warc")
        records = list(WarcReader(f))

        assert records[0].content == b"test"
        assert calls[0][0] == "https://example.com/test.warc"
        assert calls[0][1]["stream"] is True

    def test_url_error(self, monkeypatch: Any) -> None:
        resp = FakeResponse(404, b"not found")
        monkeypatch.setattr(requests, "get", lambda url, **kw: resp)
        with pytest.raises(InputError):
            open_input("http://example.com/missing.warc")
        assert resp.closed
