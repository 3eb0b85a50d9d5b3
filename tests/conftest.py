"""
Pytest configuration and fixtures
"""
import json
from typing import Any, Optional

import pytest

from apod_panel.client import APODClient
from apod_panel.config import Config
from apod_panel.models import APODRecord


class FakeResponse:
    """Stand-in for aiohttp.ClientResponse used as an async context manager."""

    def __init__(self, status: int = 200, body: Any = None, reason: Optional[str] = None):
        self.status = status
        self.reason = reason
        if isinstance(body, bytes):
            self._raw = body
        elif isinstance(body, str):
            self._raw = body.encode("utf-8")
        else:
            self._raw = b"" if body is None else json.dumps(body).encode("utf-8")

    async def read(self) -> bytes:
        return self._raw

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class FakeSession:
    """Records requested URLs and answers with a canned response or error."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[BaseException] = None):
        self.closed = False
        self.requests = []
        self._response = response
        self._error = error

    def get(self, url: str, **kwargs):
        self.requests.append(url)
        if self._error is not None:
            raise self._error
        return self._response

    async def close(self):
        self.closed = True


@pytest.fixture
def config(tmp_path, monkeypatch) -> Config:
    """Config backed by a temporary file with a test API key"""
    monkeypatch.delenv("NASA_API_KEY", raising=False)
    cfg = Config(str(tmp_path / "config.json"))
    cfg.set("api_key", "TEST_KEY")
    return cfg


@pytest.fixture
def make_client(config):
    """Build an APODClient whose session answers with the given response"""
    def _make(response: Optional[FakeResponse] = None, error: Optional[BaseException] = None):
        client = APODClient(config)
        client._session = FakeSession(response, error)
        return client
    return _make


def image_record(**overrides) -> APODRecord:
    data = {
        "date": "2015-06-01",
        "title": "Orion",
        "explanation": "The Great Nebula in Orion.",
        "media_type": "image",
        "url": "http://x/o.jpg",
    }
    data.update(overrides)
    return APODRecord.from_json(data)
