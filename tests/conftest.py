"""Pytest configuration and fixtures shared by the test suite."""

import logging
import threading
from datetime import datetime, timedelta, timezone

import pytest

from goesctl.downloaders import Downloader
from goesctl.errors import TransportError
from goesctl.model import ResolvedWindow

log = logging.getLogger(__name__)


def pytest_addoption(parser):
    parser.addoption("--slow", action="store", default=False, help="Run slow tests")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--slow"):
        # --slow given in cli: do not skip slow tests
        return
    skip_slow = pytest.mark.skip(reason="Marked as slow, skipping")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


class FakeDownloader(Downloader):
    """In-memory downloader, failing for the given item ids."""

    def __init__(self, payload: bytes = b"\xff\xd8jpeg", failing: set[str] | None = None):
        self.payload = payload
        self.failing = failing or set()
        self.calls: list[tuple[str, str]] = []
        self.initialized = False
        self.closed = False
        self._lock = threading.Lock()

    def init(self, **kwargs) -> None:
        self.initialized = True

    def fetch(self, uri: str, item_id: str) -> bytes:
        with self._lock:
            self.calls.append((uri, item_id))
        if item_id in self.failing:
            raise TransportError("HTTP 404", f"{uri} answered Not Found")
        return self.payload

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def fresh_settings(tmp_path, monkeypatch):
    """Isolate every test from local config.yml/.env files and cached settings."""
    from goesctl.config import reset_settings

    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def now():
    return datetime(2024, 11, 30, 10, 25, 0, tzinfo=timezone.utc)


@pytest.fixture
def window():
    """Three images, from 08:00 to 08:20 UTC."""
    return ResolvedWindow(
        start=datetime(2024, 11, 30, 8, 0, tzinfo=timezone.utc),
        end=datetime(2024, 11, 30, 8, 20, tzinfo=timezone.utc),
        stride=timedelta(minutes=10),
    )


@pytest.fixture
def root_dir(tmp_path):
    """Provide a temporary root directory for downloads."""
    root = tmp_path / "downloads"
    root.mkdir()
    return root


@pytest.fixture
def fake_downloader():
    return FakeDownloader()
