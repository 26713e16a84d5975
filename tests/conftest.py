import pytest

from career_compass.sinks import BufferSink
from career_compass.store import MemorySubstrate, SqliteSubstrate, Store
from career_compass.workspace import Workspace


class FailingSink:
    """Stands in for an unavailable clipboard or download."""

    def __init__(self):
        self.calls = 0

    def write(self, text):
        self.calls += 1
        return False


class RaisingSink:
    def write(self, text):
        raise RuntimeError("clipboard unavailable")


@pytest.fixture
def substrate():
    return MemorySubstrate()


@pytest.fixture
def store(substrate):
    return Store(substrate, root="roadmap")


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite:///{tmp_path / 'compass.db'}"


@pytest.fixture
def sqlite_substrate(sqlite_url):
    sub = SqliteSubstrate.open(sqlite_url)
    yield sub
    sub.close()


@pytest.fixture
def buffer_sink():
    return BufferSink()


@pytest.fixture
def failing_sink():
    return FailingSink()


@pytest.fixture
def workspace(store, buffer_sink):
    return Workspace(store, buffer_sink)


@pytest.fixture
def raising_sink():
    return RaisingSink()
