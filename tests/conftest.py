"""Shared fixtures for tests."""
import io
import json
import struct
import pytest
from typing import List

from bukubrow_host.errors import StoreError
from bukubrow_host.models import Bookmark


SAMPLE_BOOKMARKS = [
    {
        "id": None,
        "metadata": "Python Docs",
        "desc": "Official documentation",
        "url": "https://docs.python.org",
        "tags": ",python,docs,",
        "flags": 0,
    },
    {
        "metadata": "SQLite Guide",
        "url": "https://sqlite.org/guide",
    },
    {
        "id": None,
        "metadata": "Stack Overflow",
        "desc": "",
        "url": "https://stackoverflow.com",
        "tags": ",",
        "flags": 1,
    },
]


def frame(message) -> bytes:
    """Encode a JSON value the way the browser does."""
    body = json.dumps(message).encode("utf-8")
    return struct.pack("=I", len(body)) + body


def raw_frame(body: bytes) -> bytes:
    return struct.pack("=I", len(body)) + body


def read_frames(data: bytes) -> list:
    """Decode every frame written to an output buffer."""
    messages = []
    offset = 0
    while offset < len(data):
        (length,) = struct.unpack("=I", data[offset:offset + 4])
        offset += 4
        messages.append(json.loads(data[offset:offset + length].decode("utf-8")))
        offset += length
    return messages


class FakeStore:
    """In-memory stand-in for BookmarkStore that records every call."""

    def __init__(self, bookmarks: List[Bookmark] = None, fail: bool = False):
        self.bookmarks = {b.id: b for b in (bookmarks or [])}
        self.fail = fail
        self.calls = []
        self._next_id = max(self.bookmarks, default=0) + 1

    async def list_bookmarks(self) -> List[Bookmark]:
        self.calls.append(("list",))
        if self.fail:
            raise StoreError("database is locked")
        return [self.bookmarks[k] for k in sorted(self.bookmarks)]

    async def insert(self, bookmark: Bookmark) -> int:
        self.calls.append(("insert", bookmark))
        if self.fail:
            raise StoreError("database is locked")
        new_id = self._next_id
        self._next_id += 1
        self.bookmarks[new_id] = bookmark.with_id(new_id)
        return new_id

    async def update(self, bookmark: Bookmark) -> None:
        self.calls.append(("update", bookmark))
        if self.fail or bookmark.id not in self.bookmarks:
            raise StoreError(f"Bookmark {bookmark.id} not found")
        self.bookmarks[bookmark.id] = bookmark

    async def delete(self, bookmark_id: int) -> None:
        self.calls.append(("delete", bookmark_id))
        if self.fail or bookmark_id not in self.bookmarks:
            raise StoreError(f"Bookmark {bookmark_id} not found")
        del self.bookmarks[bookmark_id]


@pytest.fixture
def sample_bookmarks():
    """Return sample bookmarks as sent by the extension."""
    return [dict(b) for b in SAMPLE_BOOKMARKS]


@pytest.fixture
def stored_bookmarks():
    """Return sample bookmarks as they come back from the store."""
    return [
        Bookmark(id=1, url="https://docs.python.org", title="Python Docs", tags=",python,docs,"),
        Bookmark(id=2, url="https://sqlite.org/guide", title="SQLite Guide"),
    ]


@pytest.fixture
def fake_store(stored_bookmarks):
    return FakeStore(stored_bookmarks)


@pytest.fixture
def db_path(tmp_path):
    """Return path for a temporary bookmarks database."""
    return tmp_path / "buku" / "bookmarks.db"


@pytest.fixture
def output_buffer():
    return io.BytesIO()
