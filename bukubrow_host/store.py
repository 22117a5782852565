"""SQLite bookmark store, compatible with buku's database."""
import sqlite3
import sys
from pathlib import Path
from typing import List, Optional, Protocol

import aiosqlite

from bukubrow_host.errors import StoreError
from bukubrow_host.models import Bookmark, BookmarkId


class BookmarkStoreProtocol(Protocol):
    """The four operations the router needs from a store."""

    async def list_bookmarks(self) -> List[Bookmark]:
        ...

    async def insert(self, bookmark: Bookmark) -> BookmarkId:
        ...

    async def update(self, bookmark: Bookmark) -> None:
        ...

    async def delete(self, bookmark_id: BookmarkId) -> None:
        ...


class BookmarkStore:
    """Async SQLite store over buku's ``bookmarks`` table."""

    def __init__(self, db_path: Path):
        """Initialize the bookmark store.

        Args:
            db_path: Path to the SQLite database (buku's bookmarks.db)
        """
        self.db_path = db_path
        self._connection: Optional[aiosqlite.Connection] = None

    async def initialize(self) -> None:
        """Open the database, creating the bookmarks table if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row

            # Same layout buku creates, so both tools share one file
            await self._connection.execute("""
                CREATE TABLE IF NOT EXISTS bookmarks (
                    id INTEGER PRIMARY KEY,
                    URL TEXT NOT NULL UNIQUE,
                    metadata TEXT DEFAULT '',
                    tags TEXT DEFAULT ',',
                    desc TEXT DEFAULT '',
                    flags INTEGER DEFAULT 0
                )
            """)
            await self._connection.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Could not open bookmarks database at {self.db_path}: {e}") from e

        print(f"[BookmarkStore] Using database {self.db_path}", file=sys.stderr)

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    def _require_connection(self) -> aiosqlite.Connection:
        if not self._connection:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._connection

    async def list_bookmarks(self) -> List[Bookmark]:
        """Get every stored bookmark.

        Returns:
            Bookmarks ordered by id
        """
        connection = self._require_connection()

        try:
            cursor = await connection.execute(
                "SELECT id, URL, metadata, tags, desc, flags FROM bookmarks ORDER BY id"
            )
            rows = await cursor.fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to list bookmarks: {e}") from e

        return [self._row_to_bookmark(row) for row in rows]

    async def insert(self, bookmark: Bookmark) -> BookmarkId:
        """Insert a new bookmark. Any id on the bookmark is ignored.

        Args:
            bookmark: Bookmark to store

        Returns:
            Id assigned by the database

        Raises:
            StoreError: On database failure, including a duplicate URL
        """
        connection = self._require_connection()

        try:
            cursor = await connection.execute(
                "INSERT INTO bookmarks (URL, metadata, tags, desc, flags) VALUES (?, ?, ?, ?, ?)",
                (bookmark.url, bookmark.title, bookmark.tags, bookmark.desc, bookmark.flags),
            )
            await connection.commit()
        except (sqlite3.Error, OverflowError) as e:
            raise StoreError(f"Failed to add bookmark {bookmark.url}: {e}") from e

        return cursor.lastrowid

    async def update(self, bookmark: Bookmark) -> None:
        """Overwrite the stored bookmark with the same id.

        Raises:
            StoreError: If the bookmark has no id, no row matches, or the write fails
        """
        connection = self._require_connection()

        if bookmark.id is None:
            raise StoreError("Cannot update a bookmark without an id")

        try:
            cursor = await connection.execute(
                """
                UPDATE bookmarks
                SET URL = ?, metadata = ?, tags = ?, desc = ?, flags = ?
                WHERE id = ?
                """,
                (bookmark.url, bookmark.title, bookmark.tags, bookmark.desc,
                 bookmark.flags, bookmark.id),
            )
            await connection.commit()
        except (sqlite3.Error, OverflowError) as e:
            raise StoreError(f"Failed to update bookmark {bookmark.id}: {e}") from e

        if cursor.rowcount == 0:
            raise StoreError(f"Bookmark {bookmark.id} not found")

    async def delete(self, bookmark_id: BookmarkId) -> None:
        """Delete a bookmark by id.

        Raises:
            StoreError: If no row matches or the write fails
        """
        connection = self._require_connection()

        try:
            cursor = await connection.execute(
                "DELETE FROM bookmarks WHERE id = ?",
                (bookmark_id,),
            )
            await connection.commit()
        except (sqlite3.Error, OverflowError) as e:
            raise StoreError(f"Failed to delete bookmark {bookmark_id}: {e}") from e

        if cursor.rowcount == 0:
            raise StoreError(f"Bookmark {bookmark_id} not found")

    def _row_to_bookmark(self, row: aiosqlite.Row) -> Bookmark:
        """Convert a database row to a Bookmark."""
        return Bookmark(
            id=row["id"],
            url=row["URL"],
            title=row["metadata"] or "",
            desc=row["desc"] or "",
            tags=row["tags"] or ",",
            flags=row["flags"] or 0,
        )
