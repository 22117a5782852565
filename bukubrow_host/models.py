"""Bookmark record and its wire representation."""
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

# Store-assigned row id
BookmarkId = int

# SQLite INTEGER range
_INT64_MIN = -2 ** 63
_INT64_MAX = 2 ** 63 - 1


def is_bookmark_id(value: Any) -> bool:
    """True if value is an integer SQLite can store (bools are not ids)."""
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    return _INT64_MIN <= value <= _INT64_MAX


@dataclass(frozen=True)
class Bookmark:
    """A bookmark as stored in buku's ``bookmarks`` table.

    ``title`` travels as ``metadata`` on the wire, matching the column name.
    ``tags`` keeps buku's comma-delimited form, e.g. ``",python,docs,"``.
    """
    url: str
    title: str
    desc: str = ""
    tags: str = ","
    flags: int = 0
    id: Optional[BookmarkId] = None

    def with_id(self, bookmark_id: BookmarkId) -> "Bookmark":
        return replace(self, id=bookmark_id)

    @classmethod
    def from_json(cls, data: Any) -> "Bookmark":
        """Build a Bookmark from its decoded JSON form.

        Args:
            data: Decoded JSON object sent by the extension

        Returns:
            Bookmark instance

        Raises:
            ValueError: If the object does not have the bookmark shape
        """
        if not isinstance(data, dict):
            raise ValueError("bookmark must be an object")

        url = data.get("url")
        title = data.get("metadata")
        if not isinstance(url, str):
            raise ValueError("bookmark.url must be a string")
        if not isinstance(title, str):
            raise ValueError("bookmark.metadata must be a string")

        desc = data.get("desc", "")
        tags = data.get("tags", ",")
        flags = data.get("flags", 0)
        bookmark_id = data.get("id")

        if desc is None:
            desc = ""
        if tags is None:
            tags = ","
        if flags is None:
            flags = 0

        if not isinstance(desc, str):
            raise ValueError("bookmark.desc must be a string")
        if not isinstance(tags, str):
            raise ValueError("bookmark.tags must be a string")
        if not is_bookmark_id(flags):
            raise ValueError("bookmark.flags must be an integer")
        if bookmark_id is not None and not is_bookmark_id(bookmark_id):
            raise ValueError("bookmark.id must be an integer")

        return cls(
            url=url,
            title=title,
            desc=desc,
            tags=tags,
            flags=flags,
            id=bookmark_id,
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "metadata": self.title,
            "desc": self.desc,
            "url": self.url,
            "tags": self.tags,
            "flags": self.flags,
        }
