"""Request decoding and fixed replies for the extension protocol.

Wire format (one JSON object per frame):
  Extension -> Host:  {"method": "GET"|"OPTIONS"|"POST"|"PUT"|"DELETE",
                       "data": {"bookmark": {...}, "bookmark_id": 1}}
  Host -> Extension:  {"success": true|false, ...}

Every decoded frame becomes exactly one of the request classes below, so
the router only has to match over a closed set.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from bukubrow_host.models import Bookmark, BookmarkId, is_bookmark_id

UNKNOWN_MESSAGE = "Unrecognised request type or bad request payload."

METHODS = ("GET", "OPTIONS", "POST", "PUT", "DELETE")


@dataclass(frozen=True)
class ListBookmarks:
    """GET: return every stored bookmark."""


@dataclass(frozen=True)
class CheckBinary:
    """OPTIONS: report the host version."""


@dataclass(frozen=True)
class CreateBookmark:
    """POST: insert a new bookmark."""
    bookmark: Bookmark


@dataclass(frozen=True)
class UpdateBookmark:
    """PUT: overwrite an existing bookmark, identified by bookmark.id."""
    bookmark: Bookmark


@dataclass(frozen=True)
class RejectedUpdate:
    """PUT that arrived without a bookmark id to update."""


@dataclass(frozen=True)
class DeleteBookmark:
    """DELETE: remove a bookmark by id."""
    bookmark_id: BookmarkId


@dataclass(frozen=True)
class Unrecognised:
    """Anything that cannot be routed."""
    reason: str = ""


Request = Union[
    ListBookmarks,
    CheckBinary,
    CreateBookmark,
    UpdateBookmark,
    RejectedUpdate,
    DeleteBookmark,
    Unrecognised,
]


def _parse_data(data: Any) -> Optional[Dict[str, Any]]:
    """Validate the optional ``data`` payload.

    Returns:
        Dict with "bookmark" (Bookmark or None) and "bookmark_id" (int or None),
        or None if data was absent

    Raises:
        ValueError: If data is present but malformed
    """
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError("data must be an object")

    raw_bookmark = data.get("bookmark")
    bookmark = Bookmark.from_json(raw_bookmark) if raw_bookmark is not None else None

    bookmark_id = data.get("bookmark_id")
    if bookmark_id is not None and not is_bookmark_id(bookmark_id):
        raise ValueError("data.bookmark_id must be an integer")

    return {"bookmark": bookmark, "bookmark_id": bookmark_id}


def parse_request(message: Any) -> Request:
    """Decode one JSON value from the transport into a request.

    Never raises: shape problems come back as Unrecognised.

    Args:
        message: Decoded JSON value of a single frame

    Returns:
        One of the request classes
    """
    if not isinstance(message, dict):
        return Unrecognised("request must be an object")

    method = message.get("method")
    if not isinstance(method, str):
        return Unrecognised("method must be a string")
    if method not in METHODS:
        return Unrecognised(f"unsupported method: {method}")

    try:
        data = _parse_data(message.get("data"))
    except ValueError as e:
        return Unrecognised(str(e))

    bookmark = data["bookmark"] if data else None
    bookmark_id = data["bookmark_id"] if data else None

    if method == "GET":
        return ListBookmarks()
    if method == "OPTIONS":
        return CheckBinary()
    if method == "POST":
        if bookmark is None:
            return Unrecognised("POST requires data.bookmark")
        return CreateBookmark(bookmark)
    if method == "PUT":
        # A well-formed update without an id breaks the rule, not the shape
        if bookmark is None or bookmark.id is None:
            return RejectedUpdate()
        return UpdateBookmark(bookmark)
    # DELETE
    if bookmark_id is None:
        return Unrecognised("DELETE requires data.bookmark_id")
    return DeleteBookmark(bookmark_id)


# ----------------------------------------------------------------------------
# Replies
# ----------------------------------------------------------------------------

def unknown() -> Dict[str, Any]:
    """Reply for requests that cannot be routed."""
    return {"success": False, "message": UNKNOWN_MESSAGE}


def outcome(success: bool) -> Dict[str, Any]:
    """Bare success/failure reply used by the mutating methods."""
    return {"success": success}


def failure(message: str) -> Dict[str, Any]:
    return {"success": False, "message": message}
