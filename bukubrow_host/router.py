"""Dispatch of decoded requests to the bookmark store."""
from typing import Any, Dict, Optional

from bukubrow_host.config import BINARY_VERSION
from bukubrow_host.errors import StoreError
from bukubrow_host.protocol import (
    CheckBinary,
    CreateBookmark,
    DeleteBookmark,
    ListBookmarks,
    RejectedUpdate,
    Request,
    Unrecognised,
    UpdateBookmark,
    failure,
    outcome,
    parse_request,
    unknown,
)
from bukubrow_host.store import BookmarkStoreProtocol


class Router:
    """Maps each request to a reply, making at most one store call."""

    def __init__(self, store: BookmarkStoreProtocol, binary_version: str = BINARY_VERSION):
        self.store = store
        self.binary_version = binary_version

    async def handle(self, request: Request) -> Dict[str, Any]:
        """Produce the reply for a decoded request.

        Store failures are reported in the reply, never raised. Only GET
        carries the store's error text; mutations report a bare failure.
        """
        if isinstance(request, ListBookmarks):
            return await self._get()
        if isinstance(request, CheckBinary):
            return {"success": True, "binaryVersion": self.binary_version}
        if isinstance(request, CreateBookmark):
            return await self._mutate(self.store.insert(request.bookmark))
        if isinstance(request, UpdateBookmark):
            return await self._mutate(self.store.update(request.bookmark))
        if isinstance(request, RejectedUpdate):
            return outcome(False)
        if isinstance(request, DeleteBookmark):
            return await self._mutate(self.store.delete(request.bookmark_id))
        if isinstance(request, Unrecognised):
            return unknown()
        raise TypeError(f"Unhandled request type: {type(request).__name__}")

    async def route(self, method: Any, data: Optional[Any] = None) -> Dict[str, Any]:
        """Decode ``{"method": method, "data": data}`` and dispatch it."""
        return await self.handle(parse_request({"method": method, "data": data}))

    async def _get(self) -> Dict[str, Any]:
        try:
            bookmarks = await self.store.list_bookmarks()
        except StoreError as e:
            return failure(str(e))

        return {
            "success": True,
            "bookmarks": [bookmark.to_json() for bookmark in bookmarks],
        }

    async def _mutate(self, operation) -> Dict[str, Any]:
        try:
            await operation
        except StoreError:
            return outcome(False)
        return outcome(True)
