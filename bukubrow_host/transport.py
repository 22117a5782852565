"""Native messaging framing over binary streams.

Each message is a 4-byte length in native byte order followed by that many
bytes of UTF-8 JSON. stdout is reserved for frames; diagnostics go to stderr.
"""
import asyncio
import json
import struct
from typing import Any, BinaryIO

from bukubrow_host.config import DEFAULT_MAX_MESSAGE_SIZE, MAX_RESPONSE_SIZE
from bukubrow_host.errors import (
    MessageDecodeError,
    ResponseTooLarge,
    TransportClosed,
    TransportError,
)

_HEADER = struct.Struct("=I")


def encode_message(message: Any) -> bytes:
    """Encode a JSON value as a length-prefixed frame."""
    body = json.dumps(message, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return _HEADER.pack(len(body)) + body


def decode_body(body: bytes) -> Any:
    """Decode a frame body.

    Raises:
        MessageDecodeError: If the body is not UTF-8 JSON
    """
    try:
        return json.loads(body.decode("utf-8"))
    except (ValueError, RecursionError) as e:
        # ValueError covers UnicodeDecodeError, JSONDecodeError and oversized ints
        raise MessageDecodeError(f"Invalid JSON in native message: {e}") from e


class NativeMessagingTransport:
    """Reads and writes frames on a pair of binary streams (stdin/stdout)."""

    def __init__(
        self,
        reader: BinaryIO,
        writer: BinaryIO,
        max_message_size: int = DEFAULT_MAX_MESSAGE_SIZE,
        max_response_size: int = MAX_RESPONSE_SIZE,
    ):
        self._reader = reader
        self._writer = writer
        self.max_message_size = max_message_size
        self.max_response_size = max_response_size

    def _read_exactly(self, size: int) -> bytes:
        chunks = []
        remaining = size
        while remaining > 0:
            try:
                chunk = self._reader.read(remaining)
            except (OSError, ValueError) as e:
                raise TransportError(f"Failed to read from stdin: {e}") from e
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def _read_frame(self) -> bytes:
        header = self._read_exactly(_HEADER.size)
        if not header:
            raise TransportClosed("stdin closed")
        if len(header) < _HEADER.size:
            raise TransportError(
                f"Truncated length prefix ({len(header)} of {_HEADER.size} bytes)"
            )

        (length,) = _HEADER.unpack(header)
        if length == 0:
            # The stream is still aligned; only this message is unusable
            raise MessageDecodeError("Received zero-length message")
        if length > self.max_message_size:
            raise TransportError(
                f"Message too large: {length} bytes (max {self.max_message_size})"
            )

        body = self._read_exactly(length)
        if len(body) < length:
            raise TransportError(
                f"Truncated message: expected {length} bytes, got {len(body)}"
            )
        return body

    async def receive(self) -> Any:
        """Block until the next frame arrives and return its JSON value.

        Raises:
            TransportClosed: stdin reached EOF between frames
            TransportError: The stream is truncated or carries a bad length
            MessageDecodeError: The frame was complete but not JSON
        """
        body = await asyncio.to_thread(self._read_frame)
        return decode_body(body)

    def _write_frame(self, frame: bytes) -> None:
        try:
            self._writer.write(frame)
            self._writer.flush()
        except (OSError, ValueError) as e:
            raise TransportError(f"Failed to write to stdout: {e}") from e

    async def send(self, message: Any) -> None:
        """Write one JSON value as a frame.

        Raises:
            ResponseTooLarge: Nothing was written; the reply is over the limit
            TransportError: stdout is gone
        """
        frame = encode_message(message)
        body_size = len(frame) - _HEADER.size
        if body_size > self.max_response_size:
            raise ResponseTooLarge(body_size, self.max_response_size)

        await asyncio.to_thread(self._write_frame, frame)
