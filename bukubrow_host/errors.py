"""Exceptions raised by the native messaging host.

Transport errors are fatal to the protocol loop; every other error is
answered with a reply and the loop carries on.
"""


class HostError(Exception):
    """Base class for native messaging host errors."""


class TransportError(HostError):
    """The framed stream is unusable (truncated frame, bad length, broken pipe)."""


class TransportClosed(TransportError):
    """The browser closed stdin at a frame boundary."""


class MessageDecodeError(HostError):
    """A complete frame arrived but its body is not UTF-8 JSON."""


class ResponseTooLarge(HostError):
    """An encoded reply exceeds what the browser accepts."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Response of {size} bytes exceeds the {limit} byte limit")
        self.size = size
        self.limit = limit


class StoreError(HostError):
    """A bookmark database operation failed."""
