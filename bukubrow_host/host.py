"""Protocol loop: one framed request in, one framed reply out."""
import sys
import traceback
from typing import Any, Dict

from bukubrow_host.config import get_config
from bukubrow_host.errors import (
    MessageDecodeError,
    ResponseTooLarge,
    StoreError,
    TransportClosed,
    TransportError,
)
from bukubrow_host.protocol import failure, parse_request, unknown
from bukubrow_host.router import Router
from bukubrow_host.store import BookmarkStore
from bukubrow_host.transport import NativeMessagingTransport


class NativeHost:
    """Drives the read -> decode -> dispatch -> reply cycle.

    Replies are written in request order and the next frame is not read until
    the current reply has been flushed. Only the transport can end the loop.
    """

    def __init__(self, transport: NativeMessagingTransport, router: Router):
        self.transport = transport
        self.router = router

    async def _respond(self, message: Any) -> Dict[str, Any]:
        """Build the reply for one decoded frame. Never raises."""
        request = parse_request(message)
        try:
            return await self.router.handle(request)
        except Exception as e:
            print(
                f"[NativeHost] Unexpected error handling {type(request).__name__}: {e}",
                file=sys.stderr,
            )
            traceback.print_exc(file=sys.stderr)
            return failure(str(e) or type(e).__name__)

    async def _send(self, reply: Dict[str, Any]) -> None:
        try:
            await self.transport.send(reply)
        except ResponseTooLarge as e:
            print(f"[NativeHost] {e}", file=sys.stderr)
            await self.transport.send(failure(str(e)))

    async def serve(self) -> int:
        """Answer requests until the browser closes the connection.

        Returns:
            Number of requests answered
        """
        handled = 0

        while True:
            try:
                message = await self.transport.receive()
            except TransportClosed:
                print("[NativeHost] Browser closed the connection", file=sys.stderr)
                break
            except TransportError as e:
                print(f"[NativeHost] Transport failed, shutting down: {e}", file=sys.stderr)
                break
            except MessageDecodeError as e:
                print(f"[NativeHost] {e}", file=sys.stderr)
                reply = unknown()
            else:
                reply = await self._respond(message)

            try:
                await self._send(reply)
            except TransportError as e:
                print(f"[NativeHost] Could not write reply, shutting down: {e}", file=sys.stderr)
                break

            handled += 1

        return handled


async def main() -> int:
    """Main entry point for the native messaging host."""
    config = get_config()

    # Frames own the real stdout; anything printed goes to stderr instead
    stdin, stdout = sys.stdin.buffer, sys.stdout.buffer
    sys.stdout = sys.stderr

    store = BookmarkStore(config.db_path)
    try:
        await store.initialize()
    except StoreError as e:
        print(f"[NativeHost] {e}", file=sys.stderr)
        return 1

    transport = NativeMessagingTransport(
        stdin, stdout, max_message_size=config.max_message_size
    )
    host = NativeHost(transport, Router(store))

    try:
        handled = await host.serve()
    finally:
        await store.close()

    print(f"[NativeHost] Answered {handled} requests, exiting", file=sys.stderr)
    return 0
