"""websockets adapter — one ServerConnection split into send/receive halves.

Translates the library's ``ConnectionClosed`` family into mdlive's channel
errors.  Ping/pong replies are handled by websockets itself and never reach
the receive half.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from websockets.exceptions import ConnectionClosed
from websockets.frames import CloseCode

from mdlive._errors import ChannelClosed, FrameDecodeError, SendFailure
from mdlive.live.frames import BinaryFrame, CloseFrame, InboundFrame, TextFrame

if TYPE_CHECKING:
    from websockets.asyncio.server import ServerConnection

# Close codes the server sends when it fails a connection over a bad frame
_DECODE_FAILURE_CODES = frozenset({CloseCode.PROTOCOL_ERROR, CloseCode.INVALID_DATA})


def format_peer(address: object) -> str:
    """Format a socket address as ``host:port``."""
    if isinstance(address, tuple) and len(address) >= 2:
        host, port = address[0], address[1]
        if ":" in str(host):
            return f"[{host}]:{port}"
        return f"{host}:{port}"
    return str(address)


class WebSocketSender:
    """Send half: probe pings and text notifications."""

    __slots__ = ("_connection",)

    def __init__(self, connection: ServerConnection) -> None:
        self._connection = connection

    async def ping(self) -> None:
        try:
            await self._connection.ping()
        except ConnectionClosed as exc:
            msg = f"Ping failed: {exc}"
            raise SendFailure(msg) from exc

    async def send_text(self, text: str) -> None:
        try:
            await self._connection.send(text)
        except ConnectionClosed as exc:
            msg = f"Send failed: {exc}"
            raise SendFailure(msg) from exc


class WebSocketReceiver:
    """Receive half: data frames, plus the peer's close frame when one arrives."""

    __slots__ = ("_connection",)

    def __init__(self, connection: ServerConnection) -> None:
        self._connection = connection

    async def receive(self) -> InboundFrame:
        try:
            message = await self._connection.recv()
        except ConnectionClosed as exc:
            if exc.rcvd is not None:
                return CloseFrame(code=exc.rcvd.code, reason=exc.rcvd.reason)
            if exc.sent is not None and exc.sent.code in _DECODE_FAILURE_CODES:
                msg = f"Undecodable frame: {exc}"
                raise FrameDecodeError(msg) from exc
            msg = f"Stream ended: {exc}"
            raise ChannelClosed(msg) from exc
        if isinstance(message, str):
            return TextFrame(message)
        return BinaryFrame(bytes(message))


class WebSocketChannel:
    """A websockets ServerConnection split once into its two halves.

    Args:
        connection: The accepted server-side connection.

    """

    __slots__ = ("_connection", "_peer", "_receiver", "_sender")

    def __init__(self, connection: ServerConnection) -> None:
        self._connection = connection
        self._peer = format_peer(connection.remote_address)
        self._sender = WebSocketSender(connection)
        self._receiver = WebSocketReceiver(connection)

    @property
    def peer(self) -> str:
        return self._peer

    @property
    def sender(self) -> WebSocketSender:
        return self._sender

    @property
    def receiver(self) -> WebSocketReceiver:
        return self._receiver

    async def close(self) -> None:
        """Close the connection. Closing twice is a no-op."""
        await self._connection.close()
