"""Websocket frame model and the two channel halves.

A connection's channel is split once into a send half (owned by the
notifier task) and a receive half (owned by the listener task).  Transports
implement the two protocols below; tests use in-memory fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol


@dataclass(frozen=True, slots=True)
class TextFrame:
    data: str


@dataclass(frozen=True, slots=True)
class BinaryFrame:
    data: bytes


@dataclass(frozen=True, slots=True)
class PingFrame:
    data: bytes = b""


@dataclass(frozen=True, slots=True)
class PongFrame:
    data: bytes = b""


@dataclass(frozen=True, slots=True)
class CloseFrame:
    """Peer asked to close. ``code`` is None when the frame carried no status."""

    code: int | None = None
    reason: str = ""


type InboundFrame = TextFrame | BinaryFrame | PingFrame | PongFrame | CloseFrame

type FrameKind = Literal["text", "binary", "ping", "pong", "close"]


def frame_kind(frame: InboundFrame) -> FrameKind:
    """Return the short name of a frame variant."""
    if isinstance(frame, TextFrame):
        return "text"
    if isinstance(frame, BinaryFrame):
        return "binary"
    if isinstance(frame, PingFrame):
        return "ping"
    if isinstance(frame, PongFrame):
        return "pong"
    return "close"


def frame_payload(frame: InboundFrame) -> str | bytes:
    """Return the payload of a frame for diagnostics."""
    if isinstance(frame, CloseFrame):
        if frame.code is None:
            return frame.reason
        return f"{frame.code} {frame.reason}".rstrip()
    return frame.data


class SendHalf(Protocol):
    """Outbound half of a channel.

    Both methods raise ``SendFailure`` when the peer is gone.
    """

    async def ping(self) -> None: ...

    async def send_text(self, text: str) -> None: ...


class ReceiveHalf(Protocol):
    """Inbound half of a channel.

    ``receive()`` raises ``ChannelClosed`` when the stream ends without a
    close frame and ``FrameDecodeError`` for an undecodable frame.
    """

    async def receive(self) -> InboundFrame: ...


class Channel(Protocol):
    """A client connection, split into its two halves."""

    @property
    def peer(self) -> str: ...

    @property
    def sender(self) -> SendHalf: ...

    @property
    def receiver(self) -> ReceiveHalf: ...

    async def close(self) -> None: ...
