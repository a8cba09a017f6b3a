"""Live layer — watch-to-browser notifications over websockets.

Each websocket client gets a supervisor that races a notifier (file
changes out) against a listener (client frames in) and tears both down
when either ends.
"""

from mdlive.live.channel import WebSocketChannel
from mdlive.live.frames import (
    BinaryFrame,
    CloseFrame,
    InboundFrame,
    PingFrame,
    PongFrame,
    TextFrame,
)
from mdlive.live.listener import listen_frames
from mdlive.live.notifier import format_notification, notify_changes
from mdlive.live.server import LiveReloadServer
from mdlive.live.supervisor import ConnectionOutcome, ConnectionState, ConnectionSupervisor

__all__ = [
    "BinaryFrame",
    "CloseFrame",
    "ConnectionOutcome",
    "ConnectionState",
    "ConnectionSupervisor",
    "InboundFrame",
    "LiveReloadServer",
    "PingFrame",
    "PongFrame",
    "TextFrame",
    "WebSocketChannel",
    "format_notification",
    "listen_frames",
    "notify_changes",
]
