"""Unified event model for live-reload observability.

Defines event types for the websocket connection lifecycle and the
watch-to-browser notification path. HTTP server lifecycle events are
recorded as-is through ``LiveCollector.record()``.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- ``peer``: The client address the event belongs to

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Connection lifecycle events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ConnectionOpened:
    """A websocket upgrade was accepted.

    Attributes:
        peer: Client address (``host:port``).
        path: Request path of the upgrade.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    peer: str
    path: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ConnectionDestroyed:
    """A connection reached its terminal state and its context was destroyed.

    Attributes:
        peer: Client address.
        first_finished: Which task ended first (``"notifier"``, ``"listener"``),
            or ``"probe"`` when the initial ping failed.
        notifications_sent: Text frames pushed to the client.
        frames_received: Inbound frames processed.
        duration_ms: Time from upgrade to close in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    peer: str
    first_finished: Literal["notifier", "listener", "probe", "cancelled"]
    notifications_sent: int
    frames_received: int
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Notification path events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NotificationSent:
    """A change notification was written to a client."""

    peer: str
    path: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class FrameReceived:
    """An inbound frame was read from a client.

    Attributes:
        peer: Client address.
        kind: Frame variant.
        preview: Shortened, printable payload.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    peer: str
    kind: Literal["text", "binary", "ping", "pong", "close"]
    preview: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class WatchFailed:
    """The watcher reported an error.

    Attributes:
        peer: Client whose watcher failed.
        fatal: True for setup errors (live reload ends for this connection).
        message: Error text.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    peer: str
    fatal: bool
    message: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class TaskFailed:
    """A connection task ended with an unexpected exception.

    Attributes:
        peer: Client address.
        task: ``"notifier"`` or ``"listener"``.
        error: ``repr()`` of the exception.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    peer: str
    task: str
    error: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type LiveEvent = (
    ConnectionOpened
    | ConnectionDestroyed
    | NotificationSent
    | FrameReceived
    | WatchFailed
    | TaskFailed
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
