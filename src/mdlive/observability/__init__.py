"""Live-reload observability — one event model for the connection lifecycle.

Aggregates events from:
- **HTTP server**: lifecycle events passed through ``LiveCollector.record()``
- **Websocket side**: upgrades, notifications, inbound frames, watcher errors

All events are frozen dataclasses with nanosecond timestamps, safe for
concurrent production from the event loop and watcher threads.

Quick Start:
    >>> from mdlive.observability import EventLog, LiveCollector
    >>> collector = LiveCollector(EventLog(), verbose=False)
    >>> collector.record_notification("127.0.0.1:5000", "/docs/readme.md")
    >>> len(collector.log)
    1

"""

from mdlive.observability.collector import LiveCollector
from mdlive.observability.events import (
    ConnectionDestroyed,
    ConnectionOpened,
    FrameReceived,
    LiveEvent,
    NotificationSent,
    TaskFailed,
    WatchFailed,
    now_ns,
)
from mdlive.observability.log import EventLog

__all__ = [
    "ConnectionDestroyed",
    "ConnectionOpened",
    "EventLog",
    "FrameReceived",
    "LiveCollector",
    "LiveEvent",
    "NotificationSent",
    "TaskFailed",
    "WatchFailed",
    "now_ns",
]
