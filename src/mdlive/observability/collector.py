"""Live collector — records connection and notification events.

Implements the HTTP server's ``LifecycleCollector`` protocol (``record()``)
so it can be passed to ``App.run()``, and provides explicit methods for the
websocket side: connection open/close, notifications, inbound frames and
watcher failures.

Every websocket event is appended to the ``EventLog``; when ``verbose`` is
set a one-line diagnostic is also printed to stderr.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.
    ``print`` to stderr is line-buffered and safe to call from any thread.

"""

from __future__ import annotations

import sys
from typing import Any, Literal

from mdlive.observability.events import (
    ConnectionDestroyed,
    ConnectionOpened,
    FrameReceived,
    NotificationSent,
    TaskFailed,
    WatchFailed,
    now_ns,
)
from mdlive.observability.log import EventLog

# Longest payload preview kept for inbound frames
_PREVIEW_CHARS = 60


def preview_payload(data: str | bytes) -> str:
    """Return a short printable preview of a frame payload."""
    text = repr(data) if isinstance(data, bytes) else data
    text = text.replace("\n", "\\n")
    if len(text) > _PREVIEW_CHARS:
        return text[: _PREVIEW_CHARS - 3] + "..."
    return text


class LiveCollector:
    """Unified event collector for the HTTP and websocket sides.

    Args:
        log: The EventLog to store events in.
        verbose: Print a diagnostic line to stderr per websocket event.

    """

    __slots__ = ("_log", "_verbose")

    def __init__(self, log: EventLog | None = None, *, verbose: bool = True) -> None:
        self._log = log if log is not None else EventLog()
        self._verbose = verbose

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- HTTP server LifecycleCollector protocol -----

    def record(self, event: Any) -> None:
        """Record an HTTP server lifecycle event as-is."""
        self._log.append(event)

    # ----- Connection lifecycle -----

    def record_open(self, peer: str, path: str) -> None:
        """Record an accepted websocket upgrade."""
        self._log.append(ConnectionOpened(peer=peer, path=path, timestamp_ns=now_ns()))
        self._emit(f"{peer} connected on {path}")

    def record_close(
        self,
        peer: str,
        *,
        first_finished: Literal["notifier", "listener", "probe", "cancelled"],
        notifications_sent: int = 0,
        frames_received: int = 0,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a connection reaching its terminal state."""
        self._log.append(
            ConnectionDestroyed(
                peer=peer,
                first_finished=first_finished,
                notifications_sent=notifications_sent,
                frames_received=frames_received,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )
        self._emit(
            f"context for {peer} destroyed "
            f"({first_finished} finished first, {notifications_sent} sent, "
            f"{frames_received} received, {duration_ms:.0f}ms)"
        )

    # ----- Notification path -----

    def record_notification(self, peer: str, path: str) -> None:
        """Record a change notification pushed to a client."""
        self._log.append(NotificationSent(peer=peer, path=path, timestamp_ns=now_ns()))
        self._emit(f"{peer} <- File changed {path}")

    def record_frame(
        self,
        peer: str,
        kind: Literal["text", "binary", "ping", "pong", "close"],
        payload: str | bytes,
    ) -> None:
        """Record an inbound frame."""
        preview = preview_payload(payload)
        self._log.append(
            FrameReceived(peer=peer, kind=kind, preview=preview, timestamp_ns=now_ns())
        )
        self._emit(f"{peer} sent {kind} frame: {preview}")

    def record_watch_error(self, peer: str, exc: BaseException, *, fatal: bool) -> None:
        """Record a watcher failure (setup errors are fatal)."""
        self._log.append(
            WatchFailed(peer=peer, fatal=fatal, message=str(exc), timestamp_ns=now_ns())
        )
        label = "watch setup failed" if fatal else "watch error"
        self._emit(f"{peer} {label}: {exc}")

    def record_task_error(self, peer: str, task: str, exc: BaseException) -> None:
        """Record a connection task that ended with an unexpected exception."""
        self._log.append(
            TaskFailed(peer=peer, task=task, error=repr(exc), timestamp_ns=now_ns())
        )
        self._emit(f"{peer} {task} task failed: {exc!r}")

    def _emit(self, line: str) -> None:
        if self._verbose:
            print(f"  [ws] {line}", file=sys.stderr)
