"""Shared test fixtures for mdlive."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest

from mdlive._errors import ChannelClosed, SendFailure, WatchSetupError
from mdlive.observability import EventLog, LiveCollector


@pytest.fixture
def tmp_docs(tmp_path: Path) -> Path:
    """Create a minimal project: ``www/`` with two documents and a subdirectory.

    Returns the project root.
    """
    www = tmp_path / "www"
    www.mkdir()
    (www / "readme.md").write_text("# Readme\n\nHello *world*.\n")
    guide = www / "guide"
    guide.mkdir()
    (guide / "intro.md").write_text("Intro text.\n")
    return tmp_path


@pytest.fixture
def collector() -> LiveCollector:
    """A quiet collector backed by a fresh EventLog."""
    return LiveCollector(EventLog(), verbose=False)


# ---------------------------------------------------------------------------
# Fake channel halves
# ---------------------------------------------------------------------------


class FakeSender:
    """Send half recording every text frame.

    Args:
        fail_ping: Raise SendFailure from ``ping()``.
        fail_after: Raise SendFailure once this many texts were sent.

    """

    def __init__(self, *, fail_ping: bool = False, fail_after: int | None = None) -> None:
        self.fail_ping = fail_ping
        self.fail_after = fail_after
        self.pings = 0
        self.texts: list[str] = []

    async def ping(self) -> None:
        self.pings += 1
        if self.fail_ping:
            msg = "peer is gone"
            raise SendFailure(msg)

    async def send_text(self, text: str) -> None:
        if self.fail_after is not None and len(self.texts) >= self.fail_after:
            msg = "peer is gone"
            raise SendFailure(msg)
        self.texts.append(text)


class FakeReceiver:
    """Receive half fed by the test; blocks until a frame is pushed."""

    _END = object()

    def __init__(self) -> None:
        self._frames: asyncio.Queue[Any] = asyncio.Queue()

    def push(self, frame: Any) -> None:
        self._frames.put_nowait(frame)

    def end(self) -> None:
        """Make the next ``receive()`` report a closed stream."""
        self._frames.put_nowait(self._END)

    async def receive(self) -> Any:
        frame = await self._frames.get()
        if frame is self._END:
            msg = "stream ended"
            raise ChannelClosed(msg)
        return frame


class FakeChannel:
    """Channel made of a FakeSender and a FakeReceiver."""

    def __init__(self, sender: FakeSender | None = None, peer: str = "127.0.0.1:50000") -> None:
        self.peer = peer
        self.sender = sender or FakeSender()
        self.receiver = FakeReceiver()
        self.close_calls = 0

    async def close(self) -> None:
        self.close_calls += 1


# ---------------------------------------------------------------------------
# Scripted bridge
# ---------------------------------------------------------------------------


class ScriptedQueue:
    """Unbounded stand-in for BridgeQueue that the test feeds directly."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self.closed = False

    def put(self, item: Any) -> None:
        self._queue.put_nowait(item)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._queue.shutdown()

    def __aiter__(self) -> ScriptedQueue:
        return self

    async def __anext__(self) -> Any:
        try:
            return await self._queue.get()
        except asyncio.QueueShutDown:
            raise StopAsyncIteration from None


class ScriptedWatcher:
    """Stand-in for ChangeEventSource; stopping it closes the queue."""

    def __init__(self, queue: ScriptedQueue, setup_error: str | None = None) -> None:
        self.queue = queue
        self.setup_error = setup_error
        self.watched: list[Path] = []
        self.stopped = False

    def watch(self, root: Path, *, recursive: bool = True) -> None:
        if self.setup_error is not None:
            raise WatchSetupError(self.setup_error)
        self.watched.append(root)

    def stop(self) -> None:
        self.stopped = True
        self.queue.close()


class ScriptedBridge:
    """Bridge factory handing out one scripted watcher/queue pair per call.

    Items given up front are queued before the consumer starts; pass
    ``close=True`` to close the queue after them.
    """

    def __init__(
        self,
        items: list[Any] | None = None,
        *,
        close: bool = False,
        setup_error: str | None = None,
    ) -> None:
        self.items = list(items or [])
        self.close = close
        self.setup_error = setup_error
        self.watchers: list[ScriptedWatcher] = []

    @property
    def watcher(self) -> ScriptedWatcher:
        return self.watchers[-1]

    def __call__(self, **_kwargs: Any) -> tuple[ScriptedWatcher, ScriptedQueue]:
        queue = ScriptedQueue()
        for item in self.items:
            queue.put(item)
        if self.close:
            queue.close()
        watcher = ScriptedWatcher(queue, self.setup_error)
        self.watchers.append(watcher)
        return watcher, queue
