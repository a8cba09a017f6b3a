"""File watcher — bridges watchfiles change batches into an asyncio consumer.

The watcher runs watchfiles in a background thread and hands every change
to a single callback.  ``create_bridge()`` wires that callback to a
``BridgeQueue``: a one-slot queue owned by the event loop.  When the slot
is full the watcher thread blocks until the consumer drains it, so a burst
of changes never buffers more than one item.

Modification events are split into data and metadata changes by comparing
each file's ``(mtime_ns, size)`` against a snapshot taken when watching
starts; watchfiles itself only reports "modified".
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import stat
import threading
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from watchfiles import Change

from mdlive._errors import WatchError, WatchObservationError, WatchSetupError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


class ChangeKind(StrEnum):
    """Type of filesystem change."""

    CREATED = "created"
    MODIFIED_DATA = "modified_data"
    MODIFIED_METADATA = "modified_metadata"
    REMOVED = "removed"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A file change detected by the watcher.

    Attributes:
        kind: Type of filesystem change.
        paths: Affected paths, absolute, in the order the watcher reported them.

    """

    kind: ChangeKind
    paths: tuple[Path, ...]


type BridgeItem = ChangeEvent | WatchError

# path -> (mtime_ns, size) for regular files under the watched root
type Snapshot = dict[Path, tuple[int, int]]

# How long watchfiles may wait before yielding an empty batch.  The first
# batch (empty or not) tells us the platform watcher initialized.
_HEARTBEAT_MS = 1_000


def snapshot_tree(root: Path, *, recursive: bool = True) -> Snapshot:
    """Record ``(mtime_ns, size)`` for every regular file under *root*."""
    results: Snapshot = {}
    paths = root.rglob("*") if recursive else root.glob("*")
    for path in paths:
        try:
            st = path.stat()
        except OSError:
            continue
        if stat.S_ISREG(st.st_mode):
            results[path] = (st.st_mtime_ns, st.st_size)
    return results


def classify_change(change: Change, path: Path, snapshot: Snapshot) -> ChangeKind:
    """Map a watchfiles change to a ChangeKind, updating *snapshot* in place.

    A modification counts as metadata-only when ``(mtime_ns, size)`` is
    unchanged since the last look.  Anything that bumps the mtime without
    touching the bytes (``touch``, ``os.utime``) is therefore reported as
    ``MODIFIED_DATA`` and reloads the page.
    """
    if change == Change.deleted:
        snapshot.pop(path, None)
        return ChangeKind.REMOVED

    try:
        st = path.stat()
    except OSError:
        # Gone again before we looked at it
        snapshot.pop(path, None)
        return ChangeKind.OTHER

    is_file = stat.S_ISREG(st.st_mode)
    current = (st.st_mtime_ns, st.st_size)

    if change == Change.added:
        if is_file:
            snapshot[path] = current
        return ChangeKind.CREATED

    if not is_file:
        return ChangeKind.OTHER

    previous = snapshot.get(path)
    snapshot[path] = current
    if previous == current:
        return ChangeKind.MODIFIED_METADATA
    return ChangeKind.MODIFIED_DATA


def events_from_batch(
    raw_changes: set[tuple[Change, str]],
    snapshot: Snapshot,
) -> Iterator[ChangeEvent]:
    """Turn one watchfiles batch into ChangeEvents, in sorted path order."""
    for change, path_str in sorted(raw_changes, key=lambda c: (c[1], c[0])):
        path = Path(path_str)
        yield ChangeEvent(kind=classify_change(change, path, snapshot), paths=(path,))


class BridgeQueue:
    """Single-slot hand-off from the watcher thread to one asyncio consumer.

    The producer calls ``put_blocking()`` from the watcher thread; the
    consumer iterates with ``async for``.  Iteration ends once the queue is
    closed and the buffered item (if any) has been drained.

    Args:
        loop: Event loop the consumer runs on.
        poll_interval: How often a blocked producer re-checks for close.

    """

    def __init__(self, loop: asyncio.AbstractEventLoop, *, poll_interval: float = 0.1) -> None:
        self._loop = loop
        self._queue: asyncio.Queue[BridgeItem] = asyncio.Queue(maxsize=1)
        self._closed = threading.Event()
        self._poll_interval = poll_interval

    @property
    def closed(self) -> bool:
        """Whether ``close()`` has been called."""
        return self._closed.is_set()

    def qsize(self) -> int:
        """Number of buffered items (0 or 1)."""
        return self._queue.qsize()

    def put_blocking(self, item: BridgeItem) -> bool:
        """Enqueue *item*, blocking the calling thread while the slot is full.

        Must not be called from the event loop thread.  Returns False if the
        queue was closed before the item could be enqueued.

        """
        if self._closed.is_set() or self._loop.is_closed():
            return False
        future = asyncio.run_coroutine_threadsafe(self._queue.put(item), self._loop)
        while True:
            try:
                future.result(timeout=self._poll_interval)
            except TimeoutError:
                if self._closed.is_set() and future.cancel():
                    return False
            except (asyncio.QueueShutDown, concurrent.futures.CancelledError):
                return False
            else:
                return True

    def close(self) -> None:
        """Close the queue. Safe to call from any thread, more than once."""
        if self._closed.is_set():
            return
        self._closed.set()
        if self._in_loop_thread():
            self._queue.shutdown()
        elif not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._queue.shutdown)

    def _in_loop_thread(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def __aiter__(self) -> BridgeQueue:
        return self

    async def __anext__(self) -> BridgeItem:
        try:
            return await self._queue.get()
        except asyncio.QueueShutDown:
            raise StopAsyncIteration from None


class ChangeEventSource:
    """Watches a directory tree and hands each change to a callback.

    Uses watchfiles for efficient filesystem monitoring in a daemon thread.
    The callback runs on that thread; it returns False to ask the source to
    stop (e.g. the consumer went away).

    Args:
        callback: Receives a ChangeEvent or a WatchError per observation.
        debounce_ms: watchfiles debounce window.
        step_ms: watchfiles step; also bounds how quickly ``stop()`` is seen.
        on_stop: Called once the source stops, from whichever thread stops it.

    """

    def __init__(
        self,
        callback: Callable[[BridgeItem], bool],
        *,
        debounce_ms: int = 300,
        step_ms: int = 100,
        on_stop: Callable[[], None] | None = None,
    ) -> None:
        self._callback = callback
        self._debounce_ms = debounce_ms
        self._step_ms = step_ms
        self._on_stop = on_stop
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        """Whether the watcher background thread is active."""
        return self._thread is not None and self._thread.is_alive()

    def watch(self, root: Path, *, recursive: bool = True) -> None:
        """Start watching *root* in a background thread.

        Raises:
            WatchSetupError: If *root* is missing or not a directory, or if
                this source is already watching.

        """
        if self.is_running:
            msg = "Watcher is already running"
            raise WatchSetupError(msg)
        root = Path(root)
        if not root.exists():
            msg = f"Watch root {root} does not exist"
            raise WatchSetupError(msg)
        if not root.is_dir():
            msg = f"Watch root {root} is not a directory"
            raise WatchSetupError(msg)

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._watch_loop,
            args=(root.resolve(), recursive),
            name="mdlive-watcher",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the watcher to stop. Does not wait for the thread."""
        self._stop_event.set()
        if self._on_stop is not None:
            self._on_stop()

    def join(self, timeout: float = 5.0) -> None:
        """Wait for the watcher thread to finish."""
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    def _watch_loop(self, root: Path, recursive: bool) -> None:
        """Background thread: run watchfiles and hand events to the callback."""
        from watchfiles import watch

        snapshot = snapshot_tree(root, recursive=recursive)
        started = False
        try:
            while not self._stop_event.is_set():
                try:
                    for raw_changes in watch(
                        root,
                        stop_event=self._stop_event,
                        debounce=self._debounce_ms,
                        step=self._step_ms,
                        rust_timeout=_HEARTBEAT_MS,
                        yield_on_timeout=True,
                        recursive=recursive,
                        raise_interrupt=False,
                    ):
                        started = True
                        for event in events_from_batch(raw_changes, snapshot):
                            if not self._callback(event):
                                return
                except (OSError, RuntimeError) as exc:
                    if not started:
                        self._callback(WatchSetupError(f"Cannot watch {root}: {exc}"))
                        return
                    if not self._callback(WatchObservationError(f"Watching {root} failed: {exc}")):
                        return
                    if not root.is_dir():
                        return
                    self._stop_event.wait(self._step_ms / 1000)
        finally:
            self._stop_event.set()
            if self._on_stop is not None:
                self._on_stop()


def create_bridge(
    *,
    debounce_ms: int = 300,
    step_ms: int = 100,
) -> tuple[ChangeEventSource, BridgeQueue]:
    """Create a watcher whose callback feeds a fresh one-slot BridgeQueue.

    Must be called from the running event loop that will consume the queue.
    Stopping the watcher closes the queue, which ends the consumer's
    ``async for`` once the buffered item is drained.

    """
    loop = asyncio.get_running_loop()
    queue = BridgeQueue(loop, poll_interval=step_ms / 1000)
    source = ChangeEventSource(
        queue.put_blocking,
        debounce_ms=debounce_ms,
        step_ms=step_ms,
        on_stop=queue.close,
    )
    return source, queue
