"""Connection supervisor — races the notifier and listener of one client.

Lifecycle::

    HANDSHAKING --probe ok--> ACTIVE --first task done--> DRAINING --> CLOSED
         |                                                             ^
         +----------------------probe failed---------------------------+

``HANDSHAKING`` sends a ping; if the peer is already gone no task is
spawned.  ``ACTIVE`` runs the notifier (send half) and listener (receive
half) as independent tasks.  Whichever finishes first moves the connection
to ``DRAINING``, where the sibling is cancelled and awaited.  ``CLOSED``
closes the channel and records the destroyed context exactly once.

Errors never cross from one task into the other: a task that raises is
recorded and treated like a task that returned.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

from mdlive._errors import SendFailure
from mdlive.content.watcher import create_bridge
from mdlive.live.listener import listen_frames
from mdlive.live.notifier import notify_changes

if TYPE_CHECKING:
    from pathlib import Path

    from mdlive._types import BridgeFactory, TaskFunc
    from mdlive.live.frames import Channel, InboundFrame, ReceiveHalf, SendHalf
    from mdlive.observability.collector import LiveCollector


class ConnectionState(StrEnum):
    HANDSHAKING = "handshaking"
    ACTIVE = "active"
    DRAINING = "draining"
    CLOSED = "closed"


_TRANSITIONS: dict[ConnectionState, frozenset[ConnectionState]] = {
    ConnectionState.HANDSHAKING: frozenset({ConnectionState.ACTIVE, ConnectionState.CLOSED}),
    ConnectionState.ACTIVE: frozenset({ConnectionState.DRAINING}),
    ConnectionState.DRAINING: frozenset({ConnectionState.CLOSED}),
    ConnectionState.CLOSED: frozenset(),
}

type FirstFinished = Literal["notifier", "listener", "probe", "cancelled"]


@dataclass(frozen=True, slots=True)
class ConnectionOutcome:
    """Summary of a finished connection.

    Attributes:
        peer: Client address.
        first_finished: Which task ended first, ``"probe"`` if the initial
            ping failed, ``"cancelled"`` if the supervisor was aborted.
        notifications_sent: Text frames delivered to the client.
        frames_received: Inbound frames read from the client.
        history: Every state the connection went through, in order.

    """

    peer: str
    first_finished: FirstFinished
    notifications_sent: int
    frames_received: int
    history: tuple[ConnectionState, ...]


class _CountingSender:
    """Send half that counts delivered text frames."""

    __slots__ = ("_inner", "sent")

    def __init__(self, inner: SendHalf) -> None:
        self._inner = inner
        self.sent = 0

    async def ping(self) -> None:
        await self._inner.ping()

    async def send_text(self, text: str) -> None:
        await self._inner.send_text(text)
        self.sent += 1


class _CountingReceiver:
    """Receive half that counts frames handed to the listener."""

    __slots__ = ("_inner", "received")

    def __init__(self, inner: ReceiveHalf) -> None:
        self._inner = inner
        self.received = 0

    async def receive(self) -> InboundFrame:
        frame = await self._inner.receive()
        self.received += 1
        return frame


class ConnectionSupervisor:
    """Owns one client connection and the two tasks serving it.

    Args:
        channel: The accepted connection, already split into halves.
        root: Directory the notifier watches.
        collector: Receives connection, frame and notification events.
        notifier: Coroutine function run on the send half.
        listener: Coroutine function run on the receive half.
        bridge_factory: Passed to the notifier to create its watcher.

    """

    def __init__(
        self,
        channel: Channel,
        root: Path,
        *,
        collector: LiveCollector,
        notifier: TaskFunc = notify_changes,
        listener: TaskFunc = listen_frames,
        bridge_factory: BridgeFactory = create_bridge,
    ) -> None:
        self._channel = channel
        self._root = root
        self._collector = collector
        self._notifier = notifier
        self._listener = listener
        self._bridge_factory = bridge_factory
        self._sender = _CountingSender(channel.sender)
        self._receiver = _CountingReceiver(channel.receiver)
        self._state = ConnectionState.HANDSHAKING
        self._history: list[ConnectionState] = [ConnectionState.HANDSHAKING]
        self._tasks: tuple[asyncio.Task[int], ...] = ()
        self._first_finished: FirstFinished = "cancelled"
        self._aborted = False
        self._closed = asyncio.Event()
        self._t0 = time.perf_counter()

    @property
    def peer(self) -> str:
        return self._channel.peer

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def history(self) -> tuple[ConnectionState, ...]:
        return tuple(self._history)

    @property
    def outcome(self) -> ConnectionOutcome:
        return ConnectionOutcome(
            peer=self.peer,
            first_finished=self._first_finished,
            notifications_sent=self._sender.sent,
            frames_received=self._receiver.received,
            history=self.history,
        )

    async def run(self) -> ConnectionOutcome:
        """Drive the connection from handshake to close.

        Raises:
            RuntimeError: If called more than once.

        """
        if self._state is not ConnectionState.HANDSHAKING or self._tasks:
            msg = f"Connection {self.peer} already ran (state: {self._state})"
            raise RuntimeError(msg)

        try:
            await self._sender.ping()
        except SendFailure:
            self._first_finished = "probe"
            await self._finish()
            return self.outcome
        except asyncio.CancelledError:
            await self._finish()
            raise
        if self._state is ConnectionState.CLOSED:
            # close() won the race against the probe
            return self.outcome

        notifier_task = asyncio.create_task(
            self._notifier(
                self._sender,
                self._root,
                peer=self.peer,
                collector=self._collector,
                bridge_factory=self._bridge_factory,
            ),
            name=f"mdlive-notifier[{self.peer}]",
        )
        listener_task = asyncio.create_task(
            self._listener(self._receiver, peer=self.peer, collector=self._collector),
            name=f"mdlive-listener[{self.peer}]",
        )
        self._tasks = (notifier_task, listener_task)
        self._transition(ConnectionState.ACTIVE)

        try:
            done, _pending = await asyncio.wait(
                self._tasks, return_when=asyncio.FIRST_COMPLETED,
            )
            if not self._aborted:
                self._first_finished = "notifier" if notifier_task in done else "listener"
        finally:
            self._transition(ConnectionState.DRAINING)
            try:
                await self._drain()
            finally:
                await self._finish()
        return self.outcome

    async def close(self) -> None:
        """Abort the connection from outside and wait until it is closed.

        Safe to call in any state and any number of times.
        """
        if self._state is ConnectionState.CLOSED:
            return
        if not self._tasks:
            # Never got past the handshake
            await self._finish()
            return
        self._aborted = True
        for task in self._tasks:
            task.cancel()
        await self._closed.wait()

    async def _drain(self) -> None:
        """Cancel whichever task is still running and wait for both."""
        for task in self._tasks:
            if not task.done():
                task.cancel()
        results = await asyncio.gather(*self._tasks, return_exceptions=True)
        for name, result in zip(("notifier", "listener"), results, strict=True):
            if isinstance(result, Exception):
                self._collector.record_task_error(self.peer, name, result)

    async def _finish(self) -> None:
        """Enter CLOSED exactly once: close the channel, record the context."""
        if self._state is ConnectionState.CLOSED:
            return
        self._transition(ConnectionState.CLOSED)
        try:
            await self._channel.close()
        finally:
            self._collector.record_close(
                self.peer,
                first_finished=self._first_finished,
                notifications_sent=self._sender.sent,
                frames_received=self._receiver.received,
                duration_ms=(time.perf_counter() - self._t0) * 1000,
            )
            self._closed.set()

    def _transition(self, new: ConnectionState) -> None:
        if new not in _TRANSITIONS[self._state]:
            msg = f"Illegal connection transition {self._state} -> {new}"
            raise RuntimeError(msg)
        self._state = new
        self._history.append(new)
