"""Shared type definitions for mdlive."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from mdlive.content.watcher import BridgeItem


@runtime_checkable
class WatchSource(Protocol):
    """Watcher half of a bridge; ``stop()`` must end the paired stream."""

    def watch(self, root: Path, *, recursive: bool = True) -> None: ...

    def stop(self) -> None: ...


@runtime_checkable
class ChangeStream(Protocol):
    """Consumer half of a bridge: changes and watch errors, in order."""

    def close(self) -> None: ...

    def __aiter__(self) -> AsyncIterator[BridgeItem]: ...


# Factory returning a not-yet-started watcher and the stream it feeds
type BridgeFactory = Callable[..., tuple[WatchSource, ChangeStream]]

# Coroutine function run as one half of a supervised connection
type TaskFunc = Callable[..., Awaitable[int]]
