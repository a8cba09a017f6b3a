"""Notifier task — pushes "File changed" messages for content edits.

Owns the connection's send half and its own watcher.  Only data
modifications produce a message; creations, removals and metadata-only
changes are dropped so editor temp files and ``chmod`` don't reload pages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mdlive._errors import SendFailure, WatchError, WatchSetupError
from mdlive.content.watcher import ChangeEvent, ChangeKind, create_bridge

if TYPE_CHECKING:
    from pathlib import Path

    from mdlive._types import BridgeFactory
    from mdlive.live.frames import SendHalf
    from mdlive.observability.collector import LiveCollector


def format_notification(event: ChangeEvent) -> str | None:
    """Return the message for *event*, or None if it should not be sent.

    Only the first path is reported; a multi-file event yields one message.
    """
    if event.kind is not ChangeKind.MODIFIED_DATA or not event.paths:
        return None
    return f"File changed {event.paths[0]}"


async def notify_changes(
    sender: SendHalf,
    root: Path,
    *,
    peer: str,
    collector: LiveCollector,
    bridge_factory: BridgeFactory = create_bridge,
) -> int:
    """Watch *root* and send a text frame per content modification.

    Runs until the bridge closes, the watcher cannot be set up, or a send
    fails.  The watcher is stopped on every exit, cancellation included.

    Returns:
        Number of notifications sent.

    """
    watcher, queue = bridge_factory()
    sent = 0
    try:
        try:
            watcher.watch(root, recursive=True)
        except WatchSetupError as exc:
            collector.record_watch_error(peer, exc, fatal=True)
            return sent

        async for item in queue:
            if isinstance(item, WatchSetupError):
                collector.record_watch_error(peer, item, fatal=True)
                return sent
            if isinstance(item, WatchError):
                collector.record_watch_error(peer, item, fatal=False)
                continue

            text = format_notification(item)
            if text is None:
                continue
            try:
                await sender.send_text(text)
            except SendFailure:
                return sent
            sent += 1
            collector.record_notification(peer, str(item.paths[0]))
        return sent
    finally:
        watcher.stop()
