"""Content layer — Markdown documents, their routes, and the file watcher.

Handles rendering (Markdown -> HTML pages), routing (docs directory ->
chirp routes), and turning filesystem notifications into change events
for the live-reload connections.
"""

from mdlive.content.pipeline import DocumentRenderer
from mdlive.content.router import ContentRouter
from mdlive.content.watcher import (
    BridgeQueue,
    ChangeEvent,
    ChangeEventSource,
    ChangeKind,
    classify_change,
    create_bridge,
)

__all__ = [
    "BridgeQueue",
    "ChangeEvent",
    "ChangeEventSource",
    "ChangeKind",
    "ContentRouter",
    "DocumentRenderer",
    "classify_change",
    "create_bridge",
]
