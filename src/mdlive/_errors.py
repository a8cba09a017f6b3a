"""mdlive error hierarchy.

All mdlive-specific errors inherit from MdliveError for easy catching.
"""


class MdliveError(Exception):
    """Base error for all mdlive operations."""


class ConfigError(MdliveError):
    """Invalid or missing configuration."""


class ContentError(MdliveError):
    """Error in content processing (listing, reading, rendering)."""


class DocumentNotFoundError(ContentError):
    """The requested document does not exist under the docs root."""


class DocumentReadError(ContentError):
    """The requested document exists but could not be read."""


class WatchError(MdliveError):
    """Error reported by the filesystem watcher."""


class WatchSetupError(WatchError):
    """The watcher could not attach to the root path.

    Raised for a missing root, a root that is not a directory, or a platform
    watcher that cannot be initialized (e.g. inotify limits exhausted).
    Fatal to the live-reload side of a connection.

    """


class WatchObservationError(WatchError):
    """A single watch cycle failed. Non-fatal: the watcher keeps running."""


class ChannelError(MdliveError):
    """Error on a client websocket channel."""


class SendFailure(ChannelError):
    """The outbound half is closed or the peer is gone."""


class ChannelClosed(ChannelError):
    """The inbound stream ended without a close frame."""


class FrameDecodeError(ChannelError):
    """An inbound frame could not be decoded."""
