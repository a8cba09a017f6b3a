"""Tests for mdlive._errors."""

import pytest

from mdlive._errors import (
    ChannelClosed,
    ChannelError,
    ConfigError,
    ContentError,
    DocumentNotFoundError,
    DocumentReadError,
    FrameDecodeError,
    MdliveError,
    SendFailure,
    WatchError,
    WatchObservationError,
    WatchSetupError,
)


class TestErrorHierarchy:
    """All mdlive errors inherit from MdliveError."""

    def test_mdlive_error_is_exception(self) -> None:
        assert issubclass(MdliveError, Exception)

    @pytest.mark.parametrize(
        ("error_cls", "parent"),
        [
            (ConfigError, MdliveError),
            (ContentError, MdliveError),
            (DocumentNotFoundError, ContentError),
            (DocumentReadError, ContentError),
            (WatchError, MdliveError),
            (WatchSetupError, WatchError),
            (WatchObservationError, WatchError),
            (ChannelError, MdliveError),
            (SendFailure, ChannelError),
            (ChannelClosed, ChannelError),
            (FrameDecodeError, ChannelError),
        ],
    )
    def test_inherits(self, error_cls: type, parent: type) -> None:
        assert issubclass(error_cls, parent)

    def test_watch_errors_are_not_channel_errors(self) -> None:
        assert not issubclass(WatchSetupError, ChannelError)
        assert not issubclass(SendFailure, WatchError)

    def test_catch_all_mdlive_errors(self) -> None:
        for error_cls in (ConfigError, DocumentNotFoundError, WatchSetupError, SendFailure):
            with pytest.raises(MdliveError):
                raise error_cls("test")
