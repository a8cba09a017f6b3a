"""Tests for mdlive.live.notifier — change events to "File changed" frames."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from mdlive._errors import WatchObservationError, WatchSetupError
from mdlive.content.watcher import ChangeEvent, ChangeKind
from mdlive.live.notifier import format_notification, notify_changes
from mdlive.observability import LiveCollector, NotificationSent, WatchFailed
from tests.conftest import FakeSender, ScriptedBridge

PEER = "127.0.0.1:50000"
ROOT = Path("/docs")


def _event(kind: ChangeKind, *names: str) -> ChangeEvent:
    return ChangeEvent(kind=kind, paths=tuple(ROOT / n for n in names))


async def _run(
    bridge: ScriptedBridge,
    collector: LiveCollector,
    sender: FakeSender | None = None,
) -> tuple[int, FakeSender]:
    sender = sender or FakeSender()
    sent = await asyncio.wait_for(
        notify_changes(sender, ROOT, peer=PEER, collector=collector, bridge_factory=bridge),
        timeout=5,
    )
    return sent, sender


class TestFormatNotification:
    def test_data_modification(self) -> None:
        event = _event(ChangeKind.MODIFIED_DATA, "readme.md")
        assert format_notification(event) == "File changed /docs/readme.md"

    def test_first_path_only(self) -> None:
        event = _event(ChangeKind.MODIFIED_DATA, "a.md", "b.md")
        assert format_notification(event) == "File changed /docs/a.md"

    @pytest.mark.parametrize(
        "kind",
        [ChangeKind.CREATED, ChangeKind.MODIFIED_METADATA, ChangeKind.REMOVED, ChangeKind.OTHER],
    )
    def test_other_kinds_dropped(self, kind: ChangeKind) -> None:
        assert format_notification(_event(kind, "readme.md")) is None

    def test_empty_paths_dropped(self) -> None:
        assert format_notification(_event(ChangeKind.MODIFIED_DATA)) is None


class TestNotifyChanges:
    """notify_changes — the send half of a live-reload connection."""

    @pytest.mark.asyncio
    async def test_modification_sends_one_frame(self, collector: LiveCollector) -> None:
        bridge = ScriptedBridge([_event(ChangeKind.MODIFIED_DATA, "readme.md")], close=True)
        sent, sender = await _run(bridge, collector)

        assert sender.texts == ["File changed /docs/readme.md"]
        assert sent == 1
        assert bridge.watcher.watched == [ROOT]
        assert bridge.watcher.stopped

    @pytest.mark.asyncio
    async def test_removal_sends_nothing(self, collector: LiveCollector) -> None:
        bridge = ScriptedBridge([_event(ChangeKind.REMOVED, "old.md")], close=True)
        sent, sender = await _run(bridge, collector)

        assert sender.texts == []
        assert sent == 0

    @pytest.mark.asyncio
    async def test_only_data_modifications_are_sent(self, collector: LiveCollector) -> None:
        bridge = ScriptedBridge(
            [
                _event(ChangeKind.CREATED, "new.md"),
                _event(ChangeKind.MODIFIED_METADATA, "readme.md"),
                _event(ChangeKind.MODIFIED_DATA),
                _event(ChangeKind.MODIFIED_DATA, "a.md"),
                _event(ChangeKind.OTHER, "guide"),
                _event(ChangeKind.MODIFIED_DATA, "b.md", "c.md"),
            ],
            close=True,
        )
        _sent, sender = await _run(bridge, collector)

        assert sender.texts == ["File changed /docs/a.md", "File changed /docs/b.md"]

    @pytest.mark.asyncio
    async def test_notifications_recorded(self, collector: LiveCollector) -> None:
        bridge = ScriptedBridge([_event(ChangeKind.MODIFIED_DATA, "readme.md")], close=True)
        await _run(bridge, collector)

        events = collector.log.query(event_type=NotificationSent)
        assert len(events) == 1
        assert events[0].peer == PEER
        assert events[0].path == "/docs/readme.md"

    @pytest.mark.asyncio
    async def test_observation_error_is_skipped(self, collector: LiveCollector) -> None:
        bridge = ScriptedBridge(
            [WatchObservationError("flaky"), _event(ChangeKind.MODIFIED_DATA, "readme.md")],
            close=True,
        )
        sent, _sender = await _run(bridge, collector)

        assert sent == 1
        failures = collector.log.query(event_type=WatchFailed)
        assert len(failures) == 1
        assert failures[0].fatal is False

    @pytest.mark.asyncio
    async def test_setup_error_on_watch_ends_task(self, collector: LiveCollector) -> None:
        bridge = ScriptedBridge(setup_error="Watch root /docs does not exist")
        sent, sender = await _run(bridge, collector)

        assert sent == 0
        assert sender.texts == []
        assert bridge.watcher.stopped
        failures = collector.log.query(event_type=WatchFailed)
        assert failures[0].fatal is True
        assert "does not exist" in failures[0].message

    @pytest.mark.asyncio
    async def test_setup_error_from_thread_ends_task(self, collector: LiveCollector) -> None:
        bridge = ScriptedBridge(
            [WatchSetupError("cannot watch"), _event(ChangeKind.MODIFIED_DATA, "readme.md")],
        )
        sent, sender = await _run(bridge, collector)

        assert sent == 0
        assert sender.texts == []
        assert bridge.watcher.stopped

    @pytest.mark.asyncio
    async def test_send_failure_ends_task(self, collector: LiveCollector) -> None:
        bridge = ScriptedBridge(
            [
                _event(ChangeKind.MODIFIED_DATA, "a.md"),
                _event(ChangeKind.MODIFIED_DATA, "b.md"),
            ],
        )
        sent, sender = await _run(bridge, collector, FakeSender(fail_after=1))

        assert sent == 1
        assert sender.texts == ["File changed /docs/a.md"]
        assert bridge.watcher.stopped

    @pytest.mark.asyncio
    async def test_cancel_stops_watcher(self, collector: LiveCollector) -> None:
        bridge = ScriptedBridge()
        task = asyncio.create_task(
            notify_changes(FakeSender(), ROOT, peer=PEER, collector=collector, bridge_factory=bridge)
        )
        await asyncio.sleep(0.01)
        assert bridge.watcher.stopped is False

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert bridge.watcher.stopped
