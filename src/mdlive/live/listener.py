"""Listener task — drains inbound frames until the client goes away."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mdlive._errors import ChannelClosed, FrameDecodeError
from mdlive.live.frames import CloseFrame, frame_kind, frame_payload

if TYPE_CHECKING:
    from mdlive.live.frames import ReceiveHalf
    from mdlive.observability.collector import LiveCollector


async def listen_frames(
    receiver: ReceiveHalf,
    *,
    peer: str,
    collector: LiveCollector,
) -> int:
    """Read and log frames until a close frame or the end of the stream.

    Inbound content never changes server behavior.  An undecodable frame
    ends the loop the same way a closed stream does.

    Returns:
        Number of frames processed, the close frame included.

    """
    count = 0
    while True:
        try:
            frame = await receiver.receive()
        except (ChannelClosed, FrameDecodeError):
            break
        count += 1
        collector.record_frame(peer, frame_kind(frame), frame_payload(frame))
        if isinstance(frame, CloseFrame):
            break
    return count
