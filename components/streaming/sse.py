"""
Server-sent event framing for incrementally produced answer text.

Each fragment becomes ``data: {"content": ...}`` and the stream always ends
with ``data: [DONE]``. A failure while producing fragments is reported as one
``data: {"error": ...}`` frame before the terminal frame. Cancellation is not
a failure: it propagates to the caller and nothing more is written.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterator, Dict

logger = logging.getLogger(__name__)

SSE_MEDIA_TYPE = "text/event-stream; charset=utf-8"
SSE_HEADERS: Dict[str, str] = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}
DONE_FRAME = "data: [DONE]\n\n"
STREAM_ERROR_MESSAGE = "An error occurred while processing your question."


class EventKind(str, Enum):
    CONTENT = "content"
    ERROR = "error"
    DONE = "done"


@dataclass(frozen=True)
class StreamEvent:
    """One unit of the outbound stream: a fragment, an error, or the end."""

    kind: EventKind
    payload: str = ""

    @classmethod
    def content(cls, fragment: str) -> "StreamEvent":
        return cls(EventKind.CONTENT, fragment)

    @classmethod
    def error(cls, message: str) -> "StreamEvent":
        return cls(EventKind.ERROR, message)

    @classmethod
    def done(cls) -> "StreamEvent":
        return cls(EventKind.DONE)


def encode_event(event: StreamEvent) -> str:
    """Serialize one event as a single SSE frame."""
    if event.kind is EventKind.DONE:
        return DONE_FRAME
    body = json.dumps(
        {event.kind.value: event.payload}, ensure_ascii=False, separators=(",", ":")
    )
    return f"data: {body}\n\n"


async def frame_events(fragments: AsyncIterator[str]) -> AsyncIterator[StreamEvent]:
    """
    Tags each produced fragment, then terminates the stream.

    Args:
        fragments: Lazily produced answer text.

    Yields:
        One content event per fragment, an error event if production fails,
        and exactly one done event at the end.

    Raises:
        asyncio.CancelledError: When production or the consumer is cancelled.
    """
    try:
        async for fragment in fragments:
            yield StreamEvent.content(fragment)
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.error(f"Streaming failed: {e}", exc_info=True)
        yield StreamEvent.error(STREAM_ERROR_MESSAGE)
    yield StreamEvent.done()


async def sse_stream(fragments: AsyncIterator[str]) -> AsyncIterator[str]:
    """Encode produced fragments as SSE frames, one frame per yield."""
    async for event in frame_events(fragments):
        yield encode_event(event)
