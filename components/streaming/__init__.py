"""Streaming component: server-sent event framing for answer tokens."""

from .sse import (
    DONE_FRAME,
    SSE_HEADERS,
    SSE_MEDIA_TYPE,
    STREAM_ERROR_MESSAGE,
    EventKind,
    StreamEvent,
    encode_event,
    frame_events,
    sse_stream,
)

__all__ = [
    "DONE_FRAME",
    "SSE_HEADERS",
    "SSE_MEDIA_TYPE",
    "STREAM_ERROR_MESSAGE",
    "EventKind",
    "StreamEvent",
    "encode_event",
    "frame_events",
    "sse_stream",
]
