"""Protocol module for frame processing."""

from .constants import (
    MARKER_1, MARKER_2, START_MARKER, MAX_PAYLOAD_LENGTH, MAX_PUSHBACK
)
from .byte_cursor import ByteCursor, StreamReadError, PushbackOverflow
from .frame_parser import (
    FrameParser, FrameOutcome, WellFormedFrame, MalformedFrame,
    MalformedReason, FrameStats, ParserState
)
from .serial_handler import SerialSource, open_source

__all__ = [
    "MARKER_1", "MARKER_2", "START_MARKER", "MAX_PAYLOAD_LENGTH", "MAX_PUSHBACK",
    "ByteCursor", "StreamReadError", "PushbackOverflow",
    "FrameParser", "FrameOutcome", "WellFormedFrame", "MalformedFrame",
    "MalformedReason", "FrameStats", "ParserState",
    "SerialSource", "open_source"
]
