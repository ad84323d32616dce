"""Processors module for frame output and stream inspection."""

from .transcript_emitter import TranscriptEmitter
from .stream_scanner import ScanReport, scan_stream

__all__ = [
    "TranscriptEmitter",
    "ScanReport",
    "scan_stream"
]
