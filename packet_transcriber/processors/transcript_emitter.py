"""Transcript output for parsed frames."""

import logging
from typing import Optional, TextIO

from ..config import config
from ..protocol.frame_parser import FrameOutcome, MalformedFrame, WellFormedFrame
from ..utils.hex_format import HexFormatter

logger = logging.getLogger(__name__)


class TranscriptEmitter:
    """
    トランスクリプト出力クラス

    正常フレームは出力シンク（stdout）に "{%3d} %02X ..." 形式で書き込み、
    不正フレームは診断チャネル（logging → stderr）にのみ報告する。
    """

    def __init__(self, sink: TextIO, diagnostics: Optional[logging.Logger] = None):
        self.sink = sink
        self.diagnostics = diagnostics or logger
        self.emitted_lines = 0

    @staticmethod
    def format_line(payload: bytes) -> str:
        return HexFormatter.format_payload_line(payload)

    def emit(self, outcome: FrameOutcome) -> None:
        if isinstance(outcome, WellFormedFrame):
            self.sink.write(self.format_line(outcome.payload))
            self.emitted_lines += 1
            if config.FLUSH_EACH_LINE:
                self.sink.flush()
        elif isinstance(outcome, MalformedFrame):
            self.diagnostics.warning(
                f"MALFORMED packet by length ({outcome.reason.value})! "
                f"encoded len: {outcome.declared_length} actual len: {outcome.actual_length} "
                f"packet number: {outcome.sequence_number} offset: {outcome.offset}"
            )
        else:
            raise TypeError(f"Unknown frame outcome: {outcome!r}")
