"""Frame parsing with marker-based resynchronization."""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

from .byte_cursor import ByteCursor
from .constants import MARKER_1, MARKER_2, MAX_PAYLOAD_LENGTH, START_MARKER
from ..config import config
from ..utils.hex_format import HexFormatter

logger = logging.getLogger(__name__)


class ParserState(Enum):
    SEEKING_MARKER_1 = auto()
    SEEKING_MARKER_2 = auto()
    READING_LENGTH = auto()
    READING_PAYLOAD = auto()


class MalformedReason(Enum):
    RESYNC = "resync"  # 宣言長に達する前に次のマーカーペアを検出
    TRUNCATED = "truncated"  # 宣言長に達する前にストリーム終端


@dataclass(frozen=True)
class FrameOutcome:
    """フレーム解析結果の基底クラス"""
    sequence_number: int
    offset: int  # 先頭マーカーのストリーム位置（診断用）


@dataclass(frozen=True)
class WellFormedFrame(FrameOutcome):
    payload: bytes

    @property
    def declared_length(self) -> int:
        return len(self.payload)


@dataclass(frozen=True)
class MalformedFrame(FrameOutcome):
    declared_length: int
    actual_length: int
    reason: MalformedReason


@dataclass
class FrameStats:
    """解析統計（単調増加、パーサーインスタンスごと）"""
    frames: int = 0
    malformed: int = 0
    missing_marker: int = 0
    bytes_read: int = 0

    @property
    def well_formed(self) -> int:
        return self.frames - self.malformed

    def summary(self) -> str:
        return (
            f"Frames found: {self.frames}, malformed: {self.malformed}, "
            f"missing marker: {self.missing_marker}, bytes read: {self.bytes_read}"
        )


class FrameParser:
    """
    フレーム解析クラス

    ByteCursor からバイトを読み、フレームごとに FrameOutcome を遅延生成する。
    プロトコルにエスケープがないため、ペイロード中の MARKER_1 は必ず1バイト先読みし、
    MARKER_2 が続く場合は新しいフレームの開始とみなして再同期する
    （resync_on_marker=False の場合はペイロードとして扱う）。
    """

    def __init__(self, cursor: ByteCursor, resync_on_marker: Optional[bool] = None,
                 report_truncated: Optional[bool] = None):
        self.cursor = cursor
        self.resync_on_marker = config.RESYNC_ON_MARKER if resync_on_marker is None else resync_on_marker
        self.report_truncated = config.REPORT_TRUNCATED if report_truncated is None else report_truncated
        self.state = ParserState.SEEKING_MARKER_1
        self.stats = FrameStats()

    def __iter__(self) -> Iterator[FrameOutcome]:
        return self.frames()

    def frames(self) -> Iterator[FrameOutcome]:
        """ストリーム終端までフレーム結果を順に返す"""
        while True:
            outcome = self.next_outcome()
            if outcome is None:
                return
            yield outcome

    def next_outcome(self) -> Optional[FrameOutcome]:
        """
        次のフレーム結果を返す

        Returns:
            WellFormedFrame / MalformedFrame、ストリーム終端に達した場合はNone

        Raises:
            StreamReadError: 入力ソースのI/Oエラー
        """
        frame_offset = self.cursor.position
        declared_length = 0
        payload = bytearray()

        while True:
            if self.state is ParserState.SEEKING_MARKER_1:
                byte = self.cursor.next()
                if byte is None:
                    return self._finish()
                if byte == MARKER_1:
                    frame_offset = self.cursor.position - 1
                    self.state = ParserState.SEEKING_MARKER_2

            elif self.state is ParserState.SEEKING_MARKER_2:
                byte = self.cursor.next()
                if byte is None:
                    return self._finish()
                if byte == MARKER_2:
                    self.state = ParserState.READING_LENGTH
                else:
                    # 読んだバイト自体が次の MARKER_1 の可能性があるので戻す
                    self.cursor.pushback(byte)
                    self.stats.missing_marker += 1
                    logger.warning(
                        f"MALFORMED packet, missing MARKER_2 after MARKER_1 at offset {frame_offset} "
                        f"(got 0x{byte:02X})"
                    )
                    self.state = ParserState.SEEKING_MARKER_1

            elif self.state is ParserState.READING_LENGTH:
                byte = self.cursor.next()
                if byte is None:
                    # 長さフィールドがないヘッダーは報告しない
                    if config.DEBUG_FRAME_PARSING:
                        logger.debug(f"Stream ended inside header at offset {frame_offset}")
                    return self._finish()
                declared_length = byte
                payload = bytearray()
                self.state = ParserState.READING_PAYLOAD
                if config.DEBUG_FRAME_PARSING:
                    logger.debug(f"Parsed frame header at offset {frame_offset}: declared_length={declared_length}")
                if declared_length == 0:
                    return self._resolve_well_formed(payload, frame_offset)

            elif self.state is ParserState.READING_PAYLOAD:
                byte = self.cursor.next()
                if byte is None:
                    return self._resolve_truncated(declared_length, payload, frame_offset)

                if byte == MARKER_1:
                    lookahead = self.cursor.next()
                    if lookahead == MARKER_2 and self.resync_on_marker:
                        # 新しいフレームヘッダー: 次の呼び出しで SEEKING_MARKER_1 から再読込
                        self.cursor.pushback(MARKER_1, MARKER_2)
                        return self._resolve_malformed(
                            declared_length, payload, frame_offset, MalformedReason.RESYNC
                        )
                    if lookahead is not None:
                        # 先読みしたバイトは次のペイロードバイトとして数える
                        self.cursor.pushback(lookahead)

                payload.append(byte)
                if len(payload) == declared_length:
                    return self._resolve_well_formed(payload, frame_offset)

    def _resolve_well_formed(self, payload: bytearray, frame_offset: int) -> WellFormedFrame:
        outcome = WellFormedFrame(
            sequence_number=self.stats.frames,
            offset=frame_offset,
            payload=bytes(payload),
        )
        self._count(outcome)
        if config.DEBUG_FRAME_PARSING:
            logger.debug(
                f"Frame {outcome.sequence_number} well-formed ({len(payload)} bytes): "
                f"{HexFormatter.hex_preview(payload)}"
            )
        return outcome

    def _resolve_malformed(self, declared_length: int, payload: bytearray, frame_offset: int,
                           reason: MalformedReason) -> MalformedFrame:
        outcome = MalformedFrame(
            sequence_number=self.stats.frames,
            offset=frame_offset,
            declared_length=declared_length,
            actual_length=len(payload),
            reason=reason,
        )
        self._count(outcome)
        if config.DEBUG_FRAME_PARSING:
            logger.debug(
                f"Frame {outcome.sequence_number} discarded ({reason.value}): "
                f"{HexFormatter.hex_preview(payload)}"
            )
        return outcome

    def _resolve_truncated(self, declared_length: int, payload: bytearray,
                           frame_offset: int) -> Optional[MalformedFrame]:
        if not self.report_truncated:
            logger.debug(
                f"Dropping truncated frame at offset {frame_offset} "
                f"({len(payload)} of {declared_length} bytes)"
            )
            return self._finish()
        return self._resolve_malformed(declared_length, payload, frame_offset, MalformedReason.TRUNCATED)

    def _count(self, outcome: FrameOutcome) -> None:
        self.stats.frames += 1
        if isinstance(outcome, MalformedFrame):
            self.stats.malformed += 1
        self.stats.bytes_read = self.cursor.position
        self.state = ParserState.SEEKING_MARKER_1

    def _finish(self) -> None:
        self.stats.bytes_read = self.cursor.position
        self.state = ParserState.SEEKING_MARKER_1
        return None

    @staticmethod
    def build_frame(payload: bytes, declared_length: Optional[int] = None) -> bytes:
        """
        フレームのバイト列を作成（テスト・シミュレーション用）

        Args:
            payload: ペイロード
            declared_length: 長さフィールドの値。省略時は len(payload)
        """
        length = len(payload) if declared_length is None else declared_length
        if not 0 <= length <= MAX_PAYLOAD_LENGTH:
            raise ValueError(f"Declared length {length} exceeds maximum {MAX_PAYLOAD_LENGTH}")
        return START_MARKER + bytes([length]) + bytes(payload)
