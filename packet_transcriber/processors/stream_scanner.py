"""Raw stream inspection without framing."""

import logging
from dataclasses import dataclass

from ..protocol.byte_cursor import ByteCursor
from ..protocol.constants import MARKER_1, MARKER_2

logger = logging.getLogger(__name__)

DUMP_LINE_BYTES = 32


@dataclass
class ScanReport:
    raw_bytes: int = 0
    raw_marker_pairs: int = 0

    def summary(self) -> str:
        return f"Raw number of bytes: {self.raw_bytes}, raw number of packets: {self.raw_marker_pairs}"


def scan_stream(cursor: ByteCursor, dump: bool = False) -> ScanReport:
    """
    ストリーム全体を走査し、バイト数とマーカーペア数を数える

    マーカーペアは重ならない: MARKER_1 の次のバイトは判定に使った時点で消費される。

    Args:
        cursor: 入力カーソル
        dump: True の場合、16進ダンプを DEBUG レベルで出力

    Returns:
        ScanReport
    """
    report = ScanReport()
    line = bytearray()

    def _take(value: int) -> None:
        report.raw_bytes += 1
        if dump:
            line.append(value)
            if len(line) == DUMP_LINE_BYTES:
                logger.debug(f"{report.raw_bytes - DUMP_LINE_BYTES:08X}: {line.hex(' ').upper()}")
                line.clear()

    for value in cursor:
        _take(value)
        if value != MARKER_1:
            continue
        following = cursor.next()
        if following is None:
            break
        _take(following)
        if following == MARKER_2:
            report.raw_marker_pairs += 1

    if dump and line:
        logger.debug(f"{report.raw_bytes - len(line):08X}: {line.hex(' ').upper()}")
    return report
