"""Byte-at-a-time reader with a small pushback buffer."""

import logging
import time
from typing import Iterator, List, Optional

from .constants import MAX_PUSHBACK
from ..config import config

logger = logging.getLogger(__name__)


class StreamReadError(IOError):
    """入力ストリームの読み込みエラー（EOFとは区別される致命的エラー）"""
    pass


class PushbackOverflow(ValueError):
    """プッシュバック上限（2バイト）を超えた"""
    pass


class ByteCursor:
    """
    入力ソースを1バイトずつ読み出すカーソル

    ソースは read(n) -> bytes を持つ任意のオブジェクト（バイナリファイル、
    sys.stdin.buffer、serial.Serial、io.BytesIO など）。read1() があればそちらを使い、
    利用可能なデータだけを受け取る。プッシュバックされたバイトはソースより先に返される。
    """

    def __init__(self, source, chunk_size: Optional[int] = None):
        self.source = source
        self.chunk_size = chunk_size or config.READ_CHUNK_SIZE
        self._read = getattr(source, "read1", None) or source.read
        self._chunk = b""
        self._chunk_pos = 0
        self._pushback: List[int] = []  # LIFO
        self.position = 0  # 論理的な読み出し位置（診断用）
        self.at_eof = False

    def next(self) -> Optional[int]:
        """次のバイト値を返す。ストリーム終端ならNone"""
        if self._pushback:
            self.position += 1
            return self._pushback.pop()

        if self._chunk_pos >= len(self._chunk) and not self._fill():
            return None

        value = self._chunk[self._chunk_pos]
        self._chunk_pos += 1
        self.position += 1
        return value

    def pushback(self, *values: int) -> None:
        """
        バイトを読み戻す

        Args:
            values: ストリーム順のバイト値。pushback(a, b) の後は next() が a, b の順に返す
        """
        if len(self._pushback) + len(values) > MAX_PUSHBACK:
            raise PushbackOverflow(
                f"Cannot push back {len(values)} bytes: "
                f"{len(self._pushback)} already pending, limit is {MAX_PUSHBACK}"
            )
        for value in reversed(values):
            self._pushback.append(value)
        self.position -= len(values)

    def __iter__(self) -> Iterator[int]:
        while True:
            value = self.next()
            if value is None:
                return
            yield value

    def _fill(self) -> bool:
        """ソースから次のチャンクを読み込む。EOFならFalse"""
        if self.at_eof:
            return False

        while True:
            try:
                data = self._read(self.chunk_size)
            except OSError as e:
                raise StreamReadError(f"Read failed at offset {self.position}: {e}") from e
            if data is not None:
                break
            # ノンブロッキングソースでデータ未到着
            time.sleep(0.01)

        if not data:
            self.at_eof = True
            logger.debug(f"End of stream after {self.position} bytes")
            return False

        self._chunk = data
        self._chunk_pos = 0
        return True
