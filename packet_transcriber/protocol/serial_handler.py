"""Input source handling: stdin, files and serial ports."""

import logging
import sys
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

import serial

from ..config import config

logger = logging.getLogger(__name__)


class SerialSource:
    """serial.Serial を ByteCursor 用の read(n) ソースとして包む

    タイムアウト設定時、read() が b"" を返したらストリーム終端とみなす。
    タイムアウトなしの場合 pyserial の read() はデータ到着までブロックする。
    """

    def __init__(self, port: str, baud: int, timeout: Optional[float] = None):
        self.port = port
        self.serial = serial.Serial(port, baudrate=baud, timeout=timeout)
        try:
            self.serial.dtr = True
            logger.info(f"Serial port {port} opened at {baud} baud, DTR set.")
        except IOError as e:
            logger.warning(f"Could not set DTR on {port}: {e}")

    def read(self, size: int) -> bytes:
        # SerialException は IOError のサブクラスなので ByteCursor で StreamReadError になる
        data = self.serial.read(size)
        if not data:
            logger.info(f"No data from {self.port} within timeout, treating as end of stream.")
        return data

    def close(self) -> None:
        if self.serial.is_open:
            logger.info(f"Closing serial port {self.port}.")
            self.serial.close()


@contextmanager
def open_source(path: Optional[str] = None, port: Optional[str] = None,
                baud: Optional[int] = None, timeout: Optional[float] = None) -> Iterator[Tuple[object, Optional[int]]]:
    """
    入力ソースを開く

    Args:
        path: 入力ファイルパス（None または "-" で stdin）
        port: シリアルポート（指定時は path より優先）
        baud: ボーレート
        timeout: シリアル読み込みタイムアウト（秒）

    Yields:
        (source, chunk_size): read(n) を持つソースと ByteCursor に渡すチャンクサイズ

    Raises:
        OSError: ファイルを開けない場合
        serial.SerialException: シリアルポートを開けない場合
    """
    if port:
        source = SerialSource(
            port,
            baud or config.BAUD_RATE,
            config.SERIAL_TIMEOUT if timeout is None else timeout,
        )
        try:
            # ブロッキング read(n) は n バイト揃うまで返らないため1バイトずつ読む
            yield source, 1
        finally:
            source.close()
    elif path and path != "-":
        logger.info(f"Reading frames from {path}")
        with open(path, "rb") as f:
            yield f, None
    else:
        # stdin は閉じない
        yield sys.stdin.buffer, None
