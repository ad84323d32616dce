"""Application configuration settings."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == "true"


def _env_float(name: str) -> Optional[float]:
    value = os.environ.get(name)
    return float(value) if value else None


@dataclass
class Config:
    """アプリケーション設定"""
    # Input source settings
    SERIAL_PORT: Optional[str] = os.environ.get("SERIAL_PORT") or None
    BAUD_RATE: int = int(os.environ.get("BAUD_RATE", "115200"))
    SERIAL_TIMEOUT: Optional[float] = _env_float("SERIAL_TIMEOUT")  # None = blocking read
    READ_CHUNK_SIZE: int = int(os.environ.get("READ_CHUNK_SIZE", "4096"))

    # Framing policy
    # True: 受信中のペイロード内でマーカーペアを検出したら新しいフレームとして再同期する
    RESYNC_ON_MARKER: bool = _env_flag("RESYNC_ON_MARKER", "true")
    # True: ペイロード途中のEOFをMALFORMEDとして報告する
    REPORT_TRUNCATED: bool = _env_flag("REPORT_TRUNCATED", "true")

    # Output settings
    FLUSH_EACH_LINE: bool = _env_flag("FLUSH_EACH_LINE", "false")

    # Debug settings
    DEBUG_FRAME_PARSING: bool = _env_flag("DEBUG_FRAME_PARSING", "false")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_FORMAT: str = os.environ.get("LOG_FORMAT", "%(asctime)s - %(levelname)s - %(message)s")


# Global configuration instance
config = Config()
