"""Logging configuration setup."""

import logging
import sys
from typing import Optional

from ..config import config

# 最終サマリー行用のロガー（LOG_LEVEL に関係なく INFO で出力）
SUMMARY_LOGGER_NAME = "packet_transcriber.summary"


def setup_logging(level: Optional[str] = None):
    """ログ設定のセットアップ

    診断メッセージはすべて stderr に出力する（stdout はトランスクリプト専用）。
    """
    # 引数がなければ settings.py からログレベルを取得
    level_name = level or config.LOG_LEVEL
    log_level = getattr(logging, level_name.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=config.LOG_FORMAT,
        stream=sys.stderr,
    )
    logging.getLogger(SUMMARY_LOGGER_NAME).setLevel(logging.INFO)
    return logging.getLogger("packet_transcriber")
