"""Shared hex formatting utilities for transcript lines and diagnostics."""

from typing import Iterable

# トランスクリプト出力に許可される文字
TRANSCRIPT_CHARSET = frozenset(" 0123456789ABCDEF{}\n")


class HexFormatter:
    """共通16進フォーマットユーティリティクラス"""

    @staticmethod
    def format_byte(value: int) -> str:
        """1バイトを大文字2桁の16進文字列に変換"""
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Byte value out of range: {value}")
        return f"{value:02X}"

    @staticmethod
    def format_length_header(length: int) -> str:
        """
        ペイロード長ヘッダー "{%3d}" を作成

        Args:
            length: ペイロード長 (0-255)

        Returns:
            右寄せ3桁の長さを波括弧で囲んだ文字列
        """
        if not 0 <= length <= 0xFF:
            raise ValueError(f"Payload length out of range: {length}")
        return f"{{{length:3d}}}"

    @staticmethod
    def format_payload_line(payload: bytes) -> str:
        """
        ペイロードを1行のトランスクリプトに整形

        Args:
            payload: ペイロードのバイト列

        Returns:
            "{  3} 41 42 43\\n" 形式の文字列（長さ0の場合は "{  0}\\n"）
        """
        parts = [HexFormatter.format_length_header(len(payload))]
        parts.extend(HexFormatter.format_byte(b) for b in payload)
        return " ".join(parts) + "\n"

    @staticmethod
    def hex_preview(data: Iterable[int], limit: int = 20) -> str:
        """デバッグログ用のプレビュー（先頭 limit バイト）"""
        data = bytes(data)
        preview = data[:limit].hex(" ").upper()
        if len(data) > limit:
            preview += f" ... ({len(data)} bytes)"
        return preview or "empty"

    @staticmethod
    def is_transcript_safe(text: str) -> bool:
        return set(text) <= TRANSCRIPT_CHARSET
