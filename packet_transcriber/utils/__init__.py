"""Utility functions."""

from .logging_setup import SUMMARY_LOGGER_NAME, setup_logging
from .hex_format import HexFormatter, TRANSCRIPT_CHARSET

__all__ = ["SUMMARY_LOGGER_NAME", "setup_logging", "HexFormatter", "TRANSCRIPT_CHARSET"]
