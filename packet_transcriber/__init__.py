"""Resynchronizing transcriber for 0x21 0x22 length-prefixed packet streams."""

__version__ = "0.1.0"
