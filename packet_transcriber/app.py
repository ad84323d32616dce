"""
Packet Transcriber Application

Reads a byte stream of framed packets (stdin, a file, or a serial port) and
writes a transcript of every well-formed frame to stdout:

    {  3} 41 42 43
    {  4} 64 65 66 67

Malformed frames, missing markers and the final summary are reported on
stderr through logging.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence, TextIO

import serial

from .config import config
from .processors import ScanReport, TranscriptEmitter, scan_stream
from .protocol import ByteCursor, FrameParser, FrameStats, StreamReadError, open_source
from .utils import SUMMARY_LOGGER_NAME, setup_logging

logger = logging.getLogger(__name__)
summary_logger = logging.getLogger(SUMMARY_LOGGER_NAME)


def run(source, sink: TextIO, chunk_size: Optional[int] = None,
        resync_on_marker: Optional[bool] = None,
        report_truncated: Optional[bool] = None) -> FrameStats:
    """
    ストリーム終端までフレームを解析してトランスクリプトを出力

    Raises:
        StreamReadError: 入力ソースのI/Oエラー
    """
    cursor = ByteCursor(source, chunk_size)
    parser = FrameParser(cursor, resync_on_marker=resync_on_marker, report_truncated=report_truncated)
    emitter = TranscriptEmitter(sink)

    for outcome in parser:
        emitter.emit(outcome)

    sink.flush()
    summary_logger.info(parser.stats.summary())
    return parser.stats


def run_scan(source, chunk_size: Optional[int] = None, dump: bool = False) -> ScanReport:
    """フレーム解析を行わず、生のバイト数とマーカーペア数だけを報告"""
    report = scan_stream(ByteCursor(source, chunk_size), dump=dump)
    summary_logger.info(report.summary())
    return report


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="packet-transcriber",
        description="Transcribe framed packets (0x21 0x22 LEN PAYLOAD) from a byte stream.",
    )
    parser.add_argument(
        "input", nargs="?", default=None,
        help="Input file (default: stdin)"
    )
    parser.add_argument(
        "-p", "--port", default=None,
        help="Read from a serial port instead of a file or stdin (default: SERIAL_PORT when no input file is given)"
    )
    parser.add_argument(
        "-b", "--baud", type=int, default=config.BAUD_RATE,
        help=f"Baud rate (default: {config.BAUD_RATE})"
    )
    parser.add_argument(
        "--timeout", type=float, default=config.SERIAL_TIMEOUT,
        help="Serial read timeout in seconds; a timeout ends the stream (default: block)"
    )
    parser.add_argument(
        "--passive-resync", action="store_true", default=not config.RESYNC_ON_MARKER,
        help="Treat a marker pair inside a payload as payload data instead of a new frame"
    )
    parser.add_argument(
        "--drop-truncated", action="store_true", default=not config.REPORT_TRUNCATED,
        help="Do not report a frame cut off by end of stream as malformed"
    )
    parser.add_argument(
        "--scan", action="store_true",
        help="Only count raw bytes and marker pairs (with -v, also hex dump the stream)"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else None)
    # 入力ファイルを明示した場合は SERIAL_PORT 設定より優先する
    port = args.port or (config.SERIAL_PORT if args.input is None else None)

    try:
        with open_source(args.input, port, args.baud, args.timeout) as (source, chunk_size):
            if args.scan:
                run_scan(source, chunk_size, dump=args.verbose)
            else:
                run(
                    source, sys.stdout, chunk_size,
                    resync_on_marker=not args.passive_resync,
                    report_truncated=not args.drop_truncated,
                )
    except StreamReadError as e:
        logger.error(f"Input stream error: {e}")
        return 1
    except serial.SerialException as e:
        logger.error(f"Serial connection error: {e}")
        return 1
    except BrokenPipeError:
        logger.warning("Output stream closed before end of input.")
        return 1
    except OSError as e:
        logger.error(f"Could not open input: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Exiting due to KeyboardInterrupt.")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
