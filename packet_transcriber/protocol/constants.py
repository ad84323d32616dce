"""Protocol constants for frame processing."""

# Frame markers (2 bytes)
MARKER_1 = 0x21
MARKER_2 = 0x22
START_MARKER = bytes([MARKER_1, MARKER_2])

MAX_PAYLOAD_LENGTH = 0xFF  # uint8 length field

# Byte cursor lookahead limit
MAX_PUSHBACK = 2
