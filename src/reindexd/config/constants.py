"""Configuration constants.

This module contains values that should NOT be user-configurable: wire
protocol strings, the log line grammar and fixed sentinels.

For configurable values, see models.py (ServerConfig, PollConfig, etc.).
"""

from datetime import datetime

# =============================================================================
# Wire Protocol
# =============================================================================

REQUEST_PING = "ping"
REQUEST_REINDEX = "reindex"

RESPONSE_PONG = "pong"
RESPONSE_OK = "OK"

DECODE_ERROR_PREFIX = "Could not decode the request JSON: "
REINDEX_ERROR_PREFIX = "Reindexing error: "
UNKNOWN_REQUEST_PREFIX = "Unknown request: "

# =============================================================================
# searchd Log Grammar
# =============================================================================

TIMESTAMP_PREFIX_PATTERN = r"\[([^\]]*)\.([0-9]{3})\s([0-9]{4})\]"
"""Bracketed prefix: date-and-time text, 3-digit milliseconds, 4-digit year."""

DATE_FORMATS = (
    "%a %b %d %H:%M:%S %Y",
    "%a %b %d %Y",
)
"""Accepted formats for '<date> <year>'. The second covers date-only prefixes."""

BASE_WATERMARK = datetime(2012, 9, 7, 10, 0, 0)
"""Watermark used when the log is empty. Older than any real log line."""

DEFAULT_COMPLETION_MARKER = "rotating index: all indexes done"

TAIL_WINDOW_MAX = 1024
"""Upper bound on bytes read from the end of the shared log per call."""

# =============================================================================
# Validation
# =============================================================================

PORT_MIN = 0
PORT_MAX = 65535
"""Valid port range."""
