"""Timestamp extraction from searchd log lines.

searchd prefixes each line with ``[Mon Jan  2 15:04:05.123 2012]``. The
millisecond field sits between the time of day and the year, so the prefix is
split into date text, milliseconds and year, and reassembled.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta

from reindexd.config.constants import DATE_FORMATS, TIMESTAMP_PREFIX_PATTERN
from reindexd.core.errors import ParseError

TIMESTAMP_PREFIX = re.compile(TIMESTAMP_PREFIX_PATTERN)


def extract_timestamp(line: str) -> datetime:
    """Return the instant encoded in a log line's bracketed prefix.

    Raises:
        ParseError: The line has no prefix, or its date text is not a
            recognised searchd date.
    """
    match = TIMESTAMP_PREFIX.search(line)
    if match is None:
        raise ParseError.no_timestamp(line)

    date_text, millis, year = match.groups()
    base = _parse_date(f"{date_text.strip()} {year}")
    return base + timedelta(milliseconds=int(millis))


def _parse_date(text: str) -> datetime:
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ParseError.bad_date(text)
