"""Bounded tail reads of a file that another process appends to.

Every call opens, stats, seeks and reads afresh, so the window always ends at
the file's current size and picks up appends made since the previous call.
"""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from reindexd.config.constants import TAIL_WINDOW_MAX
from reindexd.core.errors import LogReadError

logger = structlog.get_logger()


def read_tail(path: str | Path, window: int = TAIL_WINDOW_MAX) -> list[str]:
    """Return the complete, non-blank lines in the last ``window`` bytes of ``path``.

    When the window starts mid-line, the bytes up to the first newline are a
    fragment and are dropped. A window that starts right after a newline keeps
    its first line. When the file is shorter than the window the whole file is
    returned.

    Raises:
        LogReadError: The file cannot be opened, statted or read.
    """
    window = min(window, TAIL_WINDOW_MAX)
    try:
        with open(path, "rb") as f:
            size = os.fstat(f.fileno()).st_size
            offset = max(0, size - window)
            at_line_start = offset == 0 or os.pread(f.fileno(), 1, offset - 1) == b"\n"
            f.seek(offset)
            data = f.read(size - offset)
    except OSError as e:
        raise LogReadError.from_os_error(str(path), e) from e

    if not at_line_start:
        newline = data.find(b"\n")
        data = data[newline + 1 :] if newline >= 0 else b""

    lines = data.decode("utf-8", errors="replace").splitlines()
    logger.debug("tail_read", path=str(path), size=size, offset=offset, lines=len(lines))
    return [line for line in lines if line.strip()]


def read_last_line(path: str | Path, window: int = TAIL_WINDOW_MAX) -> str | None:
    """Most recent non-blank line in the tail window, or None."""
    lines = read_tail(path, window)
    return lines[-1] if lines else None


def file_size(path: str | Path) -> int:
    """Current size of ``path`` in bytes.

    Raises:
        LogReadError: The file cannot be statted.
    """
    try:
        return os.stat(path).st_size
    except OSError as e:
        raise LogReadError.from_os_error(str(path), e) from e
