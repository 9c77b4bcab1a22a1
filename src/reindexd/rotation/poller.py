"""Completion polling against the shared searchd log."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

import structlog

from reindexd.config.constants import DEFAULT_COMPLETION_MARKER, TAIL_WINDOW_MAX
from reindexd.rotation.tail import read_last_line
from reindexd.rotation.timestamps import extract_timestamp

logger = structlog.get_logger()


class PollOutcome(Enum):
    """How a completion wait ended."""

    CONFIRMED = "confirmed"
    EXHAUSTED = "exhausted"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class PollResult:
    """Result of one completion wait."""

    outcome: PollOutcome
    attempts: int
    matched_line: str | None = None
    matched_at: datetime | None = None

    @property
    def confirmed(self) -> bool:
        return self.outcome is PollOutcome.CONFIRMED


@dataclass
class CompletionPoller:
    """
    Waits for a marker line stamped after a watermark.

    Each attempt re-reads the tail of ``path`` and looks only at its last
    line. Running out of attempts is reported as EXHAUSTED rather than raised;
    the caller decides whether that counts as failure.

    Design:
    - max_attempts bounds the loop even with no interval or deadline
    - interval_sec sleeps between attempts, never after the last one
    - timeout_sec is a wall-clock deadline checked before each attempt
    - stop_event lets the owner abandon the wait from another thread
    """

    path: Path
    marker: str = DEFAULT_COMPLETION_MARKER
    window: int = TAIL_WINDOW_MAX
    max_attempts: int = 10
    interval_sec: float = 0.0
    timeout_sec: float | None = None

    def wait(
        self,
        watermark: datetime,
        stop_event: threading.Event | None = None,
    ) -> PollResult:
        """Poll until the marker appears after ``watermark`` or the budget runs out.

        Raises:
            LogReadError: The log could not be read.
            ParseError: The last line carries the marker but no valid timestamp.
        """
        deadline = None if self.timeout_sec is None else time.monotonic() + self.timeout_sec
        attempts = 0

        while attempts < self.max_attempts:
            if stop_event is not None and stop_event.is_set():
                return self._finish(PollOutcome.CANCELLED, attempts)
            if deadline is not None and time.monotonic() >= deadline:
                return self._finish(PollOutcome.TIMED_OUT, attempts)

            attempts += 1
            line = read_last_line(self.path, self.window)
            logger.debug("poll_attempt", attempt=attempts, line=line)

            if line is not None and self.marker in line:
                stamp = extract_timestamp(line)
                if stamp > watermark:
                    logger.info(
                        "completion_confirmed",
                        attempts=attempts,
                        completed_at=stamp.isoformat(),
                    )
                    return PollResult(PollOutcome.CONFIRMED, attempts, line, stamp)

            if self.interval_sec > 0 and attempts < self.max_attempts:
                if stop_event is not None:
                    stop_event.wait(self.interval_sec)
                else:
                    time.sleep(self.interval_sec)

        return self._finish(PollOutcome.EXHAUSTED, attempts)

    def _finish(self, outcome: PollOutcome, attempts: int) -> PollResult:
        logger.warning(
            "completion_not_observed",
            outcome=outcome.value,
            attempts=attempts,
            marker=self.marker,
        )
        return PollResult(outcome, attempts)
