"""Reindex orchestration: watermark, run indexer, wait for rotation."""

from __future__ import annotations

import subprocess
import threading
import time
from contextlib import ExitStack, nullcontext
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import IO, Any

import structlog

from reindexd.config.constants import BASE_WATERMARK, TAIL_WINDOW_MAX
from reindexd.config.models import IndexerConfig, PollConfig, SearchdConfig
from reindexd.core.errors import CompletionNotConfirmedError, ExternalProcessError, ParseError
from reindexd.rotation.poller import CompletionPoller, PollOutcome, PollResult
from reindexd.rotation.tail import file_size, read_last_line
from reindexd.rotation.timestamps import extract_timestamp

logger = structlog.get_logger()


@dataclass(frozen=True)
class ReindexResult:
    """Summary of one reindex request."""

    index_name: str
    watermark: datetime
    returncode: int
    poll: PollResult
    duration_seconds: float


@dataclass
class ReindexOrchestrator:
    """
    Triggers the indexer and decides when the rotation it started is done.

    Steps per request:
    1. Watermark from the last searchd log line (BASE_WATERMARK if empty)
    2. Run the indexer synchronously with --rotate
    3. Poll the searchd log for the completion marker after the watermark

    The indexer gives no completion signal of its own; searchd logs the
    rotation once it has picked up the new index files.
    """

    indexer: IndexerConfig
    searchd: SearchdConfig
    poll: PollConfig = field(default_factory=PollConfig)
    base_watermark: datetime = BASE_WATERMARK

    _serial_lock: threading.Lock = field(default_factory=threading.Lock, init=False)
    _stop_event: threading.Event = field(default_factory=threading.Event, init=False)

    def reindex(self, index_name: str) -> ReindexResult:
        """Rebuild ``index_name`` and wait for searchd to rotate it in.

        Raises:
            LogReadError: The searchd log could not be read.
            ParseError: A log line needed for comparison has no valid timestamp.
            ExternalProcessError: The indexer could not start, or exited non-zero
                while ``fail_on_nonzero_exit`` is set.
            CompletionNotConfirmedError: The wait was cancelled, or the marker was
                not observed while ``require_confirmation`` is set.
        """
        lock = self._serial_lock if self.indexer.serialize else nullcontext()
        with lock:
            return self._reindex(index_name)

    def cancel(self) -> None:
        """Abandon in-flight completion waits (used on shutdown)."""
        self._stop_event.set()

    def reset(self) -> None:
        """Accept new completion waits after a previous cancel()."""
        self._stop_event.clear()

    def capture_watermark(self) -> datetime:
        """Timestamp of the current last log line, or the base watermark for an empty log.

        Raises:
            ParseError: The log has content but no complete line fits the tail window.
        """
        path = self.searchd.log_path
        window = self.searchd.tail_window_bytes
        last = read_last_line(path, window)
        if last is None:
            if file_size(path) > 0:
                raise ParseError.no_complete_line(path, min(window, TAIL_WINDOW_MAX))
            return self.base_watermark
        return extract_timestamp(last)

    def build_command(self, index_name: str) -> list[str]:
        return [
            self.indexer.bin_path,
            "--config",
            self.indexer.config_path,
            "--rotate",
            "--quiet",
            index_name,
        ]

    def _reindex(self, index_name: str) -> ReindexResult:
        start = time.perf_counter()
        log = logger.bind(index=index_name)

        watermark = self.capture_watermark()
        log.info("reindex_started", watermark=watermark.isoformat())

        returncode = self._run_indexer(index_name)

        poller = CompletionPoller(
            path=Path(self.searchd.log_path),
            marker=self.searchd.completion_marker,
            window=self.searchd.tail_window_bytes,
            max_attempts=self.poll.max_attempts,
            interval_sec=self.poll.interval_sec,
            timeout_sec=self.poll.timeout_sec,
        )
        result = poller.wait(watermark, stop_event=self._stop_event)

        if result.outcome is PollOutcome.CANCELLED:
            raise CompletionNotConfirmedError.cancelled(result.attempts)
        if not result.confirmed and self.poll.require_confirmation:
            raise CompletionNotConfirmedError.not_observed(result.outcome.value, result.attempts)

        duration = time.perf_counter() - start
        log.info(
            "reindex_finished",
            outcome=result.outcome.value,
            attempts=result.attempts,
            duration_seconds=round(duration, 3),
        )
        return ReindexResult(
            index_name=index_name,
            watermark=watermark,
            returncode=returncode,
            poll=result,
            duration_seconds=duration,
        )

    def _run_indexer(self, index_name: str) -> int:
        command = self.build_command(index_name)
        logger.debug("indexer_exec", command=command)

        with ExitStack() as stack:
            output = self._open_indexer_log(stack)
            try:
                completed = subprocess.run(
                    command,
                    stdin=subprocess.DEVNULL,
                    stdout=output,
                    stderr=subprocess.STDOUT,
                    check=False,
                )
            except OSError as e:
                raise ExternalProcessError.launch_failed(command, e) from e

        if completed.returncode != 0:
            if self.indexer.fail_on_nonzero_exit:
                raise ExternalProcessError.nonzero_exit(command, completed.returncode)
            logger.warning("indexer_nonzero_exit", index=index_name, returncode=completed.returncode)
        return completed.returncode

    def _open_indexer_log(self, stack: ExitStack) -> IO[Any] | int:
        if not self.indexer.log_path:
            return subprocess.DEVNULL
        try:
            return stack.enter_context(open(self.indexer.log_path, "ab"))
        except OSError as e:
            logger.warning("indexer_log_unavailable", path=self.indexer.log_path, error=str(e))
            return subprocess.DEVNULL
