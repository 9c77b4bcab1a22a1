"""Index rotation detection - searchd log tailing and reindex orchestration."""

from reindexd.rotation.orchestrator import ReindexOrchestrator, ReindexResult
from reindexd.rotation.poller import CompletionPoller, PollOutcome, PollResult
from reindexd.rotation.tail import read_last_line, read_tail
from reindexd.rotation.timestamps import extract_timestamp

__all__ = [
    "CompletionPoller",
    "PollOutcome",
    "PollResult",
    "ReindexOrchestrator",
    "ReindexResult",
    "extract_timestamp",
    "read_last_line",
    "read_tail",
]
