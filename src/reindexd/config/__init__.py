"""Config module exports."""

from reindexd.config.loader import load_config
from reindexd.config.models import (
    IndexerConfig,
    LoggingConfig,
    LogOutputConfig,
    PollConfig,
    ReindexdConfig,
    SearchdConfig,
    ServerConfig,
)

__all__ = [
    "load_config",
    "ReindexdConfig",
    "IndexerConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "PollConfig",
    "SearchdConfig",
    "ServerConfig",
]
