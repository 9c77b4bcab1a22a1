"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (REINDEXD__SECTION__KEY)
3. YAML file (--config, or /etc/reindexd/config.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    REINDEXD__<SECTION>__<KEY>=<VALUE>

Examples:
    REINDEXD__LOGGING__LEVEL=DEBUG
    REINDEXD__SERVER__PORT=5018
    REINDEXD__POLL__MAX_ATTEMPTS=10
    REINDEXD__INDEXER__BIN_PATH=/usr/bin/indexer
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from reindexd.config.constants import (
    DEFAULT_COMPLETION_MARKER,
    PORT_MAX,
    PORT_MIN,
    TAIL_WINDOW_MAX,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        REINDEXD__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every poll attempt.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ServerConfig(BaseModel):
    """TCP listener configuration.

    Env vars:
        REINDEXD__SERVER__HOST: Bind address (default: 0.0.0.0)
        REINDEXD__SERVER__PORT: Port number (default: 5018)
        REINDEXD__SERVER__WORKERS: Threads available for reindex jobs
    """

    host: str = Field(default="0.0.0.0", description="Bind address.")
    port: int = Field(default=5018, description="Listener port.")
    max_request_bytes: int = Field(
        default=1024,
        description="Request payload is read with a single read of at most this many bytes.",
    )
    keepalive_idle_sec: int = Field(default=1, description="TCP_KEEPIDLE on accepted sockets.")
    keepalive_interval_sec: int = Field(default=3, description="TCP_KEEPINTVL on accepted sockets.")
    keepalive_count: int = Field(default=5, description="TCP_KEEPCNT on accepted sockets.")
    workers: int = Field(
        default=8,
        description="Worker threads for reindex jobs. Pings never wait on these.",
    )
    shutdown_timeout_sec: float = Field(
        default=5.0,
        description="Time allowed for in-flight connections after the listener closes.",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not (PORT_MIN <= v <= PORT_MAX):
            raise ValueError(f"Port must be {PORT_MIN}-{PORT_MAX}, got {v}")
        return v

    @field_validator("max_request_bytes", "workers")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Must be at least 1, got {v}")
        return v


class IndexerConfig(BaseModel):
    """External indexer invocation.

    Env vars:
        REINDEXD__INDEXER__BIN_PATH: indexer executable
        REINDEXD__INDEXER__CONFIG_PATH: sphinx.conf passed via --config
        REINDEXD__INDEXER__LOG_PATH: file receiving indexer stdout/stderr
    """

    bin_path: str = Field(default="/usr/bin/indexer", description="indexer executable.")
    config_path: str = Field(
        default="/etc/sphinxsearch/sphinx.conf",
        description="Passed to the indexer as --config.",
    )
    log_path: str | None = Field(
        default="/var/log/sphinxindexer.log",
        description="Indexer stdout/stderr are appended here. None discards them.",
    )
    fail_on_nonzero_exit: bool = Field(
        default=True,
        description="Treat a non-zero indexer exit status as a reindex failure.",
    )
    serialize: bool = Field(
        default=False,
        description="Run at most one reindex at a time. Concurrent reindexes share "
        "the searchd log and may see each other's completion line.",
    )


class SearchdConfig(BaseModel):
    """Shared searchd log observed for completion.

    Env vars:
        REINDEXD__SEARCHD__LOG_PATH: searchd.log location
    """

    log_path: str = Field(default="/var/log/sphinxsearch/searchd.log")
    tail_window_bytes: int = Field(
        default=TAIL_WINDOW_MAX,
        description="Bytes read from the end of the log on each inspection.",
    )
    completion_marker: str = Field(default=DEFAULT_COMPLETION_MARKER)

    @field_validator("tail_window_bytes")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if not (1 <= v <= TAIL_WINDOW_MAX):
            raise ValueError(f"Window must be 1-{TAIL_WINDOW_MAX} bytes, got {v}")
        return v


class PollConfig(BaseModel):
    """Completion polling budget.

    Env vars:
        REINDEXD__POLL__MAX_ATTEMPTS: Tail inspections before giving up
        REINDEXD__POLL__INTERVAL_SEC: Sleep between inspections
        REINDEXD__POLL__TIMEOUT_SEC: Wall-clock deadline for the whole wait
        REINDEXD__POLL__REQUIRE_CONFIRMATION: Fail when the marker is never seen
    """

    max_attempts: int = Field(default=10, description="Tail inspections per reindex.")
    interval_sec: float = Field(
        default=0.0,
        description="Sleep between inspections. 0 re-reads back to back.",
    )
    timeout_sec: float | None = Field(
        default=None,
        description="Deadline for the whole wait. None means attempts alone bound it.",
    )
    require_confirmation: bool = Field(
        default=False,
        description="Report an error instead of OK when the marker is not observed "
        "within the budget.",
    )

    @field_validator("max_attempts")
    @classmethod
    def validate_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_attempts must be at least 1, got {v}")
        return v

    @field_validator("interval_sec")
    @classmethod
    def validate_interval(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"interval_sec must be >= 0, got {v}")
        return v


class ReindexdConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    indexer: IndexerConfig = Field(default_factory=IndexerConfig)
    searchd: SearchdConfig = Field(default_factory=SearchdConfig)
    poll: PollConfig = Field(default_factory=PollConfig)
