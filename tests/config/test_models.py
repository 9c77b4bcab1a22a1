"""Tests for config/models.py module.

Covers:
- LogOutputConfig / LoggingConfig
- ServerConfig validation
- SearchdConfig window bounds
- PollConfig validation
- ReindexdConfig root model
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from reindexd.config.models import (
    IndexerConfig,
    LoggingConfig,
    LogOutputConfig,
    PollConfig,
    ReindexdConfig,
    SearchdConfig,
    ServerConfig,
)


class TestLogOutputConfig:
    """Tests for LogOutputConfig model."""

    def test_defaults(self) -> None:
        config = LogOutputConfig()
        assert config.format == "console"
        assert config.destination == "stderr"
        assert config.level is None

    def test_absolute_path_destination(self) -> None:
        config = LogOutputConfig(destination="/var/log/reindexd.log")
        assert config.destination == "/var/log/reindexd.log"

    def test_relative_path_fails(self) -> None:
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/reindexd.log")


class TestLoggingConfig:
    def test_defaults(self) -> None:
        config = LoggingConfig()
        assert config.level == "INFO"
        assert len(config.outputs) == 1

    def test_invalid_level_fails(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="VERBOSE")  # type: ignore[arg-type]


class TestServerConfig:
    """Tests for ServerConfig model."""

    def test_defaults_match_sphinx_layout(self) -> None:
        config = ServerConfig()
        assert config.host == "0.0.0.0"
        assert config.port == 5018
        assert config.max_request_bytes == 1024
        assert (config.keepalive_idle_sec, config.keepalive_interval_sec) == (1, 3)
        assert config.keepalive_count == 5

    @pytest.mark.parametrize("port", [0, 5018, 65535])
    def test_valid_ports(self, port: int) -> None:
        assert ServerConfig(port=port).port == port

    @pytest.mark.parametrize("port", [-1, 65536])
    def test_invalid_ports(self, port: int) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(port=port)

    def test_zero_workers_fails(self) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(workers=0)


class TestSearchdConfig:
    def test_window_defaults_to_max(self) -> None:
        assert SearchdConfig().tail_window_bytes == 1024

    @pytest.mark.parametrize("window", [0, 1025])
    def test_window_out_of_range_fails(self, window: int) -> None:
        with pytest.raises(ValidationError):
            SearchdConfig(tail_window_bytes=window)


class TestPollConfig:
    def test_defaults_bound_by_attempts_only(self) -> None:
        config = PollConfig()
        assert config.max_attempts == 10
        assert config.interval_sec == 0.0
        assert config.timeout_sec is None

    def test_negative_interval_fails(self) -> None:
        with pytest.raises(ValidationError):
            PollConfig(interval_sec=-1)


class TestReindexdConfig:
    def test_sections_present(self) -> None:
        config = ReindexdConfig()
        assert isinstance(config.server, ServerConfig)
        assert isinstance(config.indexer, IndexerConfig)
        assert isinstance(config.searchd, SearchdConfig)
        assert isinstance(config.poll, PollConfig)
        assert config.indexer.fail_on_nonzero_exit is True
        assert config.indexer.serialize is False
