"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages and
provides searchd log / fake indexer fixtures shared by the rotation and
daemon tests.
"""

import stat
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local reindexd package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of reindexd modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("reindexd"):
        del sys.modules[module_name]

from reindexd.config.models import (  # noqa: E402
    IndexerConfig,
    PollConfig,
    ReindexdConfig,
    SearchdConfig,
    ServerConfig,
)

OLD_LINE = "[Mon Jan  2 15:04:05.000 2012] [12345] accepting connections"


@pytest.fixture
def searchd_log(tmp_path: Path) -> Path:
    """searchd log seeded with one timestamped line."""
    log = tmp_path / "searchd.log"
    log.write_text(OLD_LINE + "\n")
    return log


@pytest.fixture
def make_indexer(tmp_path: Path) -> Callable[..., Path]:
    """Factory for a fake indexer script.

    The script records its arguments, optionally appends ``append_line`` to
    ``log_path``, and exits with ``exit_code``.
    """

    def _make(
        log_path: Path | None = None,
        append_line: str | None = None,
        exit_code: int = 0,
        name: str = "indexer",
    ) -> Path:
        script = tmp_path / name
        args_file = tmp_path / f"{name}.args"
        lines = ["#!/bin/sh", f'echo "$@" > "{args_file}"', 'echo "indexing $*"']
        if log_path is not None and append_line is not None:
            lines.append(f"echo '{append_line}' >> \"{log_path}\"")
        lines.append(f"exit {exit_code}")
        script.write_text("\n".join(lines) + "\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., ReindexdConfig]:
    """Factory for a config pointing at tmp_path resources and an ephemeral port."""

    def _make(
        indexer_bin: Path | None = None,
        log_path: Path | None = None,
        **poll: object,
    ) -> ReindexdConfig:
        return ReindexdConfig(
            server=ServerConfig(host="127.0.0.1", port=0, shutdown_timeout_sec=1.0),
            indexer=IndexerConfig(
                bin_path=str(indexer_bin or tmp_path / "missing-indexer"),
                config_path=str(tmp_path / "sphinx.conf"),
                log_path=str(tmp_path / "indexer.log"),
            ),
            searchd=SearchdConfig(log_path=str(log_path or tmp_path / "searchd.log")),
            poll=PollConfig(**poll),
        )

    return _make
