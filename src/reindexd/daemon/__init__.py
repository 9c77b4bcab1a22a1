"""reindexd daemon - TCP listener dispatching ping and reindex requests."""

from reindexd.daemon.handler import ConnectionHandler, set_keepalive
from reindexd.daemon.lifecycle import run_server
from reindexd.daemon.server import ReindexServer

__all__ = [
    "ConnectionHandler",
    "ReindexServer",
    "run_server",
    "set_keepalive",
]
