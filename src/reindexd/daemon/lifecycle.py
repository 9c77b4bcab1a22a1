"""Daemon lifecycle management."""

from __future__ import annotations

import asyncio
import signal

import structlog

from reindexd.config.models import ReindexdConfig
from reindexd.daemon.server import ReindexServer

logger = structlog.get_logger()


async def run_server(config: ReindexdConfig, *, shutdown_event: asyncio.Event | None = None) -> None:
    """Run the daemon until SIGINT/SIGTERM or ``shutdown_event`` is set.

    Raises:
        ServerError: The listener could not be bound.
    """
    shutdown = shutdown_event or asyncio.Event()
    server = ReindexServer(config)
    await server.start()

    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []

    def signal_handler(sig: signal.Signals) -> None:
        logger.info("shutdown_signal_received", signal=sig.name)
        shutdown.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, signal_handler, sig)
            installed.append(sig)
        except (NotImplementedError, RuntimeError):
            # Not the main thread, or no signal support on this loop
            logger.debug("signal_handler_unavailable", signal=sig.name)

    try:
        await shutdown.wait()
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)
        await server.stop()
