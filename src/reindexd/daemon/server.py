"""TCP listener that runs one handler task per accepted connection."""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import structlog

from reindexd.config.models import ReindexdConfig
from reindexd.core.errors import ServerError
from reindexd.daemon.handler import ConnectionHandler
from reindexd.rotation.orchestrator import ReindexOrchestrator

logger = structlog.get_logger()


@dataclass
class ReindexServer:
    """
    Owns the listening socket, the reindex worker pool and the orchestrator.

    Design:
    - asyncio accept loop, one task per connection
    - Reindex work goes to a ThreadPoolExecutor
    - accept() failures are logged by asyncio and the loop keeps accepting
    - stop() closes the listener, then gives in-flight connections
      shutdown_timeout_sec before cancelling their completion waits
    """

    config: ReindexdConfig
    orchestrator: ReindexOrchestrator | None = None

    _server: asyncio.Server | None = field(default=None, init=False)
    _executor: ThreadPoolExecutor | None = field(default=None, init=False)
    _connections: set[asyncio.Task[None]] = field(default_factory=set, init=False)

    def __post_init__(self) -> None:
        if self.orchestrator is None:
            self.orchestrator = ReindexOrchestrator(
                indexer=self.config.indexer,
                searchd=self.config.searchd,
                poll=self.config.poll,
            )

    @property
    def address(self) -> tuple[str, int]:
        """Bound (host, port). Useful when configured with port 0."""
        if self._server is None or not self._server.sockets:
            raise RuntimeError("server is not listening")
        host, port = self._server.sockets[0].getsockname()[:2]
        return host, port

    @property
    def is_serving(self) -> bool:
        return self._server is not None and self._server.is_serving()

    async def start(self) -> None:
        """Bind and start accepting.

        Raises:
            ServerError: The address could not be bound.
        """
        server_config = self.config.server
        self._executor = ThreadPoolExecutor(
            max_workers=server_config.workers,
            thread_name_prefix="reindexd-worker",
        )
        assert self.orchestrator is not None
        self.orchestrator.reset()
        handler = ConnectionHandler(
            orchestrator=self.orchestrator,
            executor=self._executor,
            config=server_config,
        )

        async def on_connect(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
            task = asyncio.current_task()
            if task is not None:
                self._connections.add(task)
                task.add_done_callback(self._connections.discard)
            await handler(reader, writer)

        try:
            self._server = await asyncio.start_server(
                on_connect,
                host=server_config.host,
                port=server_config.port,
                reuse_address=True,
            )
        except OSError as e:
            self._executor.shutdown(wait=False)
            self._executor = None
            raise ServerError.bind_failed(server_config.host, server_config.port, e) from e

        host, port = self.address
        logger.info("server_listening", host=host, port=port, workers=server_config.workers)

    async def stop(self) -> None:
        """Stop accepting and wind down in-flight connections."""
        if self._server is None:
            return
        logger.info("server_stopping", in_flight=len(self._connections))
        self._server.close()

        pending = set(self._connections)
        if pending:
            _, still_running = await asyncio.wait(
                pending, timeout=self.config.server.shutdown_timeout_sec
            )
            if still_running:
                logger.warning("server_stop_timeout", in_flight=len(still_running))
                assert self.orchestrator is not None
                self.orchestrator.cancel()
                for task in still_running:
                    task.cancel()
                await asyncio.gather(*still_running, return_exceptions=True)

        await self._server.wait_closed()
        self._server = None

        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None
        logger.info("server_stopped")
