"""Per-connection request handling."""

from __future__ import annotations

import asyncio
import contextlib
import contextvars
import functools
import socket
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any

import structlog

from reindexd.config.constants import REQUEST_PING, REQUEST_REINDEX
from reindexd.config.models import ServerConfig
from reindexd.core.errors import (
    DecodeError,
    InternalError,
    ReindexdError,
    UnknownRequestError,
)
from reindexd.core.logging import clear_connection_id, set_connection_id
from reindexd.protocol import Request, Response, decode_request, encode_response
from reindexd.rotation.orchestrator import ReindexOrchestrator

logger = structlog.get_logger()


def set_keepalive(sock: Any, idle_sec: int, interval_sec: int, count: int) -> None:
    """Enable TCP keep-alive probing on ``sock``.

    Platforms lacking one of the TCP_KEEP* options get the subset they support.

    Raises:
        OSError: The socket rejected an option.
    """
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
    for name, value in (
        ("TCP_KEEPIDLE", idle_sec),
        ("TCP_KEEPINTVL", interval_sec),
        ("TCP_KEEPCNT", count),
    ):
        option = getattr(socket, name, None)
        if option is None:
            logger.debug("keepalive_option_unsupported", option=name)
            continue
        sock.setsockopt(socket.IPPROTO_TCP, option, value)


@dataclass
class ConnectionHandler:
    """
    Serves exactly one request per connection.

    ReadRequest -> Decode -> Dispatch{ping, reindex, unknown} -> WriteResponse -> Close

    Pings are answered on the event loop. Reindexes run on ``executor`` so a
    long rotation never delays other connections.
    """

    orchestrator: ReindexOrchestrator
    executor: Executor
    config: ServerConfig

    async def __call__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        set_connection_id()
        peer = writer.get_extra_info("peername")
        logger.info("connection_accepted", peer=str(peer))
        try:
            self._configure_socket(writer)

            try:
                payload = await reader.read(self.config.max_request_bytes)
            except (ConnectionError, OSError) as e:
                logger.warning("request_read_failed", error=str(e))
                return
            if not payload:
                logger.info("connection_closed_without_request")
                return

            response = await self.handle_payload(payload)
            await self._write(writer, response)
        finally:
            writer.close()
            with contextlib.suppress(ConnectionError, OSError):
                await writer.wait_closed()
            logger.debug("connection_closed")
            clear_connection_id()

    async def handle_payload(self, payload: bytes) -> Response:
        """Decode and dispatch one payload. Never raises for per-request errors."""
        try:
            request = decode_request(payload)
        except DecodeError as e:
            logger.warning("request_decode_failed", error=e.message)
            return Response.decode_failed(e.message)

        logger.info("request_received", kind=request.kind, index=request.index)
        try:
            return await self.dispatch(request)
        except UnknownRequestError as e:
            logger.warning("unknown_request", kind=request.kind)
            return Response.unknown(e.message)

    async def dispatch(self, request: Request) -> Response:
        if request.kind == REQUEST_PING:
            return Response.pong()
        if request.kind == REQUEST_REINDEX:
            return await self._reindex(request.index)
        raise UnknownRequestError.for_kind(request.kind)

    async def _reindex(self, index_name: str) -> Response:
        loop = asyncio.get_running_loop()
        # Executor threads do not inherit contextvars; carry the connection id over
        ctx = contextvars.copy_context()
        try:
            await loop.run_in_executor(
                self.executor,
                functools.partial(ctx.run, self.orchestrator.reindex, index_name),
            )
        except ReindexdError as e:
            logger.error("reindex_failed", index=index_name, error=e.error_name, detail=e.message)
            return Response.reindex_failed(e.message)
        except Exception as e:
            logger.exception("reindex_crashed", index=index_name)
            error = InternalError.unexpected(
                str(e) or type(e).__name__, index=index_name, exception=type(e).__name__
            )
            return Response.reindex_failed(error.message)
        return Response.reindexed()

    def _configure_socket(self, writer: asyncio.StreamWriter) -> None:
        sock = writer.get_extra_info("socket")
        if sock is None:
            return
        try:
            set_keepalive(
                sock,
                self.config.keepalive_idle_sec,
                self.config.keepalive_interval_sec,
                self.config.keepalive_count,
            )
        except OSError as e:
            logger.warning("keepalive_config_failed", error=str(e))

    async def _write(self, writer: asyncio.StreamWriter, response: Response) -> None:
        try:
            writer.write(encode_response(response))
            await writer.drain()
        except (ConnectionError, OSError) as e:
            logger.warning("response_write_failed", error=str(e))
            return
        logger.info("response_sent", ok=response.ok)
