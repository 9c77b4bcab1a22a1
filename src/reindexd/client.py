"""Blocking client for the reindexd wire protocol."""

from __future__ import annotations

import socket

from reindexd.core.errors import ClientError, DecodeError
from reindexd.protocol import Request, Response, decode_response, encode_request

RECV_CHUNK = 4096


def send_payload(host: str, port: int, payload: bytes, *, timeout: float | None = None) -> bytes:
    """Send raw bytes, half-close, and return everything the daemon writes back.

    Raises:
        ClientError: Connection, send or receive failed.
    """
    try:
        with socket.create_connection((host, port), timeout=timeout) as sock:
            sock.sendall(payload)
            sock.shutdown(socket.SHUT_WR)
            chunks: list[bytes] = []
            while chunk := sock.recv(RECV_CHUNK):
                chunks.append(chunk)
    except OSError as e:
        raise ClientError.transport(host, port, e) from e
    return b"".join(chunks)


def send_request(
    host: str,
    port: int,
    kind: str,
    index: str = "",
    *,
    timeout: float | None = None,
) -> Response:
    """Send one request and decode the single response.

    ``timeout`` applies to each socket operation; a reindex holds the
    connection open until the rotation is observed, so leave it None or
    generous for those.

    Raises:
        ClientError: Transport failure, or the daemon replied with something
            that is not a response object.
    """
    raw = send_payload(host, port, encode_request(Request(kind=kind, index=index)), timeout=timeout)
    if not raw:
        raise ClientError.bad_response("connection closed without a response")
    try:
        return decode_response(raw)
    except DecodeError as e:
        raise ClientError.bad_response(e.message) from e
