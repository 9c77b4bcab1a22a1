"""Core module exports."""

from reindexd.core.errors import (
    ClientError,
    CompletionNotConfirmedError,
    ConfigError,
    DecodeError,
    ErrorCode,
    ExternalProcessError,
    InternalError,
    LogReadError,
    ParseError,
    ReindexdError,
    ServerError,
    UnknownRequestError,
)
from reindexd.core.logging import (
    clear_connection_id,
    configure_logging,
    get_connection_id,
    set_connection_id,
)

__all__ = [
    # Errors
    "ReindexdError",
    "ErrorCode",
    "ClientError",
    "CompletionNotConfirmedError",
    "ConfigError",
    "DecodeError",
    "ExternalProcessError",
    "InternalError",
    "LogReadError",
    "ParseError",
    "ServerError",
    "UnknownRequestError",
    # Logging
    "clear_connection_id",
    "configure_logging",
    "get_connection_id",
    "set_connection_id",
]
