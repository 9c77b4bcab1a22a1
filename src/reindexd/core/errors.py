"""reindexd error types with typed error codes.

Error code ranges:
- 1xxx: Protocol (request decoding, dispatch)
- 2xxx: Log (shared log access and parsing)
- 3xxx: Process (external indexer, completion detection)
- 4xxx: Config
- 5xxx: Network (server bind, client transport)
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Protocol (1xxx)
    REQUEST_DECODE_ERROR = 1001
    UNKNOWN_REQUEST = 1002

    # Log (2xxx)
    LOG_READ_ERROR = 2001
    LOG_PARSE_ERROR = 2002

    # Process (3xxx)
    PROCESS_LAUNCH_FAILED = 3001
    PROCESS_EXIT_NONZERO = 3002
    COMPLETION_NOT_CONFIRMED = 3003
    COMPLETION_CANCELLED = 3004

    # Config (4xxx)
    CONFIG_PARSE_ERROR = 4001
    CONFIG_INVALID_VALUE = 4002

    # Network (5xxx)
    SERVER_BIND_FAILED = 5001
    CLIENT_TRANSPORT_ERROR = 5002
    CLIENT_BAD_RESPONSE = 5003

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class ReindexdError(Exception):
    """Base error with structured context for logs and responses."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'LOG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class DecodeError(ReindexdError):
    """Request payload could not be decoded."""

    @classmethod
    def malformed(cls, reason: str) -> "DecodeError":
        return cls(
            code=ErrorCode.REQUEST_DECODE_ERROR,
            message=reason,
            details={"reason": reason},
        )


class UnknownRequestError(ReindexdError):
    """Request kind is not one the daemon serves."""

    @classmethod
    def for_kind(cls, kind: str) -> "UnknownRequestError":
        return cls(
            code=ErrorCode.UNKNOWN_REQUEST,
            message=kind,
            details={"kind": kind},
        )


class LogReadError(ReindexdError):
    """Shared log could not be opened, statted or read."""

    @classmethod
    def from_os_error(cls, path: str, exc: OSError) -> "LogReadError":
        reason = exc.strerror or str(exc)
        return cls(
            code=ErrorCode.LOG_READ_ERROR,
            message=f"Could not read log {path}: {reason}",
            retryable=True,
            details={"path": path, "reason": reason},
        )


class ParseError(ReindexdError):
    """Log line has no parseable timestamp prefix."""

    @classmethod
    def no_timestamp(cls, line: str) -> "ParseError":
        return cls(
            code=ErrorCode.LOG_PARSE_ERROR,
            message="Could not match a timestamp prefix",
            details={"line": line},
        )

    @classmethod
    def no_complete_line(cls, path: str, window: int) -> "ParseError":
        return cls(
            code=ErrorCode.LOG_PARSE_ERROR,
            message=f"No complete line in the last {window} bytes of {path}",
            details={"path": path, "window": window},
        )

    @classmethod
    def bad_date(cls, text: str) -> "ParseError":
        return cls(
            code=ErrorCode.LOG_PARSE_ERROR,
            message=f"Could not parse log date: {text!r}",
            details={"text": text},
        )


class ExternalProcessError(ReindexdError):
    """External indexer failed to launch or exited unsuccessfully."""

    @classmethod
    def launch_failed(cls, command: list[str], exc: OSError) -> "ExternalProcessError":
        reason = exc.strerror or str(exc)
        return cls(
            code=ErrorCode.PROCESS_LAUNCH_FAILED,
            message=f"Could not start {command[0]}: {reason}",
            details={"command": command, "reason": reason},
        )

    @classmethod
    def nonzero_exit(cls, command: list[str], returncode: int) -> "ExternalProcessError":
        return cls(
            code=ErrorCode.PROCESS_EXIT_NONZERO,
            message=f"{command[0]} exited with status {returncode}",
            retryable=True,
            details={"command": command, "returncode": returncode},
        )


class CompletionNotConfirmedError(ReindexdError):
    """Completion marker was not observed after the watermark."""

    @classmethod
    def not_observed(cls, outcome: str, attempts: int) -> "CompletionNotConfirmedError":
        return cls(
            code=ErrorCode.COMPLETION_NOT_CONFIRMED,
            message=f"Rotation not confirmed ({outcome} after {attempts} attempts)",
            retryable=True,
            details={"outcome": outcome, "attempts": attempts},
        )

    @classmethod
    def cancelled(cls, attempts: int) -> "CompletionNotConfirmedError":
        return cls(
            code=ErrorCode.COMPLETION_CANCELLED,
            message=f"Rotation wait cancelled after {attempts} attempts",
            details={"attempts": attempts},
        )


class ConfigError(ReindexdError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ServerError(ReindexdError):
    """Listener could not be established."""

    @classmethod
    def bind_failed(cls, host: str, port: int, exc: OSError) -> "ServerError":
        reason = exc.strerror or str(exc)
        return cls(
            code=ErrorCode.SERVER_BIND_FAILED,
            message=f"Could not listen on {host}:{port}: {reason}",
            details={"host": host, "port": port, "reason": reason},
        )


class ClientError(ReindexdError):
    """Client-side transport or response errors."""

    @classmethod
    def transport(cls, host: str, port: int, exc: OSError) -> "ClientError":
        reason = exc.strerror or str(exc)
        return cls(
            code=ErrorCode.CLIENT_TRANSPORT_ERROR,
            message=f"Could not talk to {host}:{port}: {reason}",
            retryable=True,
            details={"host": host, "port": port, "reason": reason},
        )

    @classmethod
    def bad_response(cls, reason: str) -> "ClientError":
        return cls(
            code=ErrorCode.CLIENT_BAD_RESPONSE,
            message=f"Invalid response from daemon: {reason}",
            details={"reason": reason},
        )


class InternalError(ReindexdError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
