"""Tests for error types and codes."""

import pytest

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


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.REQUEST_DECODE_ERROR, 1000),
            (ErrorCode.UNKNOWN_REQUEST, 1000),
            (ErrorCode.LOG_READ_ERROR, 2000),
            (ErrorCode.LOG_PARSE_ERROR, 2000),
            (ErrorCode.PROCESS_LAUNCH_FAILED, 3000),
            (ErrorCode.COMPLETION_NOT_CONFIRMED, 3000),
            (ErrorCode.CONFIG_PARSE_ERROR, 4000),
            (ErrorCode.SERVER_BIND_FAILED, 5000),
            (ErrorCode.INTERNAL_ERROR, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        assert expected_range <= code.value < expected_range + 1000


class TestReindexdError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        # Given
        error = ReindexdError(
            code=ErrorCode.LOG_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2002,
            "error": "LOG_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        error = ReindexdError(code=ErrorCode.INTERNAL_ERROR, message="Something broke")

        assert str(error) == "[9001] INTERNAL_ERROR: Something broke"

    def test_given_error_when_raised_then_catchable_as_base(self) -> None:
        with pytest.raises(ReindexdError):
            raise ParseError.no_timestamp("x")


class TestFactories:
    """Factory classmethod tests."""

    def test_decode_error_keeps_reason_as_message(self) -> None:
        error = DecodeError.malformed("Expecting value: line 1 column 1 (char 0)")

        assert error.message == "Expecting value: line 1 column 1 (char 0)"
        assert error.code == ErrorCode.REQUEST_DECODE_ERROR

    def test_unknown_request_message_is_kind(self) -> None:
        error = UnknownRequestError.for_kind("status")

        assert error.message == "status"
        assert error.details == {"kind": "status"}

    def test_log_read_error_uses_strerror(self) -> None:
        error = LogReadError.from_os_error(
            "/var/log/searchd.log", FileNotFoundError(2, "No such file or directory")
        )

        assert error.message == "Could not read log /var/log/searchd.log: No such file or directory"
        assert error.retryable

    def test_parse_error_bad_date(self) -> None:
        error = ParseError.bad_date("Mon Foo 2 2012")

        assert "Mon Foo 2 2012" in error.message

    def test_external_process_launch_failed(self) -> None:
        error = ExternalProcessError.launch_failed(
            ["/usr/bin/indexer", "main"], PermissionError(13, "Permission denied")
        )

        assert error.code == ErrorCode.PROCESS_LAUNCH_FAILED
        assert error.message == "Could not start /usr/bin/indexer: Permission denied"

    def test_external_process_nonzero_exit(self) -> None:
        error = ExternalProcessError.nonzero_exit(["/usr/bin/indexer", "main"], 3)

        assert error.message == "/usr/bin/indexer exited with status 3"
        assert error.details["returncode"] == 3

    def test_completion_not_confirmed(self) -> None:
        error = CompletionNotConfirmedError.not_observed("exhausted", 10)

        assert error.message == "Rotation not confirmed (exhausted after 10 attempts)"

    def test_config_invalid_value(self) -> None:
        error = ConfigError.invalid_value("server.port", 99999, "out of range")

        assert error.message == "Invalid value for 'server.port': out of range"
        assert error.details["value"] == "99999"

    def test_server_bind_failed(self) -> None:
        error = ServerError.bind_failed("0.0.0.0", 5018, OSError(98, "Address already in use"))

        assert error.message == "Could not listen on 0.0.0.0:5018: Address already in use"

    def test_client_bad_response(self) -> None:
        error = ClientError.bad_response("not json")

        assert error.code == ErrorCode.CLIENT_BAD_RESPONSE

    def test_internal_unexpected(self) -> None:
        error = InternalError.unexpected("oops", where="handler")

        assert error.message == "Internal error: oops"
        assert error.details == {"where": "handler"}
