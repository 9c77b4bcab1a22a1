"""Tests for searchd log timestamp extraction."""

from datetime import datetime

import pytest

from reindexd.core.errors import ErrorCode, ParseError
from reindexd.rotation.timestamps import extract_timestamp


class TestExtractTimestamp:
    """extract_timestamp() tests."""

    def test_given_full_prefix_when_extracted_then_combines_date_year_and_millis(self) -> None:
        """Date text, year and milliseconds combine into one instant."""
        # Given
        line = "[Mon Jan  2 15:04:05.250 2012] [1234] caught SIGHUP"

        # When
        stamp = extract_timestamp(line)

        # Then
        assert stamp == datetime(2012, 1, 2, 15, 4, 5, 250_000)

    def test_given_same_second_when_compared_then_millis_decide_order(self) -> None:
        """Lines within one second order by their millisecond field."""
        later = extract_timestamp("[Mon Jan 2 15:04:05.500 2012] x")
        earlier = extract_timestamp("[Mon Jan 2 15:04:05.100 2012] x")

        assert later > earlier

    def test_given_date_only_prefix_when_compared_then_millis_applied(self) -> None:
        """Date-only prefixes parse as midnight and still honour milliseconds."""
        later = extract_timestamp("[Mon Jan 2.500 2012]")
        earlier = extract_timestamp("[Mon Jan 2.100 2012]")

        assert later > earlier
        assert later == datetime(2012, 1, 2, 0, 0, 0, 500_000)

    def test_given_prefix_mid_line_when_extracted_then_found(self) -> None:
        """The prefix is located anywhere in the line."""
        stamp = extract_timestamp("searchd: [Fri Sep  7 10:00:00.000 2012] started")

        assert stamp == datetime(2012, 9, 7, 10, 0, 0)

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "rotating index: all indexes done",
            "[Mon Jan 2 15:04:05 2012] no milliseconds",
            "[Mon Jan 2 15:04:05.12 2012] two-digit millis",
        ],
    )
    def test_given_line_without_prefix_when_extracted_then_parse_error(self, line: str) -> None:
        """Lines lacking the bracketed prefix raise ParseError."""
        with pytest.raises(ParseError) as exc_info:
            extract_timestamp(line)

        assert exc_info.value.code == ErrorCode.LOG_PARSE_ERROR
        assert exc_info.value.message == "Could not match a timestamp prefix"

    def test_given_unparseable_date_when_extracted_then_parse_error(self) -> None:
        """A prefix whose date text is not a searchd date raises ParseError."""
        with pytest.raises(ParseError) as exc_info:
            extract_timestamp("[yesterday afternoon.123 2012] done")

        assert "yesterday afternoon" in exc_info.value.message

