# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Tests for the TIMESTAMP validator

# Standard library imports
import calendar

# Third-party imports
import pytest

# Local/package imports
from ziggiz_courier_syslog_conformance.validation.timestamp import (
    TimestampValidator,
    days_in_month,
    is_leap_year,
)
from ziggiz_courier_syslog_conformance.violations import Severity, ViolationKind


@pytest.fixture
def validator():
    """Create a TimestampValidator instance."""
    return TimestampValidator()


@pytest.mark.unit
class TestLeapYear:
    """Tests for the Gregorian calendar helpers."""

    @pytest.mark.parametrize(
        "year,expected",
        [(2000, True), (1900, False), (2004, True), (2023, False), (2400, True)],
    )
    def test_is_leap_year(self, year, expected):
        """Test the leap year rule on century and ordinary years."""
        assert is_leap_year(year) is expected

    def test_is_leap_year_matches_calendar(self):
        """Test the leap year rule against the standard library calendar."""
        for year in range(1, 3000):
            assert is_leap_year(year) == calendar.isleap(year), year

    def test_days_in_month_matches_calendar(self):
        """Test month lengths against the standard library calendar."""
        for year in (1900, 2000, 2023, 2024):
            for month in range(1, 13):
                assert days_in_month(year, month) == calendar.monthrange(year, month)[1]

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_days_in_month_invalid(self, month):
        """Test that an invalid month raises ValueError."""
        with pytest.raises(ValueError):
            days_in_month(2023, month)


@pytest.mark.unit
class TestTimestampValidator:
    """Tests for the TimestampValidator class."""

    @pytest.mark.parametrize(
        "timestamp",
        [
            "1985-04-12T23:20:50.52Z",
            "1985-04-12T19:20:50.52-04:00",
            "2003-10-11T22:14:15.003Z",
            "2003-08-24T05:14:15.000003-07:00",
            "2003-10-11T22:14:15Z",
            "0000-01-01T00:00:00+00:00",
            "-",
        ],
    )
    def test_valid_timestamps(self, validator, timestamp):
        """Test timestamps taken from RFC 5424 examples."""
        result = validator.validate(timestamp)
        assert result.compliant, result.summary()

    @pytest.mark.parametrize(
        "timestamp",
        [
            "2003-08-24T05:14:15.000000003-07:00",  # more than six fraction digits
            "2003-10-11 22:14:15Z",  # missing "T"
            "2003-10-11T22:14:15",  # missing offset
            "2003-10-11t22:14:15Z",  # lowercase "t"
            "2003-13-11T22:14:15Z",  # month 13
            "2003-00-11T22:14:15Z",  # month 0
            "2003-10-00T22:14:15Z",  # day 0
            "2003-10-32T22:14:15Z",  # day 32
            "2003-10-11T24:00:00Z",  # hour 24
            "2003-10-11T22:60:15Z",  # minute 60
            "2003-10-11T22:14:60Z",  # leap second
            "2003-10-11T22:14:15+24:00",  # offset hour 24
            "2003-10-11T22:14:15.003Z\n",  # trailing LF
            "2003-10-11T22:14:15.003Z\r\n",  # trailing CRLF
            "Oct 11 22:14:15",  # RFC 3164 style
            "",
        ],
    )
    def test_grammar_violations(self, validator, timestamp):
        """Test that malformed timestamps are a single hard grammar violation."""
        result = validator.validate(timestamp)
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.kind == ViolationKind.TIMESTAMP_GRAMMAR
        assert violation.severity == Severity.HARD
        assert violation.field == "TIMESTAMP"
        assert result.aborted is True

    @pytest.mark.parametrize(
        "date,compliant",
        [
            ("2000-02-29", True),
            ("1900-02-29", False),
            ("2004-02-29", True),
            ("2023-02-29", False),
            ("2023-02-28", True),
            ("2024-02-30", False),
        ],
    )
    def test_leap_day(self, validator, date, compliant):
        """Test February 29 against the leap year rule."""
        result = validator.validate(f"{date}T12:00:00Z")
        assert result.compliant is compliant
        if not compliant:
            assert result.kinds() == [ViolationKind.TIMESTAMP_RANGE]
            assert result.violations[0].severity == Severity.SOFT

    @pytest.mark.parametrize("month", [4, 6, 9, 11])
    def test_thirty_day_months(self, validator, month):
        """Test that day 31 is rejected in thirty day months."""
        assert validator.validate(f"2023-{month:02d}-30T00:00:00Z").compliant
        result = validator.validate(f"2023-{month:02d}-31T00:00:00Z")
        assert result.kinds() == [ViolationKind.TIMESTAMP_RANGE]
        assert result.violations[0].expected == "<= 30"
        assert result.violations[0].actual == "31"

    @pytest.mark.parametrize("month", [1, 3, 5, 7, 8, 10, 12])
    def test_thirty_one_day_months(self, validator, month):
        """Test that day 31 is accepted in thirty one day months."""
        assert validator.validate(f"2023-{month:02d}-31T00:00:00Z").compliant

    def test_bytes_input(self, validator):
        """Test that bytes input is accepted."""
        assert validator.validate(b"2003-10-11T22:14:15.003Z").compliant

    def test_calendar_invalid_month_is_hard(self, validator):
        """Test that a month outside 1-12 is a hard violation."""
        result = validator.validate_calendar(2023, 13, 1)
        assert len(result.violations) == 1
        assert result.violations[0].severity == Severity.HARD
        assert result.violations[0].kind == ViolationKind.TIMESTAMP_RANGE
        assert result.aborted is True

    def test_calendar_day_below_one(self, validator):
        """Test that a day below 1 is reported."""
        result = validator.validate_calendar(2023, 1, 0)
        assert result.kinds() == [ViolationKind.TIMESTAMP_RANGE]
        assert result.aborted is False

    def test_calendar_negative_year(self, validator):
        """Test that a negative year is reported."""
        result = validator.validate_calendar(-1, 1, 1)
        assert result.kinds() == [ViolationKind.TIMESTAMP_RANGE]

    def test_idempotent(self, validator):
        """Test that validating twice gives the same violations."""
        first = validator.validate("2023-02-29T00:00:00Z")
        second = validator.validate("2023-02-29T00:00:00Z")
        assert first == second
