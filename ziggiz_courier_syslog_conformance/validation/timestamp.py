# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# RFC 5424 TIMESTAMP validation: grammar and calendar checks

# Standard library imports
import logging
import re

from typing import Union

# Local/package imports
from ziggiz_courier_syslog_conformance.violations import (
    Severity,
    ValidationResult,
    Violation,
    ViolationKind,
)

NILVALUE = b"-"

# FULL-DATE "T" FULL-TIME, TIME-SECFRAC is at most six digits
TIMESTAMP_PATTERN = re.compile(
    rb"^(?P<year>[0-9]{4})-(?P<month>0[1-9]|1[0-2])-(?P<day>0[1-9]|[12][0-9]|3[01])"
    rb"T(?P<hour>[01][0-9]|2[0-3]):(?P<minute>[0-5][0-9]):(?P<second>[0-5][0-9])"
    rb"(?:\.(?P<secfrac>[0-9]{1,6}))?"
    rb"(?P<offset>Z|[+-](?:[01][0-9]|2[0-3]):[0-5][0-9])\Z"
)

THIRTY_ONE_DAY_MONTHS = frozenset((1, 3, 5, 7, 8, 10, 12))
THIRTY_DAY_MONTHS = frozenset((4, 6, 9, 11))


def is_leap_year(year: int) -> bool:
    """Gregorian leap year rule."""
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(year: int, month: int) -> int:
    """
    Number of days in a month.

    Raises:
        ValueError: If month is not between 1 and 12
    """
    if month in THIRTY_ONE_DAY_MONTHS:
        return 31
    if month in THIRTY_DAY_MONTHS:
        return 30
    if month == 2:
        return 29 if is_leap_year(year) else 28
    raise ValueError(f"Invalid month: {month}")


class TimestampValidator:
    """Validates the TIMESTAMP field of an RFC 5424 message."""

    field = "TIMESTAMP"

    def __init__(self) -> None:
        self.logger = logging.getLogger(
            "ziggiz_courier_syslog_conformance.validation.timestamp"
        )

    def validate(self, timestamp: Union[str, bytes]) -> ValidationResult:
        """
        Validate a timestamp's grammar and calendar semantics.

        The NILVALUE "-" is a valid timestamp and has no calendar to check.

        Args:
            timestamp: The TIMESTAMP field text

        Returns:
            A ValidationResult; a grammar mismatch is a single hard violation
        """
        if isinstance(timestamp, str):
            timestamp = timestamp.encode("utf-8", "surrogatepass")

        result = ValidationResult()
        if timestamp == NILVALUE:
            return result

        match = TIMESTAMP_PATTERN.match(timestamp)
        if not match:
            result.add(
                Violation(
                    kind=ViolationKind.TIMESTAMP_GRAMMAR,
                    severity=Severity.HARD,
                    field=self.field,
                    message="does not match the RFC 5424 timestamp grammar",
                    actual=timestamp.decode("utf-8", "replace"),
                )
            )
            self.logger.debug(
                "Timestamp grammar mismatch", extra={"timestamp": timestamp}
            )
            return result

        return self.validate_calendar(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
        )

    def validate_calendar(self, year: int, month: int, day: int) -> ValidationResult:
        """
        Check a date for calendar validity.

        Args:
            year: DATE-FULLYEAR, must not be negative
            month: DATE-MONTH, an out of range month is a hard violation
            day: DATE-MDAY, must not exceed the length of the month

        Returns:
            A ValidationResult with any calendar violations
        """
        result = ValidationResult()

        if year < 0:
            result.add(
                Violation(
                    kind=ViolationKind.TIMESTAMP_RANGE,
                    severity=Severity.SOFT,
                    field=self.field,
                    message="DATE-FULLYEAR is negative",
                    expected=">= 0",
                    actual=str(year),
                )
            )
        if day < 1:
            result.add(
                Violation(
                    kind=ViolationKind.TIMESTAMP_RANGE,
                    severity=Severity.SOFT,
                    field=self.field,
                    message="DATE-MDAY is less than 1",
                    expected=">= 1",
                    actual=str(day),
                )
            )

        try:
            max_day = days_in_month(year, month)
        except ValueError:
            result.add(
                Violation(
                    kind=ViolationKind.TIMESTAMP_RANGE,
                    severity=Severity.HARD,
                    field=self.field,
                    message="DATE-MONTH was not a value between 1 and 12",
                    expected="1..12",
                    actual=str(month),
                )
            )
            return result

        if day > max_day:
            result.add(
                Violation(
                    kind=ViolationKind.TIMESTAMP_RANGE,
                    severity=Severity.SOFT,
                    field=self.field,
                    message=f"DATE-MDAY exceeds the length of month {month} in {year}",
                    expected=f"<= {max_day}",
                    actual=str(day),
                )
            )
        return result
