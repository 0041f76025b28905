# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Assertion helpers for test suites that certify syslog output
#
# Example:
#     def test_emitted_messages_are_rfc5424(tmp_path):
#         emit_logs(tmp_path / "out.log", count=3)
#         assert_rfc5424_file(tmp_path / "out.log", expected_count=3)

# Standard library imports
from pathlib import Path
from typing import Optional, Union

# Local/package imports
from ziggiz_courier_syslog_conformance.batch import BatchReport, BatchValidator
from ziggiz_courier_syslog_conformance.validation.message import MessageValidator
from ziggiz_courier_syslog_conformance.violations import ValidationResult


class RFC5424ComplianceError(AssertionError):
    """
    Raised when a message or file is not RFC 5424 compliant.

    Attributes:
        result: The ValidationResult or BatchReport describing every violation.
    """

    def __init__(self, message: str, result: Union[ValidationResult, BatchReport]):
        super().__init__(message)
        self.result = result


def assert_rfc5424_compliant(
    message: Union[str, bytes], validator: Optional[MessageValidator] = None
) -> ValidationResult:
    """
    Assert that a single message is RFC 5424 compliant.

    Returns:
        The (compliant) ValidationResult

    Raises:
        RFC5424ComplianceError: If any violation was found
    """
    validator = validator or MessageValidator()
    result = validator.validate(message)
    if not result.compliant:
        raise RFC5424ComplianceError(
            f"message is not RFC 5424 compliant: {message!r}\n{result.summary()}",
            result,
        )
    return result


def assert_rfc5424_file(
    path: Union[str, Path],
    expected_count: int,
    validator: Optional[BatchValidator] = None,
) -> BatchReport:
    """
    Assert that every message of a file is compliant and the count matches.

    Returns:
        The (compliant) BatchReport

    Raises:
        RFC5424ComplianceError: If any message is non-compliant or the count differs
    """
    validator = validator or BatchValidator()
    report = validator.validate_file(path, expected_count)
    if not report.compliant:
        raise RFC5424ComplianceError(report.summary(), report)
    return report
