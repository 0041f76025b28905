# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# UTF-8 byte sequence validation

# Standard library imports
import logging

from typing import Union

# Local/package imports
from ziggiz_courier_syslog_conformance.violations import (
    Severity,
    ValidationResult,
    Violation,
    ViolationKind,
)

UTF8_BOM = b"\xef\xbb\xbf"


class UTF8Validator:
    """
    Checks that a byte sequence is well-formed UTF-8 (RFC 3629).

    Overlong encodings, encoded surrogates, code points above U+10FFFF and truncated
    sequences are all rejected. Every invalid sequence is reported, not only the first.
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(
            "ziggiz_courier_syslog_conformance.validation.utf8"
        )

    def validate(
        self, data: Union[bytes, bytearray], field: str = "MSG"
    ) -> ValidationResult:
        """
        Validate a byte sequence.

        Args:
            data: The bytes to check
            field: Name of the message field the bytes came from, used in violations

        Returns:
            A ValidationResult with one soft UTF8 violation per invalid sequence
        """
        result = ValidationResult()
        data = bytes(data)
        offset = 0

        while offset < len(data):
            try:
                data[offset:].decode("utf-8")
                break
            except UnicodeDecodeError as e:
                start = offset + e.start
                end = offset + e.end
                result.add(
                    Violation(
                        kind=ViolationKind.UTF8,
                        severity=Severity.SOFT,
                        field=field,
                        message=f"invalid UTF-8 sequence: {e.reason}",
                        position=start,
                        actual=data[start:end].hex(),
                    )
                )
                offset = end

        if not result.compliant:
            self.logger.debug(
                "UTF-8 validation failed",
                extra={"field": field, "violation_count": len(result.violations)},
            )
        return result
