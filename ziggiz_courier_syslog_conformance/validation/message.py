# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# RFC 5424 message validation
#
# A candidate line is matched against the RFC 5424 message grammar, then each extracted
# field is checked: PRIVAL range, VERSION literal, TIMESTAMP, STRUCTURED-DATA and, for
# BOM-prefixed messages, the UTF-8 encoding of MSG.
#
# Example compliant message:
#   <165>1 2003-10-11T22:14:15.003Z mymachine.example.com evntslog - ID47
#   [exampleSDID@32473 iut="3" eventSource="Application" eventID="1011"] An application event

# Standard library imports
import logging
import re

from typing import NamedTuple, Optional, Union

# Local/package imports
from ziggiz_courier_syslog_conformance.telemetry import get_tracer
from ziggiz_courier_syslog_conformance.validation.structured_data import (
    StructuredDataValidator,
)
from ziggiz_courier_syslog_conformance.validation.timestamp import TimestampValidator
from ziggiz_courier_syslog_conformance.validation.utf8 import UTF8_BOM, UTF8Validator
from ziggiz_courier_syslog_conformance.violations import (
    Severity,
    ValidationResult,
    Violation,
    ViolationKind,
)

PRIVAL_MIN = 0
PRIVAL_MAX = 191
VERSION = b"1"

# PRIVAL and VERSION are captured loosely so that out of range values are reported
# as field violations instead of grammar mismatches.
RFC5424_PATTERN = re.compile(
    rb"^<(?P<prival>-?[0-9]{1,3})>(?P<version>[0-9]{1,3})"
    rb" (?P<timestamp>[!-~]+)"
    rb" (?P<hostname>[!-~]{1,255})"
    rb" (?P<app_name>[!-~]{1,48})"
    rb" (?P<procid>[!-~]{1,128})"
    rb" (?P<msgid>[!-~]{1,32})"
    rb" (?P<structured_data>-|(?:\[(?:[^\]\"]|\"(?:[^\"\\]|\\.)*\")*\])+)"
    rb"(?: (?P<msg>.*))?\Z",
    re.DOTALL,
)


class MessageFields(NamedTuple):
    """Fields extracted from a candidate message by the RFC 5424 grammar."""

    prival: int
    version: bytes
    timestamp: bytes
    hostname: bytes
    app_name: bytes
    procid: bytes
    msgid: bytes
    structured_data: bytes
    msg: bytes


def to_bytes(message: Union[str, bytes, bytearray]) -> bytes:
    """
    Normalize a candidate message to bytes.

    Raises:
        TypeError: If message is neither str nor bytes
    """
    if isinstance(message, str):
        return message.encode("utf-8", "surrogatepass")
    if isinstance(message, (bytes, bytearray)):
        return bytes(message)
    raise TypeError(f"Expected str or bytes, got {type(message).__name__}")


def match_fields(message: Union[str, bytes]) -> Optional[MessageFields]:
    """Match a line against the RFC 5424 grammar, None if it does not match."""
    match = RFC5424_PATTERN.match(to_bytes(message))
    if not match:
        return None
    return MessageFields(
        prival=int(match.group("prival")),
        version=match.group("version"),
        timestamp=match.group("timestamp"),
        hostname=match.group("hostname"),
        app_name=match.group("app_name"),
        procid=match.group("procid"),
        msgid=match.group("msgid"),
        structured_data=match.group("structured_data"),
        msg=match.group("msg") or b"",
    )


class MessageValidator:
    """
    Validates complete RFC 5424 messages.

    The validator keeps no state between calls, so one instance can validate any
    number of messages, including from several threads.
    """

    def __init__(
        self,
        strict_structured_data: bool = False,
        timestamp_validator: Optional[TimestampValidator] = None,
        structured_data_validator: Optional[StructuredDataValidator] = None,
        utf8_validator: Optional[UTF8Validator] = None,
    ):
        """
        Initialize the message validator.

        Args:
            strict_structured_data: Use strict STRUCTURED-DATA validation
            timestamp_validator: Validator for the TIMESTAMP field
            structured_data_validator: Validator for the STRUCTURED-DATA field
            utf8_validator: Validator for BOM-prefixed MSG content
        """
        self.logger = logging.getLogger(
            "ziggiz_courier_syslog_conformance.validation.message"
        )
        self.utf8_validator = utf8_validator or UTF8Validator()
        self.timestamp_validator = timestamp_validator or TimestampValidator()
        self.structured_data_validator = (
            structured_data_validator
            or StructuredDataValidator(
                strict=strict_structured_data, utf8_validator=self.utf8_validator
            )
        )

    def validate(self, message: Union[str, bytes]) -> ValidationResult:
        """
        Validate a candidate message.

        Args:
            message: One syslog line, without its line terminator

        Returns:
            A ValidationResult; a grammar mismatch is a single hard violation,
            every other check contributes its violations independently
        """
        data = to_bytes(message)
        tracer = get_tracer()

        with tracer.start_as_current_span(
            "rfc5424_message_validation",
            attributes={"message.length": len(data)},
        ) as span:
            result = self._validate(data)
            span.set_attribute("validation.compliant", result.compliant)
            span.set_attribute("validation.violation_count", len(result.violations))

        self.logger.debug(
            "Message validated",
            extra={
                "message_length": len(data),
                "compliant": result.compliant,
                "violation_count": len(result.violations),
            },
        )
        return result

    def _validate(self, data: bytes) -> ValidationResult:
        result = ValidationResult()

        fields = match_fields(data)
        if fields is None:
            result.add(
                Violation(
                    kind=ViolationKind.STRUCTURAL_MISMATCH,
                    severity=Severity.HARD,
                    field="MESSAGE",
                    message="message does not match the RFC 5424 grammar",
                    actual=data.decode("utf-8", "replace"),
                )
            )
            return result

        if not PRIVAL_MIN <= fields.prival <= PRIVAL_MAX:
            result.add(
                Violation(
                    kind=ViolationKind.FIELD_RANGE,
                    severity=Severity.SOFT,
                    field="PRIVAL",
                    message="PRIVAL is out of range",
                    expected=f"{PRIVAL_MIN}..{PRIVAL_MAX}",
                    actual=str(fields.prival),
                )
            )

        if fields.version != VERSION:
            result.add(
                Violation(
                    kind=ViolationKind.FIELD_RANGE,
                    severity=Severity.SOFT,
                    field="VERSION",
                    message="VERSION is not 1",
                    expected=VERSION.decode(),
                    actual=fields.version.decode("ascii"),
                )
            )

        result.extend(self.timestamp_validator.validate(fields.timestamp))
        result.extend(self.structured_data_validator.validate(fields.structured_data))

        # startswith never reads past the end of a MSG shorter than the BOM
        if fields.msg.startswith(UTF8_BOM):
            result.extend(self.utf8_validator.validate(fields.msg, field="MSG"))

        return result
