# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Batch validation of syslog capture files
#
# Every message in a file is validated independently; a failing message never stops
# the remaining ones from being checked. The number of messages found is compared with
# the number the caller expected the emitting component to produce.

# Standard library imports
import logging

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

# Third-party imports
from pydantic import BaseModel, Field

# Local/package imports
from ziggiz_courier_syslog_conformance.config import Config
from ziggiz_courier_syslog_conformance.protocol.framing import (
    FramingDetectionError,
    FramingHelper,
    FramingMode,
)
from ziggiz_courier_syslog_conformance.telemetry import get_tracer
from ziggiz_courier_syslog_conformance.validation.message import MessageValidator
from ziggiz_courier_syslog_conformance.violations import (
    Severity,
    ValidationResult,
    Violation,
    ViolationKind,
)

# Messages handed to the worker pool at a time, per worker
PARALLEL_CHUNK_PER_WORKER = 64


class LineReport(BaseModel):
    """Verdict for one message of a batch; line is the 1-based message index."""

    line: int
    result: ValidationResult

    @property
    def compliant(self) -> bool:
        return self.result.compliant


class BatchReport(BaseModel):
    """
    Outcome of validating a batch of messages.

    Attributes:
        source (str): File path or other description of the input.
        expected_count (int): Number of messages the caller expected.
        observed_count (int): Number of messages found.
        lines (List[LineReport]): Per-message verdicts in input order.
        violations (List[Violation]): Batch level violations (count mismatch, framing).
    """

    source: str
    expected_count: int
    observed_count: int = 0
    lines: List[LineReport] = Field(default_factory=list)
    violations: List[Violation] = Field(default_factory=list)

    @property
    def count_matches(self) -> bool:
        return self.observed_count == self.expected_count

    @property
    def non_compliant_lines(self) -> List[LineReport]:
        return [report for report in self.lines if not report.compliant]

    @property
    def compliant(self) -> bool:
        return not self.violations and not self.non_compliant_lines

    def all_violations(self) -> List[Violation]:
        """Every violation of the batch, per-message ones first in input order."""
        violations = []
        for report in self.lines:
            violations.extend(report.result.violations)
        violations.extend(self.violations)
        return violations

    def summary(self) -> str:
        """Render the observed and expected counts followed by every violation."""
        lines = [
            f"{self.source}: {self.observed_count} messages "
            f"(expected {self.expected_count}), "
            f"{len(self.non_compliant_lines)} non-compliant"
        ]
        lines.extend(v.describe() for v in self.all_violations())
        return "\n".join(lines)


def _chunks(items: Iterable[bytes], size: int) -> Iterator[List[bytes]]:
    chunk: List[bytes] = []
    try:
        for item in items:
            chunk.append(item)
            if len(chunk) == size:
                yield chunk
                chunk = []
    except FramingDetectionError:
        # Messages read before the framing error are still validated
        if chunk:
            yield chunk
        raise
    if chunk:
        yield chunk


class BatchValidator:
    """
    Validates every message of a capture file and checks the message count.
    """

    def __init__(
        self,
        message_validator: Optional[MessageValidator] = None,
        config: Optional[Config] = None,
    ):
        """
        Initialize the batch validator.

        Args:
            message_validator: Validator applied to each message. Built from the
                configuration if not given.
            config: Configuration; defaults are used if not given.
        """
        self.config = config or Config()
        self.message_validator = message_validator or MessageValidator(
            strict_structured_data=self.config.strict_structured_data
        )
        self.framing_mode = FramingMode(self.config.framing_mode)
        self.max_workers = self.config.max_workers
        self.read_chunk_size = self.config.read_chunk_size
        self.logger = logging.getLogger("ziggiz_courier_syslog_conformance.batch")

    def iter_file_messages(self, path: Union[str, Path]) -> Iterator[bytes]:
        """
        Yield the messages of a file without their delimiters.

        The file is opened for the duration of the iteration only.

        Raises:
            OSError: If the file cannot be read
            FramingDetectionError: If octet-counted framing is broken
        """
        helper = FramingHelper(framing_mode=self.framing_mode)
        with open(path, "rb") as log_file:
            while True:
                data = log_file.read(self.read_chunk_size)
                if not data:
                    break
                helper.add_data(data)
                # One frame at a time so frames ahead of a framing error are kept
                message = helper.extract_message()
                while message is not None:
                    yield message
                    message = helper.extract_message()
        yield from helper.flush()

    def validate_file(
        self, path: Union[str, Path], expected_count: int
    ) -> BatchReport:
        """
        Validate every message of a file.

        Args:
            path: Path to the capture file
            expected_count: Number of messages the file should contain

        Returns:
            A BatchReport with per-message verdicts and the count check

        Raises:
            OSError: If the file cannot be opened
        """
        messages = self.iter_file_messages(path)
        try:
            return self.validate_messages(messages, expected_count, source=str(path))
        finally:
            # Releases the file handle even if validation stopped early
            messages.close()

    def validate_messages(
        self,
        messages: Iterable[Union[str, bytes]],
        expected_count: int,
        source: str = "<messages>",
    ) -> BatchReport:
        """
        Validate a sequence of messages.

        Args:
            messages: Candidate messages in order
            expected_count: Number of messages expected
            source: Description of the input used in the report

        Returns:
            A BatchReport with per-message verdicts and the count check
        """
        report = BatchReport(source=source, expected_count=expected_count)
        tracer = get_tracer()

        with tracer.start_as_current_span(
            "rfc5424_batch_validation",
            attributes={"batch.source": source, "batch.expected_count": expected_count},
        ) as span:
            try:
                self._validate_all(messages, report)
            except FramingDetectionError as e:
                report.violations.append(
                    Violation(
                        kind=ViolationKind.FRAMING,
                        severity=Severity.HARD,
                        field="FILE",
                        message=str(e),
                        line=report.observed_count + 1,
                    )
                )
                self.logger.error(
                    "Stopped reading batch input",
                    extra={"source": source, "error": str(e)},
                )

            if not report.count_matches:
                report.violations.append(
                    Violation(
                        kind=ViolationKind.COUNT_MISMATCH,
                        severity=Severity.SOFT,
                        field="FILE",
                        message="number of messages does not match the expected count",
                        expected=str(expected_count),
                        actual=str(report.observed_count),
                    )
                )

            span.set_attribute("batch.observed_count", report.observed_count)
            span.set_attribute("batch.compliant", report.compliant)

        self.logger.info(
            "Batch validation complete",
            extra={
                "source": source,
                "expected_count": expected_count,
                "observed_count": report.observed_count,
                "non_compliant_count": len(report.non_compliant_lines),
            },
        )
        return report

    def _validate_all(
        self, messages: Iterable[Union[str, bytes]], report: BatchReport
    ) -> None:
        if self.max_workers == 1:
            for message in messages:
                self._record(report, self.message_validator.validate(message))
            return

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            for chunk in _chunks(
                messages, self.max_workers * PARALLEL_CHUNK_PER_WORKER
            ):
                # map() yields results in submission order
                for result in executor.map(self.message_validator.validate, chunk):
                    self._record(report, result)

    def _record(self, report: BatchReport, result: ValidationResult) -> None:
        report.observed_count += 1
        line = report.observed_count
        attributed = ValidationResult(
            violations=[v.with_line(line) for v in result.violations],
            aborted=result.aborted,
        )
        report.lines.append(LineReport(line=line, result=attributed))

        if not attributed.compliant:
            self.logger.warning(
                "Non-compliant syslog message",
                extra={
                    "line_number": line,
                    "violation_count": len(attributed.violations),
                },
            )
