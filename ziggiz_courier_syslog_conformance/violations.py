# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Violation records and validation results
#
# Every validator in this package reports its findings as Violation records collected
# in a ValidationResult. Hard violations stop validation of the unit they occur in,
# soft violations are recorded and validation continues.

# Standard library imports
from enum import Enum
from typing import List, Optional

# Third-party imports
from pydantic import BaseModel, ConfigDict, Field


class Severity(Enum):
    """
    How a violation affects the unit being validated.

    Values:
        HARD: Validation of the current unit (message or field) stops.
        SOFT: The violation is recorded and validation continues.
    """

    HARD = "hard"
    SOFT = "soft"


class ViolationKind(Enum):
    """Category of a conformance failure."""

    STRUCTURAL_MISMATCH = "structural_mismatch"
    FIELD_RANGE = "field_range"
    TIMESTAMP_GRAMMAR = "timestamp_grammar"
    TIMESTAMP_RANGE = "timestamp_range"
    STRUCTURED_DATA_STATE = "structured_data_state"
    UTF8 = "utf8"
    COUNT_MISMATCH = "count_mismatch"
    FRAMING = "framing"


def printable_byte(value: int) -> str:
    """Render a single byte value for inclusion in a violation message."""
    if 32 < value < 127:
        return chr(value)
    return f"0x{value:02x}"


class Violation(BaseModel):
    """
    A single conformance failure.

    Attributes:
        kind (ViolationKind): Category of the failure.
        severity (Severity): Whether the failure aborted the unit.
        field (str): Message field the failure belongs to (e.g. "PRIVAL").
        message (str): Human readable description of the rule that was broken.
        position (Optional[int]): 0-based offset of the offending byte within the field.
        character (Optional[str]): Printable form of the offending byte.
        state (Optional[str]): Structured data parser state when the failure occurred.
        expected (Optional[str]): Expected value or bound.
        actual (Optional[str]): Observed value.
        line (Optional[int]): 1-based message index, set by batch validation.
    """

    model_config = ConfigDict(frozen=True)

    kind: ViolationKind
    severity: Severity
    field: str
    message: str
    position: Optional[int] = None
    character: Optional[str] = None
    state: Optional[str] = None
    expected: Optional[str] = None
    actual: Optional[str] = None
    line: Optional[int] = None

    @property
    def is_hard(self) -> bool:
        return self.severity is Severity.HARD

    def with_line(self, line: int) -> "Violation":
        """Return a copy of this violation attributed to a message index."""
        return self.model_copy(update={"line": line})

    def describe(self) -> str:
        """Render the violation as a single line."""
        parts = []
        if self.line is not None:
            parts.append(f"line {self.line}")
        parts.append(self.field)
        if self.position is not None:
            parts.append(f"position {self.position}")
        location = ", ".join(parts)

        text = f"[{self.severity.value}] {self.kind.value} ({location}): {self.message}"
        if self.character is not None:
            text += f" (character {self.character!r})"
        if self.state is not None:
            text += f" in state {self.state}"
        if self.expected is not None or self.actual is not None:
            text += f" (expected {self.expected}, got {self.actual})"
        return text


class ValidationResult(BaseModel):
    """
    Ordered collection of violations produced by validating one unit.

    Attributes:
        violations (List[Violation]): Violations in the order they were found.
        aborted (bool): True if a hard violation stopped validation of the unit.
    """

    violations: List[Violation] = Field(default_factory=list)
    aborted: bool = False

    @property
    def compliant(self) -> bool:
        return not self.violations

    @property
    def hard_violations(self) -> List[Violation]:
        return [v for v in self.violations if v.severity is Severity.HARD]

    @property
    def soft_violations(self) -> List[Violation]:
        return [v for v in self.violations if v.severity is Severity.SOFT]

    def add(self, violation: Violation) -> None:
        """Record a violation; a hard violation marks the unit as aborted."""
        self.violations.append(violation)
        if violation.is_hard:
            self.aborted = True

    def extend(self, other: "ValidationResult") -> None:
        """
        Merge the violations of a sub-unit into this result.

        A hard violation in a sub-unit (such as a single field) only aborted that
        sub-unit, so the aborted flag is not carried over.
        """
        self.violations.extend(other.violations)

    def kinds(self) -> List[ViolationKind]:
        return [v.kind for v in self.violations]

    def summary(self) -> str:
        """Render every violation, one per line, or "compliant"."""
        if self.compliant:
            return "compliant"
        return "\n".join(v.describe() for v in self.violations)
