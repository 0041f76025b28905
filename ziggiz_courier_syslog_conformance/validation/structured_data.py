# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# STRUCTURED-DATA validation
#
# The STRUCTURED-DATA field is checked byte by byte with a finite state machine. The
# machine is described by two tables:
#   - TRANSITIONS: delimiter bytes that move a state to the next state
#   - FALLBACKS: what happens to any other byte in that state, either it is ignored,
#     checked against character rules (soft violations), or rejected (hard violation)
# Completed PARAM-VALUEs are handed to the UTF-8 validator.

# Standard library imports
import logging

from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional, Tuple, Union

# Local/package imports
from ziggiz_courier_syslog_conformance.validation.utf8 import UTF8Validator
from ziggiz_courier_syslog_conformance.violations import (
    Severity,
    ValidationResult,
    Violation,
    ViolationKind,
    printable_byte,
)

SPACE = ord(" ")
QUOTE = ord('"')
EQUALS = ord("=")
BACKSLASH = ord("\\")
OPEN_BRACKET = ord("[")
CLOSE_BRACKET = ord("]")
AT_SIGN = ord("@")
NILVALUE = ord("-")


class StructuredDataState(Enum):
    """States of the STRUCTURED-DATA parser."""

    INIT = "Init"
    ELEMENT_EMPTY = "ElementEmpty"
    ELEMENT_BEGIN = "ElementBegin"
    ID_NAME = "IdName"
    ID_ENTERPRISE_NUMBER = "IdEnterpriseNumber"
    PARAM_NAME = "ParamName"
    PARAM_VALUE_BEGIN = "ParamValueBegin"
    IN_VALUE = "InValue"
    VALUE_END = "ValueEnd"


class CharacterRule(NamedTuple):
    """A constraint on a single byte; check returns True when the byte is allowed."""

    description: str
    check: Callable[[int], bool]


class Fallback(NamedTuple):
    """
    Handling of a byte that has no delimiter transition in a state.

    Attributes:
        severity: None if the byte is accepted (subject to rules), otherwise the
            severity of rejecting it outright
        message: Description used in violations
        rules: Character rules checked when the byte is accepted
    """

    severity: Optional[Severity]
    message: str
    rules: Tuple[CharacterRule, ...] = ()


ABOVE_SPACE = CharacterRule("greater than 32", lambda c: c > 32)
BELOW_DEL = CharacterRule("less than 127", lambda c: c < 127)

SD_NAME_RULES = (
    ABOVE_SPACE,
    BELOW_DEL,
    CharacterRule("not '='", lambda c: c != EQUALS),
    CharacterRule("not '\"'", lambda c: c != QUOTE),
)

ENTERPRISE_NUMBER_RULES = (
    CharacterRule("at least '0'", lambda c: c >= ord("0")),
    CharacterRule("at most '9'", lambda c: c <= ord("9")),
)

PARAM_NAME_RULES = (
    ABOVE_SPACE,
    BELOW_DEL,
    CharacterRule("not ' '", lambda c: c != SPACE),
    CharacterRule("not ']'", lambda c: c != CLOSE_BRACKET),
    CharacterRule("not '\"'", lambda c: c != QUOTE),
)

PARAM_VALUE_RULES = (
    CharacterRule("not '='", lambda c: c != EQUALS),
    CharacterRule("not ']'", lambda c: c != CLOSE_BRACKET),
)

State = StructuredDataState

TRANSITIONS: Dict[StructuredDataState, Dict[int, StructuredDataState]] = {
    State.INIT: {NILVALUE: State.ELEMENT_EMPTY, OPEN_BRACKET: State.ID_NAME},
    State.ELEMENT_EMPTY: {},
    State.ELEMENT_BEGIN: {OPEN_BRACKET: State.ID_NAME},
    State.ID_NAME: {
        AT_SIGN: State.ID_ENTERPRISE_NUMBER,
        CLOSE_BRACKET: State.ELEMENT_BEGIN,
        SPACE: State.PARAM_NAME,
    },
    State.ID_ENTERPRISE_NUMBER: {
        CLOSE_BRACKET: State.ELEMENT_BEGIN,
        SPACE: State.PARAM_NAME,
    },
    State.PARAM_NAME: {EQUALS: State.PARAM_VALUE_BEGIN},
    State.PARAM_VALUE_BEGIN: {QUOTE: State.IN_VALUE},
    State.IN_VALUE: {QUOTE: State.VALUE_END},
    State.VALUE_END: {SPACE: State.PARAM_NAME, CLOSE_BRACKET: State.ELEMENT_BEGIN},
}

FALLBACKS: Dict[StructuredDataState, Fallback] = {
    State.INIT: Fallback(None, "ignored before the first SD-ELEMENT"),
    State.ELEMENT_EMPTY: Fallback(
        Severity.HARD, "an empty STRUCTURED-DATA had more than a '-' character"
    ),
    State.ELEMENT_BEGIN: Fallback(Severity.HARD, "expected '[' to begin an SD-ELEMENT"),
    State.ID_NAME: Fallback(None, "invalid character in SD-ID", SD_NAME_RULES),
    State.ID_ENTERPRISE_NUMBER: Fallback(
        None, "invalid character in enterprise number", ENTERPRISE_NUMBER_RULES
    ),
    State.PARAM_NAME: Fallback(
        None, "invalid character in PARAM-NAME", PARAM_NAME_RULES
    ),
    State.PARAM_VALUE_BEGIN: Fallback(
        Severity.HARD, "expected '\"' to begin PARAM-VALUE"
    ),
    State.IN_VALUE: Fallback(
        None, "unescaped character in PARAM-VALUE", PARAM_VALUE_RULES
    ),
    State.VALUE_END: Fallback(Severity.HARD, "invalid ending of PARAM-VALUE"),
}

STRICT_INIT_FALLBACK = Fallback(
    Severity.HARD, "STRUCTURED-DATA must begin with '-' or '['"
)

# States in which the input may end without leaving an element open
COMPLETE_STATES = frozenset((State.ELEMENT_EMPTY, State.ELEMENT_BEGIN))


def transition(
    state: StructuredDataState, byte: int
) -> Optional[StructuredDataState]:
    """Look up the delimiter transition for a byte, None if the byte has none."""
    return TRANSITIONS[state].get(byte)


class StructuredDataValidator:
    """
    Validates the STRUCTURED-DATA field of an RFC 5424 message.

    By default the validator mirrors the permissive behaviour syslog test harnesses
    have historically relied on: bytes before the first element are ignored and input
    that ends inside an element is not reported. With strict=True both cases are hard
    violations.
    """

    field = "STRUCTURED-DATA"

    def __init__(
        self, strict: bool = False, utf8_validator: Optional[UTF8Validator] = None
    ):
        """
        Initialize the validator.

        Args:
            strict: Reject stray bytes before the first element and unterminated input
            utf8_validator: Validator applied to every completed PARAM-VALUE
        """
        self.strict = strict
        self.utf8_validator = utf8_validator or UTF8Validator()
        self.logger = logging.getLogger(
            "ziggiz_courier_syslog_conformance.validation.structured_data"
        )
        self.fallbacks = dict(FALLBACKS)
        if strict:
            self.fallbacks[State.INIT] = STRICT_INIT_FALLBACK

    def _violation(
        self,
        severity: Severity,
        message: str,
        state: StructuredDataState,
        position: Optional[int] = None,
        byte: Optional[int] = None,
    ) -> Violation:
        return Violation(
            kind=ViolationKind.STRUCTURED_DATA_STATE,
            severity=severity,
            field=self.field,
            message=message,
            position=position,
            character=printable_byte(byte) if byte is not None else None,
            state=state.value,
        )

    def _check_value(
        self, result: ValidationResult, value: bytearray, value_start: int
    ) -> None:
        # Shift positions from the value buffer to the field
        value_result = self.utf8_validator.validate(value, field=self.field)
        for violation in value_result.violations:
            result.add(
                violation.model_copy(
                    update={"position": value_start + violation.position}
                )
            )

    def validate(self, structured_data: Union[str, bytes]) -> ValidationResult:
        """
        Run the state machine over a STRUCTURED-DATA field.

        Args:
            structured_data: The field text, "-" or one or more SD-ELEMENTs

        Returns:
            A ValidationResult; processing stops at the first hard violation
        """
        if isinstance(structured_data, str):
            structured_data = structured_data.encode("utf-8", "surrogatepass")

        result = ValidationResult()
        state = State.INIT
        value: Optional[bytearray] = None
        value_start = 0
        escaped = False

        for position, byte in enumerate(structured_data):
            if state not in TRANSITIONS:
                result.add(
                    self._violation(
                        Severity.HARD,
                        "invalid state reached during SD-ELEMENT parsing",
                        state,
                        position,
                        byte,
                    )
                )
                break

            if state is State.VALUE_END:
                self._check_value(result, value, value_start)
                value = None

            if state is State.IN_VALUE and escaped:
                value.append(byte)
                escaped = False
                continue

            next_state = transition(state, byte)
            if next_state is not None:
                if next_state is State.PARAM_VALUE_BEGIN:
                    value = bytearray()
                elif next_state is State.IN_VALUE:
                    value_start = position + 1
                state = next_state
                continue

            fallback = self.fallbacks[state]
            if fallback.severity is not None:
                result.add(
                    self._violation(
                        fallback.severity, fallback.message, state, position, byte
                    )
                )
                if result.aborted:
                    break
                continue

            for rule in fallback.rules:
                if not rule.check(byte):
                    result.add(
                        self._violation(
                            Severity.SOFT,
                            f"{fallback.message}: must be {rule.description}",
                            state,
                            position,
                            byte,
                        )
                    )

            if state is State.IN_VALUE:
                value.append(byte)
                if byte == BACKSLASH:
                    escaped = True

        if self.strict and not result.aborted and state not in COMPLETE_STATES:
            result.add(
                self._violation(
                    Severity.HARD,
                    "STRUCTURED-DATA ended inside an SD-ELEMENT",
                    state,
                    len(structured_data),
                )
            )

        self.logger.debug(
            "Structured data validated",
            extra={
                "final_state": state.value,
                "violation_count": len(result.violations),
            },
        )
        return result
