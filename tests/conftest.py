# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Pytest configuration file

# Standard library imports
import logging

# Third-party imports
import pytest

VALID_STRUCTURED_DATA = (
    '[exampleSDID@32473 iut="3" eventSource="Application" eventID="1011"]'
)


# Define test categories
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark a test as a unit test")
    config.addinivalue_line(
        "markers", "integration: mark a test as an integration test"
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration after each test."""
    yield
    # Reset root logger after each test
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.WARNING)  # Default level


def build_message(
    prival="165",
    version="1",
    timestamp="2003-10-11T22:14:15.003Z",
    structured_data=VALID_STRUCTURED_DATA,
    msg="An application event",
):
    """Build an RFC 5424 line, every field defaults to a compliant value."""
    line = (
        f"<{prival}>{version} {timestamp} mymachine.example.com evntslog - ID47 "
        f"{structured_data}"
    )
    if msg is not None:
        line += f" {msg}"
    return line


@pytest.fixture
def message_factory():
    """Factory for RFC 5424 lines with individual fields overridden."""
    return build_message


@pytest.fixture
def valid_message():
    """A compliant RFC 5424 message."""
    return build_message()
