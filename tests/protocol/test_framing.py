# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Tests for the framing helper

# Third-party imports
import pytest

# Local/package imports
from ziggiz_courier_syslog_conformance.protocol.framing import (
    FramingDetectionError,
    FramingHelper,
    FramingMode,
)


@pytest.fixture
def non_transparent_helper():
    """Create a FramingHelper in NON_TRANSPARENT mode."""
    return FramingHelper()


@pytest.fixture
def transparent_helper():
    """Create a FramingHelper in TRANSPARENT mode."""
    return FramingHelper(framing_mode=FramingMode.TRANSPARENT)


@pytest.fixture
def auto_helper():
    """Create a FramingHelper in AUTO mode."""
    return FramingHelper(framing_mode=FramingMode.AUTO)


@pytest.mark.unit
class TestNonTransparentFraming:
    """Tests for newline-delimited framing."""

    def test_init_default(self, non_transparent_helper):
        """Test initialization with default parameters."""
        assert non_transparent_helper.framing_mode == FramingMode.NON_TRANSPARENT
        assert non_transparent_helper.end_of_msg_marker == b"\n"
        assert non_transparent_helper.buffer_size == 0

    def test_empty_marker(self):
        """Test that an empty end of message marker is rejected."""
        with pytest.raises(ValueError):
            FramingHelper(end_of_msg_marker=b"")

    def test_lines(self, non_transparent_helper):
        """Test extracting complete lines."""
        non_transparent_helper.add_data(b"first\nsecond\n")
        assert non_transparent_helper.extract_messages() == [b"first", b"second"]
        assert non_transparent_helper.flush() == []
        assert non_transparent_helper.frame_count == 2

    def test_final_line_without_newline(self, non_transparent_helper):
        """Test that a final line without a newline is returned by flush."""
        non_transparent_helper.add_data(b"first\nsecond")
        assert non_transparent_helper.extract_messages() == [b"first"]
        assert non_transparent_helper.flush() == [b"second"]

    def test_blank_line_is_a_message(self, non_transparent_helper):
        """Test that a blank line between messages is kept."""
        non_transparent_helper.add_data(b"first\n\nthird\n")
        assert non_transparent_helper.extract_messages() == [b"first", b"", b"third"]

    def test_carriage_return_kept(self, non_transparent_helper):
        """Test that only the newline is removed."""
        non_transparent_helper.add_data(b"first\r\n")
        assert non_transparent_helper.extract_messages() == [b"first\r"]

    def test_split_across_chunks(self, non_transparent_helper):
        """Test a line delivered in several chunks."""
        non_transparent_helper.add_data(b"fir")
        assert non_transparent_helper.extract_messages() == []
        non_transparent_helper.add_data(b"st\nsec")
        assert non_transparent_helper.extract_messages() == [b"first"]
        assert non_transparent_helper.buffer_size == 3

    def test_custom_marker(self):
        """Test a multi-byte end of message marker."""
        helper = FramingHelper(end_of_msg_marker=b"\r\n")
        helper.add_data(b"first\r\nsecond\r\n")
        assert helper.extract_messages() == [b"first", b"second"]

    def test_reset(self, non_transparent_helper):
        """Test resetting the buffer."""
        non_transparent_helper.add_data(b"first\nsec")
        non_transparent_helper.extract_messages()
        non_transparent_helper.reset()
        assert non_transparent_helper.buffer_size == 0
        assert non_transparent_helper.frame_count == 0


@pytest.mark.unit
class TestTransparentFraming:
    """Tests for octet-counted framing."""

    def test_frames(self, transparent_helper):
        """Test extracting octet-counted frames."""
        transparent_helper.add_data(b"5 hello3 abc")
        assert transparent_helper.extract_messages() == [b"hello", b"abc"]

    def test_partial_frame(self, transparent_helper):
        """Test a frame delivered in several chunks."""
        transparent_helper.add_data(b"5 hel")
        assert transparent_helper.extract_messages() == []
        transparent_helper.add_data(b"lo")
        assert transparent_helper.extract_messages() == [b"hello"]

    def test_partial_count(self, transparent_helper):
        """Test an octet count delivered without its space."""
        transparent_helper.add_data(b"1")
        assert transparent_helper.extract_messages() == []
        transparent_helper.add_data(b"1 hello world")
        assert transparent_helper.extract_messages() == [b"hello world"]

    def test_invalid_format(self, transparent_helper):
        """Test that a frame without an octet count raises."""
        transparent_helper.add_data(b"<34>1 - - - - - -")
        with pytest.raises(FramingDetectionError):
            transparent_helper.extract_messages()

    def test_leading_zero(self, transparent_helper):
        """Test that an octet count with a leading zero raises."""
        transparent_helper.add_data(b"05 hello")
        with pytest.raises(FramingDetectionError):
            transparent_helper.extract_messages()

    def test_truncated_frame_at_end(self, transparent_helper):
        """Test that flush raises for an incomplete frame."""
        transparent_helper.add_data(b"10 abc")
        assert transparent_helper.extract_messages() == []
        with pytest.raises(FramingDetectionError):
            transparent_helper.flush()

    def test_extract_message_before_error(self, transparent_helper):
        """Test that frames ahead of broken framing can be taken one at a time."""
        transparent_helper.add_data(b"5 hellogarbage")
        assert transparent_helper.extract_message() == b"hello"
        assert transparent_helper.frame_count == 1
        with pytest.raises(FramingDetectionError):
            transparent_helper.extract_message()

    def test_extract_message_empty(self, transparent_helper):
        """Test that an empty buffer has no message, even at end of input."""
        assert transparent_helper.extract_message() is None
        assert transparent_helper.extract_message(final=True) is None


@pytest.mark.unit
class TestAutoFraming:
    """Tests for framing detection."""

    def test_mixed_frames(self, auto_helper):
        """Test that each frame is detected on its own."""
        auto_helper.add_data(b"5 hello<34>1 - - - - - -\n")
        assert auto_helper.extract_messages() == [b"hello", b"<34>1 - - - - - -"]

    def test_waits_for_octet_count(self, auto_helper):
        """Test that digits without a space wait for more data."""
        auto_helper.add_data(b"12")
        assert auto_helper.extract_messages() == []
        assert auto_helper.buffer_size == 2

    def test_digits_at_end_are_a_line(self, auto_helper):
        """Test that trailing digits at end of input are a line."""
        auto_helper.add_data(b"12")
        assert auto_helper.flush() == [b"12"]
