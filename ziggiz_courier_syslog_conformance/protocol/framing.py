# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Framing helper for captured syslog streams

# Standard library imports
import logging
import re

from enum import Enum
from typing import List, Optional

# Constants
DEFAULT_END_OF_MSG_MARKER = b"\n"

# Octet count: no leading zero, followed by a single space
OCTET_COUNT_PATTERN = re.compile(rb"^([1-9][0-9]{0,9}) ")


class FramingMode(Enum):
    """
    Enumeration for the syslog message framing mode.

    Values:
        AUTO: Detect the framing of each frame from its leading bytes.
        TRANSPARENT: Octet-counting framing (RFC 6587, each message prefixed with length).
        NON_TRANSPARENT: Delimiter-based framing (one message per line).
    """

    AUTO = "auto"
    TRANSPARENT = "transparent"
    NON_TRANSPARENT = "non_transparent"


class FramingDetectionError(Exception):
    """Exception raised when a stream cannot be split into frames."""


class FramingHelper:
    """
    Splits a byte stream into syslog messages.

    Data is fed in chunks with add_data(); extract_messages() returns every complete
    message found so far. At end of input flush() returns what is left: in
    non-transparent mode a final line without a trailing delimiter is still a message,
    in transparent mode left over bytes are a truncated frame and raise.
    """

    def __init__(
        self,
        framing_mode: FramingMode = FramingMode.NON_TRANSPARENT,
        end_of_msg_marker: bytes = DEFAULT_END_OF_MSG_MARKER,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the framing helper.

        Args:
            framing_mode: The framing mode to use
            end_of_msg_marker: The marker indicating end of message for non-transparent framing
            logger: Logger instance
        """
        if not end_of_msg_marker:
            raise ValueError("End of message marker must not be empty")
        self.framing_mode = framing_mode
        self.end_of_msg_marker = end_of_msg_marker
        self.logger = logger or logging.getLogger(
            "ziggiz_courier_syslog_conformance.protocol.framing"
        )
        self._buffer = bytearray()
        self.frame_count = 0

    @property
    def buffer_size(self) -> int:
        return len(self._buffer)

    def reset(self) -> None:
        """Discard buffered data."""
        self._buffer.clear()
        self.frame_count = 0

    def add_data(self, data: bytes) -> None:
        self._buffer.extend(data)

    def extract_message(self, final: bool = False) -> Optional[bytes]:
        """
        Extract the next complete message, None if the buffer holds no complete message.

        Args:
            final: True at end of input, when no more data will be added

        Raises:
            FramingDetectionError: If the next frame is not valid octet-counted framing
        """
        if not self._buffer:
            return None
        return self._extract_one(final)

    def extract_messages(self) -> List[bytes]:
        """
        Extract complete messages from the buffer.

        Returns:
            A list of complete messages extracted from the buffer

        Raises:
            FramingDetectionError: If the buffer does not start with a valid octet
                count in TRANSPARENT mode
        """
        messages = []
        while True:
            message = self.extract_message()
            if message is None:
                break
            messages.append(message)
        return messages

    def flush(self) -> List[bytes]:
        """
        Extract all remaining messages at end of input.

        Raises:
            FramingDetectionError: If an octet-counted frame is incomplete
        """
        messages = []
        while True:
            message = self.extract_message(final=True)
            if message is None:
                break
            messages.append(message)
        return messages

    def _detect_mode(self, final: bool) -> Optional[FramingMode]:
        """
        Detect the framing of the next frame, None if more data is needed.

        A frame that starts with a non-zero digit is octet-counted once the count is
        followed by a space; anything else is delimiter-based.
        """
        if OCTET_COUNT_PATTERN.match(self._buffer):
            return FramingMode.TRANSPARENT
        if not final and self._buffer.isdigit():
            # Could still be an octet count waiting for its space
            return None
        return FramingMode.NON_TRANSPARENT

    def _extract_one(self, final: bool) -> Optional[bytes]:
        mode = self.framing_mode
        if mode == FramingMode.AUTO:
            mode = self._detect_mode(final)
            if mode is None:
                return None

        if mode == FramingMode.TRANSPARENT:
            message = self._extract_transparent(final)
        else:
            message = self._extract_non_transparent(final)

        if message is not None:
            self.frame_count += 1
        return message

    def _extract_transparent(self, final: bool) -> Optional[bytes]:
        match = OCTET_COUNT_PATTERN.match(self._buffer)
        if not match:
            if final or len(self._buffer) > 11 or not self._buffer.isdigit():
                raise FramingDetectionError(
                    f"Invalid transparent framing format at frame {self.frame_count + 1}"
                )
            return None

        octet_count = int(match.group(1))
        header_length = match.end()
        total_length = header_length + octet_count

        if len(self._buffer) < total_length:
            if final:
                raise FramingDetectionError(
                    f"Truncated frame {self.frame_count + 1}: have "
                    f"{len(self._buffer) - header_length} bytes, need {octet_count} bytes"
                )
            self.logger.debug(
                f"Partial message: have {len(self._buffer)} bytes, need {total_length} bytes"
            )
            return None

        message = bytes(self._buffer[header_length:total_length])
        del self._buffer[:total_length]
        return message

    def _extract_non_transparent(self, final: bool) -> Optional[bytes]:
        marker_pos = self._buffer.find(self.end_of_msg_marker)
        if marker_pos == -1:
            if not final:
                return None
            message = bytes(self._buffer)
            self._buffer.clear()
            return message

        message = bytes(self._buffer[:marker_pos])
        del self._buffer[: marker_pos + len(self.end_of_msg_marker)]
        return message
