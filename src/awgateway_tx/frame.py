#!/usr/bin/env python3
"""AW Gateway - a weather gateway protocol client & sensor decoder.

Build the (outbound) command frames, and validate/parse the (inbound) responses.

  FF FF 50 03 53
  ^^^^^ ^^ ^^ ^^
  |     |  |  +-- checksum: sum(cmd, size, payload) & 0xFF
  |     |  +-- size: len(payload) + 3 (2 bytes for some responses)
  |     +-- command
  +-- header
"""

from __future__ import annotations

import logging

from . import exceptions as exc
from .const import COMMANDS_WITH_LARGE_SIZE, HEADER, MAX_PAYLOAD_SIZE, Command
from .helpers import bytes_to_hex, checksum

_LOGGER = logging.getLogger(__name__)


_MIN_FRAME_SIZE = len(HEADER) + 2  # header, command & checksum

_MAC_SLICE = slice(3, 10)  # 7 bytes, as the size byte (3) is included
_FIRMWARE_OFFSET = 4  # the length byte


def build_request(command: int, payload: bytes = b"") -> bytes:
    """Return a command frame: header + command + size + payload + checksum.

    Raise a ValueError if the payload is too long for the size byte.
    """

    if len(payload) > MAX_PAYLOAD_SIZE:
        raise ValueError(
            f"Payload too long: {len(payload)} bytes (max is {MAX_PAYLOAD_SIZE})"
        )

    body = bytes((command, len(payload) + 3)) + payload
    return HEADER + body + bytes((checksum(body),))


def validate_response(frame: bytes, expected_command: int) -> None:
    """Raise a ProtocolError if the response frame is not as expected.

    The command byte must echo the request, and the checksum (the final byte) must
    match the sum of all the bytes from the command through to the payload.
    """

    if len(frame) < _MIN_FRAME_SIZE:
        raise exc.ShortResponse(_MIN_FRAME_SIZE, len(frame))

    if frame[2] != expected_command:
        raise exc.ProtocolMismatch(expected_command, frame[2])

    if (csum := checksum(frame[2:-1])) != frame[-1]:
        raise exc.ChecksumMismatch(csum, frame[-1])


def expected_length(frame: bytes, command: int) -> int | None:
    """Return the total length of a (partial) response, as per its size field.

    Return None if the size field has not yet been received.
    """

    if command in COMMANDS_WITH_LARGE_SIZE:
        if len(frame) < 5:
            return None
        return len(HEADER) + int.from_bytes(frame[3:5], "big")

    if len(frame) < 4:
        return None
    return len(HEADER) + frame[3]


def parse_firmware_version(frame: bytes) -> str:
    """Return the firmware version (e.g. 'GW1000B_V1.7.3') from a response.

    The response is: FF FF 50 <size> <len> <string:len> <checksum>.
    """

    if len(frame) <= _FIRMWARE_OFFSET:
        raise exc.ShortResponse(_FIRMWARE_OFFSET + 1, len(frame))

    length = frame[_FIRMWARE_OFFSET]
    start = _FIRMWARE_OFFSET + 1
    if len(frame) < start + length:
        raise exc.ShortResponse(start + length, len(frame))

    data = frame[start : start + length]
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as err:
        raise exc.InvalidEncoding(data) from err


def parse_station_mac(frame: bytes) -> str:
    """Return the station identifier (MAC address) from a response.

    The identifier is the raw bytes 3-9, formatted as 'XX:XX:XX:XX:XX:XX:XX'.
    """

    if len(frame) < _MAC_SLICE.stop:
        raise exc.ShortResponse(_MAC_SLICE.stop, len(frame))
    return bytes_to_hex(frame[_MAC_SLICE], separator=":")


def describe(frame: bytes) -> str:
    """Return a short description of a frame, for logging."""

    if len(frame) < 3:
        return f"<{bytes_to_hex(frame)}>"
    try:
        name = Command(frame[2]).name
    except ValueError:
        name = f"0x{frame[2]:02X}"
    return f"{name} <{bytes_to_hex(frame)}>"
