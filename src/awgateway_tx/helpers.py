#!/usr/bin/env python3
"""AW Gateway - Protocol/Transport layer - Helper functions."""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Final

from .exceptions import DecodeLength

_BYTE_MASK: Final[int] = 0xFF


def checksum(data: Iterable[int]) -> int:
    """Return the wrapping (mod 256) sum of the bytes."""
    return sum(data) & _BYTE_MASK


def bytes_to_hex(data: bytes, separator: str = " ") -> str:
    """Convert bytes into upper-case hex pairs, e.g. b'\\x01\\xab' -> '01 AB'."""
    return separator.join(f"{b:02X}" for b in data)


def check_length(data: bytes, size: int) -> None:
    """Raise DecodeLength unless the slice is exactly the expected size."""
    if len(data) != size:
        raise DecodeLength(size, len(data))


def bytes_to_int8(data: bytes) -> int:
    """Convert a single byte into a signed integer (2's complement)."""
    check_length(data, 1)
    return int.from_bytes(data, "big", signed=True)


def bytes_to_uint8(data: bytes) -> int:
    check_length(data, 1)
    return data[0]


def bytes_to_int16(data: bytes) -> int:
    """Convert two bytes (big-endian) into a signed integer (2's complement)."""
    check_length(data, 2)
    return int.from_bytes(data, "big", signed=True)


def bytes_to_uint16(data: bytes) -> int:
    check_length(data, 2)
    return int.from_bytes(data, "big")


def bytes_to_int32(data: bytes) -> int:
    """Convert four bytes (big-endian) into a signed integer (2's complement)."""
    check_length(data, 4)
    return int.from_bytes(data, "big", signed=True)


def bytes_to_uint32(data: bytes) -> int:
    check_length(data, 4)
    return int.from_bytes(data, "big")


def round_half_away(value: float, ndigits: int = 2) -> float:
    """Round a float, with ties going away from zero (unlike the builtin round()).

    The value is scaled before rounding, so 23.456 -> 2345.6 -> 2346 -> 23.46.
    """
    factor = 10**ndigits
    scaled = value * factor
    return math.copysign(math.floor(abs(scaled) + 0.5), scaled) / factor
