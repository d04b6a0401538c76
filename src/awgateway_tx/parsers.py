#!/usr/bin/env python3
"""AW Gateway - sensor value decoders.

Each decoder is given exactly the bytes of one live-data record (sans its type id)
and returns a list of values, one per field of the record. A decoder will raise
DecodeLength if the slice is not the size it expects.

  :kind:                               | :encoding:         | :scale:
  temp, pressure, speed, rain, uv, pm  | int16, big-endian  | / 10
  humidity, moisture, uv_index, leak   | uint8              | x 1
  rain_large                           | uint32, big-endian | / 10
  distance                             | int8               | x 1
  direction, co2                       | int16, big-endian  | x 1
  utc_time                             | int32, big-endian  | x 1 (seconds)
  count                                | uint32, big-endian | x 1
  gain, light                          | uint32, big-endian | / 100
  datetime                             | 6 raw bytes        | -
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeAlias

from .const import ValueKind
from .helpers import (
    bytes_to_int8,
    bytes_to_int16,
    bytes_to_int32,
    bytes_to_uint8,
    bytes_to_uint16,
    bytes_to_uint32,
    check_length,
)
from .values import SensorValue

ParserT: TypeAlias = Callable[[bytes], list[SensorValue]]

WH45_SIZE = 16


def _tenths(kind: ValueKind, data: bytes) -> list[SensorValue]:
    return [SensorValue(kind, bytes_to_int16(data) / 10.0)]


def _units(kind: ValueKind, data: bytes) -> list[SensorValue]:
    return [SensorValue(kind, float(bytes_to_uint8(data)))]


# int16 / 10
def parse_temp(data: bytes) -> list[SensorValue]:
    return _tenths(ValueKind.TEMPERATURE, data)


def parse_pressure(data: bytes) -> list[SensorValue]:
    return _tenths(ValueKind.PRESSURE, data)


def parse_speed(data: bytes) -> list[SensorValue]:
    return _tenths(ValueKind.SPEED, data)


def parse_rain(data: bytes) -> list[SensorValue]:
    return _tenths(ValueKind.RAIN, data)


def parse_uv(data: bytes) -> list[SensorValue]:
    return _tenths(ValueKind.UV, data)


def parse_pm10(data: bytes) -> list[SensorValue]:
    return _tenths(ValueKind.PM10, data)


def parse_pm25(data: bytes) -> list[SensorValue]:
    return _tenths(ValueKind.PM25, data)


# uint8
def parse_humidity(data: bytes) -> list[SensorValue]:
    return _units(ValueKind.HUMIDITY, data)


def parse_moisture(data: bytes) -> list[SensorValue]:
    return _units(ValueKind.MOISTURE, data)


def parse_uv_index(data: bytes) -> list[SensorValue]:
    return _units(ValueKind.UV_INDEX, data)


def parse_leak(data: bytes) -> list[SensorValue]:
    return _units(ValueKind.LEAK, data)


# uint32 / 10
def parse_rain_large(data: bytes) -> list[SensorValue]:
    return [SensorValue(ValueKind.RAIN_LARGE, bytes_to_uint32(data) / 10.0)]


# uint32 / 100
def parse_gain(data: bytes) -> list[SensorValue]:
    return [SensorValue(ValueKind.GAIN, bytes_to_uint32(data) / 100.0)]


def parse_light(data: bytes) -> list[SensorValue]:
    return [SensorValue(ValueKind.LIGHT, bytes_to_uint32(data) / 100.0)]


def parse_rain_gain(data: bytes) -> list[SensorValue]:
    """Return the rain gain, which the gateway sends as a uint16 / 100."""
    return [SensorValue(ValueKind.GAIN, bytes_to_uint16(data) / 100.0)]


# integers, unscaled
def parse_distance(data: bytes) -> list[SensorValue]:
    return [SensorValue(ValueKind.DISTANCE, bytes_to_int8(data))]


def parse_direction(data: bytes) -> list[SensorValue]:
    return [SensorValue(ValueKind.DIRECTION, bytes_to_int16(data))]


def parse_co2(data: bytes) -> list[SensorValue]:
    return [SensorValue(ValueKind.CO2, bytes_to_int16(data))]


def parse_utc(data: bytes) -> list[SensorValue]:
    return [SensorValue(ValueKind.UTC_TIME, bytes_to_int32(data))]


def parse_count(data: bytes) -> list[SensorValue]:
    return [SensorValue(ValueKind.COUNT, bytes_to_uint32(data))]


def parse_datetime(data: bytes) -> list[SensorValue]:
    """Return the device's datetime, as the 6 raw bytes (the format is unknown)."""
    check_length(data, 6)
    return [SensorValue(ValueKind.DATETIME, bytes(data))]


def parse_skip(data: bytes) -> list[SensorValue]:
    """Consume a block that is unused (e.g. legacy battery info, old firmware)."""
    return [SensorValue.empty()]


# air quality (WH45): temp, humidity, pm10 & pm2.5 & co2 (each as now, and 24h avg)
_WH45_FIELDS: tuple[tuple[int, int, ParserT], ...] = (
    (0, 2, parse_temp),
    (2, 3, parse_humidity),
    (3, 5, parse_pm10),
    (5, 7, parse_pm10),
    (7, 9, parse_pm25),
    (9, 11, parse_pm25),
    (11, 13, parse_co2),
    (13, 15, parse_co2),
)  # the final byte (15) is the sensor's battery, which is reported via metadata


def parse_wh45(data: bytes) -> list[SensorValue]:
    check_length(data, WH45_SIZE)
    return [v for start, end, fnc in _WH45_FIELDS for v in fnc(data[start:end])]
